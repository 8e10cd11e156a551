"""
Data schemas produced and consumed by the analysis stages.
Each schema is a clearly-bounded record owned by one stage.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import BaseModel, Field

from .enums import (
    ConflictRule,
    DependencyKind,
    RequirementPriority,
    RequirementType,
)


# ── Input ────────────────────────────────────────────────


class DiscussionPrompt(BaseModel):
    """A question raised while discussing the feature."""
    id: str
    text: str
    category: str = "unknown"  # free-form tag, e.g. "performance-high", "ui"


class DiscussionResponse(BaseModel):
    """An answer to one prompt."""
    id: str
    prompt_id: str
    text: str


class FeatureDiscussion(BaseModel):
    """Structured discussion data in the shape the extractor reads."""
    feature_id: str = ""
    title: str = ""
    prompts: list[DiscussionPrompt] = []
    responses: list[DiscussionResponse] = []
    full_text: str = ""


class FeatureAnalysisParams(BaseModel):
    """Everything one analysis call needs."""
    feature_id: str
    title: str = ""
    description: str = ""
    discussion: Optional[FeatureDiscussion] = None
    discussion_data: Optional[dict[str, Any]] = None  # raw external payload, adapted on extraction
    additional_requirements: list[str] = []
    existing_architecture: Optional[dict[str, Any]] = None  # only "complexity" is read


# ── Extraction ───────────────────────────────────────────


class Requirement(BaseModel):
    """An atomic requirement. Immutable once produced."""
    id: str
    description: str
    type: RequirementType = RequirementType.FUNCTIONAL
    priority: RequirementPriority = RequirementPriority.MEDIUM
    source: str = ""
    notes: Optional[str] = None

    model_config = {"frozen": True}


# ── Dependency graph ─────────────────────────────────────


class DependencyEdge(BaseModel):
    """requirement_id presumes or is constrained by depends_on_id."""
    requirement_id: str
    depends_on_id: str
    kind: DependencyKind = DependencyKind.REQUIRES
    rationale: str = ""

    model_config = {"frozen": True}


# ── Contradictions ───────────────────────────────────────


class Conflict(BaseModel):
    description: str
    related_requirements: list[str]
    resolution_options: list[str] = []
    rule: ConflictRule


class ContradictionReport(BaseModel):
    conflicts_found: bool = False
    conflicts: list[Conflict] = []


# ── Complexity ───────────────────────────────────────────


class ComplexityEstimation(BaseModel):
    requirement_id: str
    score: float  # 1-10
    factors: list[str] = []
    time_estimate: str = ""


class ComplexityReport(BaseModel):
    individual: list[ComplexityEstimation] = []
    overall: float = 0.0  # 0 only for an empty requirement set


# ── Final result ─────────────────────────────────────────


class AnalysisResult(BaseModel):
    feature_id: str
    requirements: list[Requirement] = []
    dependencies: list[DependencyEdge] = []
    conflicts_found: bool = False
    conflicts: list[Conflict] = []
    complexity: list[ComplexityEstimation] = []
    overall_complexity: float = 0.0


# ── Audit Trail ──────────────────────────────────────────


class AuditEntry(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    agent: str
    action: str
    details: str = ""
    state_version: int = 0
