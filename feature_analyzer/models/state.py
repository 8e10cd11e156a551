"""
LangGraph shared state — the single object that flows through every stage.

Design rules:
  1. Each field is "owned" by one agent (see comments).
  2. Agents may READ any field but should only WRITE to their owned fields.
  3. The state is versioned for audit purposes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .enums import AnalysisStatus
from .schemas import (
    AnalysisResult,
    AuditEntry,
    ComplexityEstimation,
    Conflict,
    DependencyEdge,
    FeatureAnalysisParams,
    Requirement,
)


class AnalysisGraphState(BaseModel):
    """
    The shared graph state passed through every LangGraph node.
    Hydrated from / dumped to a dict at each node boundary.
    """

    # ── Pipeline control ─────────────────────────────────
    status: AnalysisStatus = AnalysisStatus.RECEIVED
    current_agent: str = ""
    error_message: str = ""
    state_version: int = 0

    # ── Input (owner: caller) ────────────────────────────
    params: FeatureAnalysisParams

    # ── Extraction (owner: requirements_extraction) ──────
    requirements: list[Requirement] = Field(default_factory=list)

    # ── Dependency graph (owner: dependency_graph) ───────
    dependencies: list[DependencyEdge] = Field(default_factory=list)

    # ── Contradictions (owner: contradiction_detection) ──
    conflicts_found: bool = False
    conflicts: list[Conflict] = Field(default_factory=list)

    # ── Complexity (owner: complexity_estimation) ────────
    complexity: list[ComplexityEstimation] = Field(default_factory=list)
    overall_complexity: float = 0.0

    # ── Audit trail (append-only) ────────────────────────
    audit_trail: list[AuditEntry] = Field(default_factory=list)

    # ── Helpers ──────────────────────────────────────────

    def add_audit(self, agent: str, action: str, details: str = "") -> None:
        self.state_version += 1
        self.audit_trail.append(
            AuditEntry(
                agent=agent,
                action=action,
                details=details,
                state_version=self.state_version,
            )
        )

    def to_result(self) -> AnalysisResult:
        """Assemble the public result from the finished state."""
        return AnalysisResult(
            feature_id=self.params.feature_id,
            requirements=self.requirements,
            dependencies=self.dependencies,
            conflicts_found=self.conflicts_found,
            conflicts=self.conflicts,
            complexity=self.complexity,
            overall_complexity=self.overall_complexity,
        )
