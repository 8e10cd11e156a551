"""
Complexity Estimator — heuristic 1-10 implementation-effort scores.

    score   = base[type] × priority multiplier × factor multiplier
    overall = mean(score) × type diversity × high-priority share + 0.2 × edges

Both are clamped to [1, 10] and rounded half-up to one decimal.
An empty requirement set scores 0 overall with no estimations.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from feature_analyzer.config import Settings, get_settings
from feature_analyzer.engine.dependency_graph import DependencyGraphBuilder
from feature_analyzer.engine.keyword_tables import KeywordTables, get_keyword_tables
from feature_analyzer.engine.text_utils import clamp, matching_phrases, round_half_up
from feature_analyzer.models.enums import RequirementPriority
from feature_analyzer.models.schemas import (
    ComplexityEstimation,
    ComplexityReport,
    DependencyEdge,
    Requirement,
)

logger = logging.getLogger(__name__)

MIN_SCORE = 1.0
MAX_SCORE = 10.0


class ComplexityEstimator:
    """Score requirements individually and as a set."""

    def __init__(
        self,
        tables: Optional[KeywordTables] = None,
        settings: Optional[Settings] = None,
        graph_builder: Optional[DependencyGraphBuilder] = None,
    ):
        self._tables = tables or get_keyword_tables()
        self._settings = settings or get_settings()
        self._graph_builder = graph_builder or DependencyGraphBuilder(self._tables, self._settings)

    def estimate(
        self,
        requirements: list[Requirement],
        existing_architecture: Optional[dict[str, Any]] = None,
        dependencies: Optional[list[DependencyEdge]] = None,
    ) -> ComplexityReport:
        if not requirements:
            return ComplexityReport(individual=[], overall=0.0)

        if dependencies is None:
            dependencies = self._graph_builder.build(requirements)

        out_degree = {r.id: 0 for r in requirements}
        in_degree = {r.id: 0 for r in requirements}
        for edge in dependencies:
            if edge.requirement_id in out_degree:
                out_degree[edge.requirement_id] += 1
            if edge.depends_on_id in in_degree:
                in_degree[edge.depends_on_id] += 1

        complex_architecture = is_complex_architecture(existing_architecture)
        individual = [
            self.estimate_requirement(
                req, out_degree[req.id], in_degree[req.id], complex_architecture
            )
            for req in requirements
        ]
        overall = self.overall_score(requirements, individual, len(dependencies))

        logger.debug(f"Estimated {len(individual)} requirements, overall {overall}")
        return ComplexityReport(individual=individual, overall=overall)

    def estimate_requirement(
        self,
        requirement: Requirement,
        dependency_count: int = 0,
        dependent_count: int = 0,
        complex_architecture: bool = False,
    ) -> ComplexityEstimation:
        tables = self._tables.complexity
        score = tables.base_complexity.get(requirement.type, tables.default_base_complexity)
        score *= tables.priority_multiplier.get(requirement.priority, 1.0)

        factors: list[str] = []
        multiplier = 1.0

        # ── Keyword factors ──────────────────────────────
        keyword_factors = tables.factors.get(requirement.type)
        if keyword_factors is not None:
            for keyword in matching_phrases(requirement.description, keyword_factors.high):
                factors.append(f"High: {keyword}")
                multiplier *= tables.high_factor_multiplier
            for keyword in matching_phrases(requirement.description, keyword_factors.medium):
                factors.append(f"Medium: {keyword}")
                multiplier *= tables.medium_factor_multiplier
            for keyword in matching_phrases(requirement.description, keyword_factors.low):
                factors.append(f"Low: {keyword}")
                multiplier *= tables.low_factor_multiplier

        # ── Description length ───────────────────────────
        if len(requirement.description) > self._settings.long_description_chars:
            factors.append("Long requirement description")
            multiplier *= tables.long_description_multiplier

        # ── Graph topology ───────────────────────────────
        if dependency_count > 0:
            factors.append(f"Depends on {dependency_count} other requirement(s)")
            multiplier *= 1 + tables.per_dependency * dependency_count
        if dependent_count > 0:
            factors.append(f"{dependent_count} requirement(s) depend on this")
            multiplier *= 1 + tables.per_dependent * dependent_count

        if complex_architecture:
            factors.append("Integration with complex existing architecture")
            multiplier *= tables.complex_architecture_multiplier

        final = round_half_up(clamp(score * multiplier, MIN_SCORE, MAX_SCORE))
        return ComplexityEstimation(
            requirement_id=requirement.id,
            score=final,
            factors=factors,
            time_estimate=self.time_estimate(final),
        )

    def overall_score(
        self,
        requirements: list[Requirement],
        individual: list[ComplexityEstimation],
        edge_count: int,
    ) -> float:
        if not requirements:
            return 0.0
        tables = self._tables.complexity
        total = len(requirements)

        mean = sum(e.score for e in individual) / len(individual)
        distinct_types = len({r.type for r in requirements})
        high_count = sum(1 for r in requirements if r.priority == RequirementPriority.HIGH)

        overall = (
            mean
            * (1 + tables.per_extra_type_overall * (distinct_types - 1))
            * (1 + tables.high_priority_share_overall * high_count / total)
            + tables.per_edge_overall * edge_count
        )
        return round_half_up(clamp(overall, MIN_SCORE, MAX_SCORE))

    def time_estimate(self, score: float) -> str:
        for bound, label in self._tables.complexity.time_buckets:
            if score <= bound:
                return label
        return self._tables.complexity.overflow_bucket


def is_complex_architecture(existing_architecture: Optional[dict[str, Any]]) -> bool:
    """Only the `complexity` flag of the architecture hint is read."""
    if not isinstance(existing_architecture, dict):
        return False
    return str(existing_architecture.get("complexity", "")).lower() == "high"
