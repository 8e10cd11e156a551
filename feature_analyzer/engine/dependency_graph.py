"""
Dependency Graph Builder — discovers directed edges between requirements
with five additive heuristic passes, then breaks cycles until the edge set
is a DAG.

Passes (discovery order = pass order, then requirement order):
  1. Explicit reference   "req_3", "requirement 3", "req #3"     → requires
  2. Marker + keywords    "depends on …" followed by its keywords → requires
  3. Keyword similarity   priority / type direction rules        → related_to
  4. Sequence / source    adjacent, same source, "then …"        → potentially_follows
  5. Type constraint      functional vs non-functional           → constrained_by

Cycle breaking removes the lowest-confidence edge of a detected cycle
(most recently discovered on ties) and re-detects from scratch.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

import networkx as nx

from feature_analyzer.config import Settings, get_settings
from feature_analyzer.engine.keyword_tables import KeywordTables, get_keyword_tables
from feature_analyzer.engine.text_utils import (
    contains_any,
    find_phrase,
    significant_keywords,
    starts_with_phrase,
)
from feature_analyzer.models.enums import DependencyKind, RequirementType
from feature_analyzer.models.schemas import DependencyEdge, Requirement

logger = logging.getLogger(__name__)

_REQ_NUMBER = re.compile(r"^req_(\d+)$")


class DependencyGraphBuilder:
    """Build an acyclic dependency edge list for a requirement set."""

    def __init__(
        self,
        tables: Optional[KeywordTables] = None,
        settings: Optional[Settings] = None,
    ):
        self._tables = tables or get_keyword_tables()
        self._settings = settings or get_settings()

    def build(self, requirements: list[Requirement]) -> list[DependencyEdge]:
        if len(requirements) < 2:
            return []

        keywords = {r.id: significant_keywords(r.description) for r in requirements}
        found = _EdgeSet()

        self._explicit_references(requirements, found)
        self._marker_overlap(requirements, keywords, found)
        self._keyword_similarity(requirements, keywords, found)
        self._sequence(requirements, found)
        self._type_constraints(requirements, keywords, found)

        logger.debug(f"Discovered {len(found.edges)} candidate edges")
        return self.resolve_cycles(found.edges, [r.id for r in requirements])

    # ── Pass 1: explicit reference ───────────────────────

    def _explicit_references(self, requirements: list[Requirement], found: "_EdgeSet") -> None:
        for current in requirements:
            for other in requirements:
                if other.id == current.id:
                    continue
                if _reference_pattern(other.id).search(current.description):
                    found.add(
                        current.id, other.id, DependencyKind.REQUIRES,
                        f"Explicit reference to {other.id}",
                    )
                    found.explicit.add((current.id, other.id))

    # ── Pass 2: marker + keyword overlap ─────────────────

    def _marker_overlap(
        self,
        requirements: list[Requirement],
        keywords: dict[str, list[str]],
        found: "_EdgeSet",
    ) -> None:
        ratio = self._settings.marker_overlap_ratio
        minimum = self._settings.min_marker_overlap

        for current in requirements:
            text = current.description.lower()
            tails = []
            for marker in self._tables.dependency.dependency_markers:
                match = find_phrase(text, marker)
                if match is not None:
                    tails.append((marker, text[match.end():]))
            if not tails:
                continue

            for other in requirements:
                if other.id == current.id or (current.id, other.id) in found.explicit:
                    continue
                other_keywords = keywords[other.id]
                needed = max(minimum, ratio * len(other_keywords))
                for marker, tail in tails:
                    matched = [k for k in other_keywords if k in tail]
                    if len(matched) >= needed:
                        found.add(
                            current.id, other.id, DependencyKind.REQUIRES,
                            f'Dependency marker "{marker}" followed by keywords: {", ".join(matched)}',
                        )
                        break

    # ── Pass 3: keyword similarity + direction ───────────

    def _keyword_similarity(
        self,
        requirements: list[Requirement],
        keywords: dict[str, list[str]],
        found: "_EdgeSet",
    ) -> None:
        threshold = self._settings.keyword_similarity_threshold

        for current in requirements:
            current_keywords = keywords[current.id]
            for other in requirements:
                if other.id == current.id or found.linked(current.id, other.id):
                    continue
                other_keywords = keywords[other.id]
                smaller = min(len(current_keywords), len(other_keywords))
                if smaller == 0:
                    continue

                other_set = set(other_keywords)
                shared = [k for k in current_keywords if k in other_set]
                if len(shared) / smaller <= threshold:
                    continue

                if self._depends_by_priority(current, other) or self._depends_by_type(current, other):
                    found.add(
                        current.id, other.id, DependencyKind.RELATED_TO,
                        f"Semantic relation based on similar keywords: {', '.join(shared)}",
                    )

    def _depends_by_priority(self, current: Requirement, other: Requirement) -> bool:
        """Lower-priority requirements depend on higher-priority ones."""
        rank = self._tables.dependency.priority_rank
        if current.priority not in rank or other.priority not in rank:
            return False
        return rank[current.priority] < rank[other.priority]

    def _depends_by_type(self, current: Requirement, other: Requirement) -> bool:
        return (current.type, other.type) in self._tables.dependency.type_direction_rules

    # ── Pass 4: sequence / source ────────────────────────

    def _sequence(self, requirements: list[Requirement], found: "_EdgeSet") -> None:
        tables = self._tables.dependency
        for previous, current in zip(requirements, requirements[1:]):
            if current.source != previous.source:
                continue
            follows = any(starts_with_phrase(current.description, m) for m in tables.sequence_markers)
            if not follows and not contains_any(current.description, tables.part_whole_markers):
                continue
            if (current.id, previous.id) in found.pairs:
                continue
            found.add(
                current.id, previous.id, DependencyKind.POTENTIALLY_FOLLOWS,
                "Sequential dependency based on requirement order and content analysis",
            )

    # ── Pass 5: type constraint ──────────────────────────

    def _type_constraints(
        self,
        requirements: list[Requirement],
        keywords: dict[str, list[str]],
        found: "_EdgeSet",
    ) -> None:
        minimum = self._settings.constraint_min_shared_keywords
        for current in requirements:
            if current.type != RequirementType.FUNCTIONAL:
                continue
            current_keywords = set(keywords[current.id])
            for other in requirements:
                if other.id == current.id or other.type == RequirementType.FUNCTIONAL:
                    continue
                if len(current_keywords & set(keywords[other.id])) >= minimum:
                    found.add(
                        current.id, other.id, DependencyKind.CONSTRAINED_BY,
                        f"Functional requirement constrained by {other.type.value} requirement",
                    )

    # ── Cycle resolution ─────────────────────────────────

    def resolve_cycles(
        self,
        edges: list[DependencyEdge],
        node_order: Optional[Iterable[str]] = None,
    ) -> list[DependencyEdge]:
        """
        Remove edges until no cycle remains.  Each round rebuilds the graph,
        finds one cycle (traversal starts from nodes in node_order), and drops
        its lowest-confidence edge; ties drop the latest-discovered edge.
        """
        confidence = self._tables.dependency.edge_confidence
        remaining = list(edges)
        order = list(node_order) if node_order is not None else []

        while True:
            graph = nx.MultiDiGraph()
            graph.add_nodes_from(order)
            for index, edge in enumerate(remaining):
                graph.add_edge(edge.requirement_id, edge.depends_on_id, key=index)

            try:
                cycle = nx.find_cycle(graph, source=order or None)
            except nx.NetworkXNoCycle:
                return remaining

            victim = min(
                (key for _, _, key in cycle),
                key=lambda k: (confidence.get(remaining[k].kind, 0), -k),
            )
            dropped = remaining.pop(victim)
            logger.debug(
                f"Breaking cycle: removed {dropped.requirement_id} -> "
                f"{dropped.depends_on_id} ({dropped.kind.value})"
            )


class _EdgeSet:
    """Discovered edges in order, with pair lookups."""

    def __init__(self) -> None:
        self.edges: list[DependencyEdge] = []
        self.pairs: set[tuple[str, str]] = set()
        self.explicit: set[tuple[str, str]] = set()

    def add(self, source: str, target: str, kind: DependencyKind, rationale: str) -> None:
        self.edges.append(DependencyEdge(
            requirement_id=source, depends_on_id=target, kind=kind, rationale=rationale,
        ))
        self.pairs.add((source, target))

    def linked(self, a: str, b: str) -> bool:
        return (a, b) in self.pairs or (b, a) in self.pairs


def _reference_pattern(requirement_id: str) -> re.Pattern[str]:
    pattern = rf"(?<!\w){re.escape(requirement_id)}(?!\w)"
    number = _REQ_NUMBER.match(requirement_id)
    if number:
        pattern += rf"|(?<!\w)(?:requirement|req)\s*(?:number|#)?\s*{number.group(1)}(?!\w|\.\d)"
    return re.compile(pattern, re.IGNORECASE)
