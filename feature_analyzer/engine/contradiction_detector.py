"""
Contradiction Detector — flags requirement pairs whose literal content
appears incompatible.

Rules (each reported independently, never deduplicated against another):
  • action / state   opposite keywords bound to a shared subject keyword
  • quality          opposite quality attributes (global trade-off)
  • numeric          "< N" vs "> M" bounds on the same metric with N ≤ M
  • cross-type       security × usability, performance × costly non-functional
  • priority         opposite keywords between two high-priority requirements
"""

from __future__ import annotations

import logging
import re
from itertools import combinations
from typing import Optional

from feature_analyzer.engine.keyword_tables import KeywordTables, get_keyword_tables
from feature_analyzer.engine.text_utils import contains_any, contains_phrase, shared_keywords
from feature_analyzer.models.enums import ConflictRule, RequirementPriority, RequirementType
from feature_analyzer.models.schemas import Conflict, ContradictionReport, Requirement

logger = logging.getLogger(__name__)

_NUMERIC_BOUND = re.compile(r"([<>]=?)\s*(\d+)|(\d+)\s*([<>]=?)")


class ContradictionDetector:
    """Pairwise contradiction checks over a requirement list."""

    def __init__(self, tables: Optional[KeywordTables] = None):
        self._tables = tables or get_keyword_tables()

    def check(self, requirements: list[Requirement]) -> ContradictionReport:
        if len(requirements) < 2:
            return ContradictionReport(conflicts_found=False, conflicts=[])

        conflicts: list[Conflict] = []
        conflicts.extend(self.check_opposites(requirements))
        conflicts.extend(self.check_numeric(requirements))
        conflicts.extend(self.check_security_usability(requirements))
        conflicts.extend(self.check_performance_tradeoffs(requirements))
        conflicts.extend(self.check_priority_clashes(requirements))

        logger.debug(f"Detected {len(conflicts)} conflicts across {len(requirements)} requirements")
        return ContradictionReport(conflicts_found=bool(conflicts), conflicts=conflicts)

    # ── Opposite keywords ────────────────────────────────

    def check_opposites(self, requirements: list[Requirement]) -> list[Conflict]:
        tables = self._tables.contradiction
        conflicts: list[Conflict] = []

        for first, second in combinations(requirements, 2):
            a, b = first.description, second.description
            subject = shared_keywords(a, b)

            if subject:
                for word1, word2 in tables.action_pairs:
                    if _opposed(a, b, word1, word2):
                        conflicts.append(self._conflict(
                            ConflictRule.ACTION,
                            f'Conflicting actions: "{word1}" vs "{word2}" for {", ".join(subject)}',
                            [first.id, second.id],
                        ))
                for word1, word2 in tables.state_pairs:
                    if _opposed(a, b, word1, word2):
                        conflicts.append(self._conflict(
                            ConflictRule.STATE,
                            f'Conflicting states: "{word1}" vs "{word2}" for {", ".join(subject)}',
                            [first.id, second.id],
                        ))

            for word1, word2 in tables.quality_pairs:
                if _opposed(a, b, word1, word2):
                    conflicts.append(self._conflict(
                        ConflictRule.QUALITY,
                        f'Conflicting quality attributes: "{word1}" vs "{word2}"',
                        [first.id, second.id],
                    ))
        return conflicts

    # ── Numeric thresholds ───────────────────────────────

    def check_numeric(self, requirements: list[Requirement]) -> list[Conflict]:
        groups: dict[str, list[tuple[Requirement, str, int]]] = {}
        for req in requirements:
            bound = _numeric_bound(req.description)
            if bound is None:
                continue
            operator, value = bound
            for metric in self._tables.contradiction.metrics:
                if contains_phrase(req.description, metric):
                    groups.setdefault(metric, []).append((req, operator, value))

        conflicts: list[Conflict] = []
        for metric in self._tables.contradiction.metrics:
            for (req1, op1, v1), (req2, op2, v2) in combinations(groups.get(metric, []), 2):
                if op1.startswith("<") and op2.startswith(">"):
                    clash = v1 <= v2
                elif op1.startswith(">") and op2.startswith("<"):
                    clash = v2 <= v1
                else:
                    clash = False
                if clash:
                    conflicts.append(self._conflict(
                        ConflictRule.NUMERIC,
                        f'Numeric conflict for {metric}: "{req1.description}" vs "{req2.description}"',
                        [req1.id, req2.id],
                        metric=metric,
                    ))
        return conflicts

    # ── Cross-type tensions ──────────────────────────────

    def check_security_usability(self, requirements: list[Requirement]) -> list[Conflict]:
        tables = self._tables.contradiction
        security = [
            r for r in requirements
            if r.type == RequirementType.SECURITY
            and contains_any(r.description, tables.security_action_keywords)
        ]
        usability = [
            r for r in requirements
            if r.type == RequirementType.USER_INTERFACE
            and contains_any(r.description, tables.usability_keywords)
        ]
        return [
            self._conflict(
                ConflictRule.SECURITY_USABILITY,
                f'Potential security-usability conflict: "{sec.description}" vs "{ui.description}"',
                [sec.id, ui.id],
            )
            for sec in security
            for ui in usability
        ]

    def check_performance_tradeoffs(self, requirements: list[Requirement]) -> list[Conflict]:
        tables = self._tables.contradiction
        conflicts: list[Conflict] = []
        for perf in requirements:
            if perf.type != RequirementType.PERFORMANCE:
                continue
            if not contains_any(perf.description, tables.performance_speed_keywords):
                continue
            for other in requirements:
                if other.id == perf.id or other.type == RequirementType.FUNCTIONAL:
                    continue
                costly = tables.costly_keywords.get(other.type, ())
                if contains_any(other.description, costly):
                    conflicts.append(self._conflict(
                        ConflictRule.PERFORMANCE_TRADEOFF,
                        f"Potential performance-{other.type.value} conflict: "
                        f'"{perf.description}" vs "{other.description}"',
                        [perf.id, other.id],
                        type=other.type.value,
                    ))
        return conflicts

    # ── Priority clash ───────────────────────────────────

    def check_priority_clashes(self, requirements: list[Requirement]) -> list[Conflict]:
        tables = self._tables.contradiction
        all_pairs = (*tables.action_pairs, *tables.state_pairs, *tables.quality_pairs)
        high = [r for r in requirements if r.priority == RequirementPriority.HIGH]

        conflicts: list[Conflict] = []
        for first, second in combinations(high, 2):
            a, b = first.description, second.description
            if a == b or not shared_keywords(a, b):
                continue
            if any(_opposed(a, b, w1, w2) for w1, w2 in all_pairs):
                conflicts.append(self._conflict(
                    ConflictRule.PRIORITY,
                    f'Priority conflict between high-priority requirements: "{a}" vs "{b}"',
                    [first.id, second.id],
                ))
        return conflicts

    # ── Helpers ──────────────────────────────────────────

    def _conflict(
        self,
        rule: ConflictRule,
        description: str,
        related: list[str],
        **template_values: str,
    ) -> Conflict:
        options = [
            option.format(**template_values) if template_values else option
            for option in self._tables.contradiction.resolution_options.get(rule, ())
        ]
        return Conflict(
            description=description,
            related_requirements=related,
            resolution_options=options,
            rule=rule,
        )


def _opposed(a: str, b: str, word1: str, word2: str) -> bool:
    return (
        (contains_phrase(a, word1) and contains_phrase(b, word2))
        or (contains_phrase(a, word2) and contains_phrase(b, word1))
    )


def _numeric_bound(text: str) -> Optional[tuple[str, int]]:
    """First comparison operator + integer in text, e.g. ('<', 100)."""
    match = _NUMERIC_BOUND.search(text)
    if match is None:
        return None
    operator = match.group(1) or match.group(4)
    value = match.group(2) or match.group(3)
    return operator, int(value)
