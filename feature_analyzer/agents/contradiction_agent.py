"""
Contradiction Detection Agent
Responsibility: flag requirement pairs that appear incompatible.
"""

from __future__ import annotations

import logging
from typing import Optional

from feature_analyzer.agents.base_agent import BaseAgent
from feature_analyzer.engine import ContradictionDetector
from feature_analyzer.models.enums import AgentName, AnalysisStatus
from feature_analyzer.models.state import AnalysisGraphState

logger = logging.getLogger(__name__)


class ContradictionAgent(BaseAgent):
    name = AgentName.CONTRADICTIONS

    def __init__(self, detector: Optional[ContradictionDetector] = None):
        self._detector = detector

    def _real_process(self, state: AnalysisGraphState) -> AnalysisGraphState:
        state.status = AnalysisStatus.DETECTING_CONTRADICTIONS
        detector = self._detector or ContradictionDetector()

        report = detector.check(state.requirements)
        state.conflicts_found = report.conflicts_found
        state.conflicts = report.conflicts

        if report.conflicts_found:
            for conflict in report.conflicts:
                logger.warning(
                    f"[{self.name.value}] {conflict.rule.value}: {conflict.description} "
                    f"({', '.join(conflict.related_requirements)})"
                )
        else:
            logger.info(f"[{self.name.value}] No conflicts detected")
        return state
