"""
Complexity Estimation Agent
Responsibility: score every requirement and the set as a whole, reusing
the edges produced by the dependency graph stage.
"""

from __future__ import annotations

import logging
from typing import Optional

from feature_analyzer.agents.base_agent import BaseAgent
from feature_analyzer.engine import ComplexityEstimator
from feature_analyzer.models.enums import AgentName, AnalysisStatus
from feature_analyzer.models.state import AnalysisGraphState

logger = logging.getLogger(__name__)


class ComplexityAgent(BaseAgent):
    name = AgentName.COMPLEXITY

    def __init__(self, estimator: Optional[ComplexityEstimator] = None):
        self._estimator = estimator

    def _real_process(self, state: AnalysisGraphState) -> AnalysisGraphState:
        state.status = AnalysisStatus.ESTIMATING_COMPLEXITY
        estimator = self._estimator or ComplexityEstimator()

        report = estimator.estimate(
            state.requirements,
            existing_architecture=state.params.existing_architecture,
            dependencies=state.dependencies,
        )
        state.complexity = report.individual
        state.overall_complexity = report.overall
        state.status = AnalysisStatus.COMPLETED

        logger.info(
            f"[{self.name.value}] overall {report.overall} across "
            f"{len(report.individual)} requirements"
        )
        return state
