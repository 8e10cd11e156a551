"""
Dependency Graph Agent
Responsibility: discover directed edges between the extracted requirements
and break every cycle.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Optional

from feature_analyzer.agents.base_agent import BaseAgent
from feature_analyzer.engine import DependencyGraphBuilder
from feature_analyzer.models.enums import AgentName, AnalysisStatus
from feature_analyzer.models.state import AnalysisGraphState

logger = logging.getLogger(__name__)


class DependencyGraphAgent(BaseAgent):
    name = AgentName.DEPENDENCY_GRAPH

    def __init__(self, builder: Optional[DependencyGraphBuilder] = None):
        self._builder = builder

    def _real_process(self, state: AnalysisGraphState) -> AnalysisGraphState:
        state.status = AnalysisStatus.BUILDING_DEPENDENCY_GRAPH
        builder = self._builder or DependencyGraphBuilder()

        state.dependencies = builder.build(state.requirements)

        by_kind = Counter(e.kind.value for e in state.dependencies)
        logger.info(f"[{self.name.value}] {len(state.dependencies)} edges: {dict(by_kind)}")
        return state
