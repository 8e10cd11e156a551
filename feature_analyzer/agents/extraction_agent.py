"""
Requirements Extraction Agent
Responsibility: lift typed, prioritized requirements out of the feature
title, description, discussion and user input, deduplicated and numbered.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Optional

from feature_analyzer.agents.base_agent import BaseAgent
from feature_analyzer.engine import RequirementExtractor
from feature_analyzer.models.enums import AgentName, AnalysisStatus
from feature_analyzer.models.state import AnalysisGraphState

logger = logging.getLogger(__name__)


class ExtractionAgent(BaseAgent):
    name = AgentName.EXTRACTION

    def __init__(self, extractor: Optional[RequirementExtractor] = None):
        self._extractor = extractor

    def _real_process(self, state: AnalysisGraphState) -> AnalysisGraphState:
        state.status = AnalysisStatus.EXTRACTING_REQUIREMENTS
        extractor = self._extractor or RequirementExtractor()

        state.requirements = extractor.extract(state.params)

        by_type = Counter(r.type.value for r in state.requirements)
        logger.info(
            f"[{self.name.value}] {len(state.requirements)} requirements for "
            f"{state.params.feature_id}: {dict(by_type)}"
        )
        return state
