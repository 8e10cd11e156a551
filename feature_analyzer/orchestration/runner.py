"""
Analysis Runner — run_analysis() behind a result repository.

A stored result is reused only when its input fingerprint matches the
current params.  Computations for the same feature id are serialized;
different feature ids never block each other.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Union

from feature_analyzer.models.schemas import AnalysisResult, FeatureAnalysisParams
from feature_analyzer.orchestration.graph import coerce_params, run_analysis
from feature_analyzer.persistence import get_result_repository
from feature_analyzer.utils.hashing import fingerprint

logger = logging.getLogger(__name__)


class AnalysisRunner:
    """
    Cached, per-feature serialized analysis.

        runner = AnalysisRunner(repository=ResultRepository())
        result = runner.analyze(params)
    """

    def __init__(self, repository: Optional[Any] = None):
        self._repository = repository if repository is not None else get_result_repository()
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    @property
    def repository(self) -> Any:
        return self._repository

    def analyze(
        self,
        params: Union[FeatureAnalysisParams, dict[str, Any]],
        force: bool = False,
    ) -> AnalysisResult:
        """Return the stored result for unchanged params, otherwise compute and store."""
        params = coerce_params(params)
        input_hash = fingerprint(params)

        with self._lock_for(params.feature_id):
            if not force:
                cached = self._repository.load_result(params.feature_id, input_hash)
                if cached is not None:
                    logger.info(f"Reusing stored analysis for {params.feature_id}")
                    return cached

            result = run_analysis(params)
            self._repository.save_result(params.feature_id, result, input_hash)
            return result

    def invalidate(self, feature_id: str) -> bool:
        """Drop the stored result so the next call recomputes."""
        with self._lock_for(feature_id):
            return self._repository.delete_result(feature_id)

    def _lock_for(self, feature_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(feature_id)
            if lock is None:
                lock = self._locks[feature_id] = threading.Lock()
            return lock
