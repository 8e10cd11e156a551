"""
Result Repository — persistence layer for completed analyses.
Results are keyed by feature id and stored with the fingerprint of the
params that produced them, so callers can tell a stale entry from a
reusable one.
"""

from __future__ import annotations

import logging
import threading
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Optional

from feature_analyzer.models.schemas import AnalysisResult
from feature_analyzer.persistence.mongo_client import MongoClient

logger = logging.getLogger(__name__)


class ResultRepository:
    """Save/load AnalysisResult records in an in-memory dict."""

    def __init__(self):
        self._memory_store: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def save_result(self, feature_id: str, result: AnalysisResult, input_hash: str) -> None:
        """Store (or replace) the result for a feature."""
        record = {
            "feature_id": feature_id,
            "input_hash": input_hash,
            "result": result.model_dump(mode="json"),
            "saved_at": datetime.now(timezone.utc),
        }
        with self._lock:
            self._memory_store[feature_id] = record
        logger.info(f"Saved analysis result for {feature_id}")

    def load_result(self, feature_id: str, input_hash: str | None = None) -> AnalysisResult | None:
        """
        Load the stored result for a feature.
        With input_hash, a result produced from different params counts as missing.
        """
        with self._lock:
            record = deepcopy(self._memory_store.get(feature_id))
        return _from_record(record, input_hash)

    def list_features(self) -> list[str]:
        """List all feature ids in the store."""
        with self._lock:
            return list(self._memory_store.keys())

    def delete_result(self, feature_id: str) -> bool:
        """Remove a stored result; returns whether one existed."""
        with self._lock:
            return self._memory_store.pop(feature_id, None) is not None


class MongoResultRepository:
    """
    Same interface as ResultRepository, backed by a MongoDB collection.
    Documents: {feature_id, input_hash, result, saved_at}.
    """

    def __init__(self, collection: Any = None, client: Optional[MongoClient] = None):
        if collection is None:
            collection = (client or MongoClient()).get_collection()
        self._collection = collection

    def save_result(self, feature_id: str, result: AnalysisResult, input_hash: str) -> None:
        document = {
            "feature_id": feature_id,
            "input_hash": input_hash,
            "result": result.model_dump(mode="json"),
            "saved_at": datetime.now(timezone.utc),
        }
        self._collection.replace_one({"feature_id": feature_id}, document, upsert=True)
        logger.info(f"Saved analysis result for {feature_id} to MongoDB")

    def load_result(self, feature_id: str, input_hash: str | None = None) -> AnalysisResult | None:
        document = self._collection.find_one({"feature_id": feature_id})
        return _from_record(document, input_hash)

    def list_features(self) -> list[str]:
        return [doc["feature_id"] for doc in self._collection.find({}, {"feature_id": 1})]

    def delete_result(self, feature_id: str) -> bool:
        outcome = self._collection.delete_one({"feature_id": feature_id})
        return outcome.deleted_count > 0


def _from_record(record: dict[str, Any] | None, input_hash: str | None) -> AnalysisResult | None:
    if not record:
        return None
    if input_hash is not None and record.get("input_hash") != input_hash:
        logger.debug(f"Stored result for {record.get('feature_id')} is stale")
        return None
    return AnalysisResult.model_validate(record["result"])
