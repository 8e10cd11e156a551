"""Persistence — MongoClient, ResultRepository, MongoResultRepository."""

from __future__ import annotations

from typing import Union

from feature_analyzer.config import get_settings
from feature_analyzer.persistence.mongo_client import MongoClient
from feature_analyzer.persistence.result_repository import (
    MongoResultRepository,
    ResultRepository,
)


def get_result_repository() -> Union[ResultRepository, MongoResultRepository]:
    """Result store selected by settings.result_store_backend ("memory" | "mongo")."""
    backend = get_settings().result_store_backend.lower()
    if backend == "mongo":
        return MongoResultRepository()
    if backend != "memory":
        raise ValueError(f"Unknown result store backend: {backend}")
    return ResultRepository()


__all__ = [
    "MongoClient",
    "ResultRepository",
    "MongoResultRepository",
    "get_result_repository",
]
