"""
Application configuration using Pydantic Settings.
All environment-specific values and heuristic thresholds are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Feature Requirements Analyzer"
    debug: bool = False

    # ── Extraction ───────────────────────────────────────
    dedup_similarity_threshold: float = 0.8  # drop when similarity is above this
    min_sentence_chars: int = 10
    fallback_sentence_chars: int = 20  # response fallback sentence must be longer

    # ── Dependency graph ─────────────────────────────────
    keyword_similarity_threshold: float = 0.5
    marker_overlap_ratio: float = 0.3
    min_marker_overlap: int = 2
    constraint_min_shared_keywords: int = 2

    # ── Complexity ───────────────────────────────────────
    long_description_chars: int = 200

    # ── Keyword tables ───────────────────────────────────
    keyword_tables_path: str = ""  # optional JSON override of the built-in tables

    # ── Result store ─────────────────────────────────────
    result_store_backend: str = "memory"  # "memory" | "mongo"
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "feature_analyzer"
    mongodb_collection: str = "analysis_results"

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
