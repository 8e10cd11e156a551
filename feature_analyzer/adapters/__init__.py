"""Adapters — external payload shapes converted into engine input."""

from feature_analyzer.adapters.feature_discussion_adapter import FeatureDiscussionAdapter

__all__ = ["FeatureDiscussionAdapter"]
