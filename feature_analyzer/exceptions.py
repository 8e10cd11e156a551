"""
Error kinds raised by the analysis engine.

Both concrete errors subclass ValueError: they always signal bad input,
and callers should only retry after correcting it.
"""

from __future__ import annotations


class FeatureAnalysisError(Exception):
    """Base class for every error raised by the analyzer."""


class ValidationError(FeatureAnalysisError, ValueError):
    """No requirement source produced a requirement, or params are malformed."""


class ConversionError(FeatureAnalysisError, ValueError):
    """An external discussion payload could not be adapted to FeatureDiscussion."""
