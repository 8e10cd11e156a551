"""
Engine — the four analysis components.

Agents import ONLY from this package:
    from feature_analyzer.engine import RequirementExtractor, DependencyGraphBuilder
"""

from .keyword_tables import KeywordTables, get_keyword_tables
from .requirement_extractor import RequirementExtractor
from .dependency_graph import DependencyGraphBuilder
from .complexity_estimator import ComplexityEstimator
from .contradiction_detector import ContradictionDetector

__all__ = [
    "KeywordTables",
    "get_keyword_tables",
    "RequirementExtractor",
    "DependencyGraphBuilder",
    "ComplexityEstimator",
    "ContradictionDetector",
]
