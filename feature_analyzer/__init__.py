"""
Feature Requirements Analyzer.

    from feature_analyzer import analyze_feature
    result = analyze_feature({"feature_id": "f1", "title": "Export to CSV"})
"""

from feature_analyzer.engine import (
    ComplexityEstimator,
    ContradictionDetector,
    DependencyGraphBuilder,
    RequirementExtractor,
)
from feature_analyzer.exceptions import ConversionError, FeatureAnalysisError, ValidationError
from feature_analyzer.models.schemas import AnalysisResult, FeatureAnalysisParams
from feature_analyzer.orchestration.graph import run_analysis
from feature_analyzer.orchestration.runner import AnalysisRunner

analyze_feature = run_analysis

__all__ = [
    "analyze_feature",
    "run_analysis",
    "AnalysisRunner",
    "AnalysisResult",
    "FeatureAnalysisParams",
    "RequirementExtractor",
    "DependencyGraphBuilder",
    "ComplexityEstimator",
    "ContradictionDetector",
    "FeatureAnalysisError",
    "ValidationError",
    "ConversionError",
]
