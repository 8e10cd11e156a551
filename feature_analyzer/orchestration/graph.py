"""
LangGraph State Machine — the four-stage feature analysis pipeline.

    extraction → dependency graph → contradictions → complexity

Fewer than two extracted requirements skip straight from extraction to
complexity estimation.  All nodes delegate to agent.process(state), which
returns an updated state dict that LangGraph merges automatically.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from langgraph.graph import END, StateGraph
from pydantic import ValidationError as PydanticValidationError

from feature_analyzer.agents import (
    ComplexityAgent,
    ContradictionAgent,
    DependencyGraphAgent,
    ExtractionAgent,
)
from feature_analyzer.exceptions import ValidationError
from feature_analyzer.models.schemas import AnalysisResult, FeatureAnalysisParams
from feature_analyzer.models.state import AnalysisGraphState
from feature_analyzer.orchestration.transitions import route_after_extraction

logger = logging.getLogger(__name__)

# ── Instantiate agents (singletons for the graph) ────────

_extraction = ExtractionAgent()
_dependency_graph = DependencyGraphAgent()
_contradictions = ContradictionAgent()
_complexity = ComplexityAgent()


# ── Build the graph ──────────────────────────────────────

def build_graph():
    """
    Construct and compile the analysis state machine.
    Returns a compiled graph ready to invoke.
    """
    graph = StateGraph(dict)

    # ── Add nodes ────────────────────────────────────────
    graph.add_node("requirements_extraction", _extraction.process)
    graph.add_node("dependency_graph", _dependency_graph.process)
    graph.add_node("contradiction_detection", _contradictions.process)
    graph.add_node("complexity_estimation", _complexity.process)

    # ── Set entry point ──────────────────────────────────
    graph.set_entry_point("requirements_extraction")

    # ── Add edges ────────────────────────────────────────

    # Extraction → conditional (enough requirements to relate?)
    graph.add_conditional_edges(
        "requirements_extraction",
        route_after_extraction,
        {
            "dependency_graph": "dependency_graph",
            "complexity_estimation": "complexity_estimation",
        },
    )

    # Graph → contradictions → complexity (linear)
    graph.add_edge("dependency_graph", "contradiction_detection")
    graph.add_edge("contradiction_detection", "complexity_estimation")
    graph.add_edge("complexity_estimation", END)

    return graph.compile()


# ── Convenience runner ───────────────────────────────────

def coerce_params(params: Union[FeatureAnalysisParams, dict[str, Any]]) -> FeatureAnalysisParams:
    """Accept a params model or a plain mapping; malformed input raises ValidationError."""
    if isinstance(params, FeatureAnalysisParams):
        return params
    try:
        return FeatureAnalysisParams.model_validate(params)
    except PydanticValidationError as e:
        raise ValidationError(f"Malformed analysis params: {e}") from e


def run_analysis(params: Union[FeatureAnalysisParams, dict[str, Any]]) -> AnalysisResult:
    """
    Build the graph and run it end-to-end for one feature.
    Any stage failure propagates; no partial result is returned.
    """
    params = coerce_params(params)
    compiled = build_graph()

    state = AnalysisGraphState(params=params).model_dump()

    logger.info("═" * 60)
    logger.info(f"  FEATURE ANALYSIS STARTING — {params.feature_id}")
    logger.info("═" * 60)

    final_state = compiled.invoke(state)
    result = AnalysisGraphState(**final_state).to_result()

    logger.info("═" * 60)
    logger.info(
        f"  ANALYSIS FINISHED — {len(result.requirements)} requirements, "
        f"{len(result.conflicts)} conflicts, overall complexity {result.overall_complexity}"
    )
    logger.info("═" * 60)

    return result
