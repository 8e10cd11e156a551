"""
Routing functions for LangGraph conditional edges.

Each function inspects the current state dict and returns the name
of the next node to execute.
"""

from __future__ import annotations

from typing import Any


# ── After extraction ─────────────────────────────────────

def route_after_extraction(state: dict[str, Any]) -> str:
    """
    Fewer than two requirements → no edges or conflicts are possible,
    go straight to complexity estimation.
    Otherwise → build the dependency graph.
    """
    if len(state.get("requirements") or []) < 2:
        return "complexity_estimation"
    return "dependency_graph"
