"""
Base agent class that every analysis stage inherits.

Design:
  - `process()` is called by the LangGraph node.
  - `_real_process()` is the single abstract method — override in each agent.
  - Any failure is logged with the stage name and elapsed time, then re-raised
    so the whole analysis aborts with no partial result.
"""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from feature_analyzer.models.enums import AgentName
from feature_analyzer.models.state import AnalysisGraphState

logger = logging.getLogger(__name__)


class BaseAgent(ABC):
    """Abstract base for all analysis agents."""

    name: AgentName  # set in each subclass

    # ── Public entry point (called by LangGraph node) ────

    def process(self, state: dict[str, Any]) -> dict[str, Any]:
        """
        LangGraph calls this as the node function.
        Accepts and returns a dict so LangGraph can merge updates
        into the shared state automatically.
        """
        t0 = time.perf_counter()
        separator = "═" * 70
        logger.info(separator)
        logger.info(f"▶ [{self.name.value}] STARTING")

        _log_state_summary("INPUT STATE", state)

        graph_state = AnalysisGraphState(**state)
        graph_state.current_agent = self.name.value

        try:
            updated = self._real_process(graph_state)
            updated.add_audit(agent=self.name.value, action="completed")

            elapsed = time.perf_counter() - t0
            logger.info(f"✔ [{self.name.value}] COMPLETED in {elapsed:.3f}s")

            out_dict = updated.model_dump()
            _log_state_diff("STATE CHANGES", state, out_dict)
            logger.info(separator)

        except Exception as exc:
            elapsed = time.perf_counter() - t0
            graph_state.error_message = f"[{self.name.value}] {exc}"
            graph_state.add_audit(agent=self.name.value, action="error", details=str(exc))
            logger.exception(f"✘ [{self.name.value}] FAILED after {elapsed:.3f}s: {exc}")
            logger.info(separator)
            raise

        return out_dict

    # ── Subclass hook ────────────────────────────────────

    @abstractmethod
    def _real_process(self, state: AnalysisGraphState) -> AnalysisGraphState:
        """Run the stage and write its owned fields. Must be overridden."""
        ...


# ── Debug helpers (module-level) ─────────────────────────

def _log_state_summary(label: str, state: dict[str, Any]) -> None:
    """Log key names with sizes instead of values."""
    lines = [f"  ┌─ {label}"]
    for key in sorted(state.keys()):
        val = state[key]
        if val is None or val == "" or val == [] or val == {}:
            lines.append(f"  │  {key}: <empty>")
        elif isinstance(val, list):
            lines.append(f"  │  {key}: list({len(val)} items)")
        elif isinstance(val, dict):
            lines.append(f"  │  {key}: dict({len(val)} keys)")
        else:
            lines.append(f"  │  {key}: {_truncate(val)}")
    lines.append(f"  └─ ({len(state)} keys total)")
    logger.debug("\n".join(lines))


def _log_state_diff(label: str, before: dict[str, Any], after: dict[str, Any]) -> None:
    """Log which keys changed between input and output state."""
    changes = [
        f"  │  {key}: {_truncate(before.get(key))} → {_truncate(after.get(key))}"
        for key in sorted(set(before) | set(after))
        if before.get(key) != after.get(key)
    ]
    if changes:
        logger.debug(f"  ┌─ {label}\n" + "\n".join(changes) + f"\n  └─ ({len(changes)} fields changed)")
    else:
        logger.debug(f"  ── {label}: no changes")


def _truncate(val: Any, max_len: int = 120) -> str:
    """Short repr for debug logging."""
    if val is None:
        return "<None>"
    if isinstance(val, list):
        return f"list({len(val)} items)"
    if isinstance(val, dict):
        s = json.dumps(val, default=str, ensure_ascii=False)
    else:
        s = str(getattr(val, "value", val))
    if len(s) > max_len:
        return s[:max_len] + f"…({len(s)} chars)"
    return s
