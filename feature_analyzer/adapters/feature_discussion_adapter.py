"""
Feature Discussion Adapter — reshapes a discussion payload produced by an
external discussion tool into a FeatureDiscussion.

Accepted payload shape:
  • id, title                       (required)
  • prompts[]:   id, text | content, type
  • responses[]: id, promptId | prompt_id, response | content

Anything else raises ConversionError.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from feature_analyzer.exceptions import ConversionError
from feature_analyzer.models.schemas import (
    DiscussionPrompt,
    DiscussionResponse,
    FeatureDiscussion,
)

logger = logging.getLogger(__name__)


class FeatureDiscussionAdapter:
    """
    Convert external discussion payloads.

        discussion = FeatureDiscussionAdapter.from_external_format(payload)
    """

    @staticmethod
    def from_external_format(payload: Any) -> FeatureDiscussion:
        if not isinstance(payload, dict):
            raise ConversionError(
                f"Discussion payload must be an object, got {type(payload).__name__}"
            )
        if not payload.get("id") or not payload.get("title"):
            raise ConversionError("Missing required fields in external data format: id and title")

        try:
            prompts = [
                FeatureDiscussionAdapter._to_prompt(p)
                for p in FeatureDiscussionAdapter._as_list(payload, "prompts")
            ]
            responses = [
                FeatureDiscussionAdapter._to_response(r)
                for r in FeatureDiscussionAdapter._as_list(payload, "responses")
            ]
            discussion = FeatureDiscussion(
                feature_id=str(payload["id"]),
                title=str(payload["title"]),
                prompts=prompts,
                responses=responses,
                full_text=FeatureDiscussionAdapter.build_full_text(
                    str(payload["title"]), prompts, responses
                ),
            )
        except (PydanticValidationError, TypeError, AttributeError) as e:
            raise ConversionError(f"Error converting external format: {e}") from e

        logger.debug(
            f"Adapted discussion {discussion.feature_id}: "
            f"{len(prompts)} prompts, {len(responses)} responses"
        )
        return discussion

    @staticmethod
    def build_full_text(
        title: str,
        prompts: list[DiscussionPrompt],
        responses: list[DiscussionResponse],
    ) -> str:
        """Flatten the discussion into one transcript."""
        lines = [f"Feature: {title}", ""]
        lines.extend(f"{p.category}: {p.text}" for p in prompts)

        categories = {p.id: p.category for p in prompts}
        for r in responses:
            lines.append(f"Response to {categories.get(r.prompt_id, 'prompt')}: {r.text}")
        return "\n".join(lines) + "\n"

    # ── Internals ────────────────────────────────────────

    @staticmethod
    def _as_list(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
        items = payload.get(key) or []
        if not isinstance(items, list):
            raise ConversionError(f"'{key}' must be a list")
        for item in items:
            if not isinstance(item, dict):
                raise ConversionError(f"Every entry of '{key}' must be an object")
        return items

    @staticmethod
    def _to_prompt(raw: dict[str, Any]) -> DiscussionPrompt:
        if raw.get("id") is None:
            raise ConversionError("Prompt without an id")
        return DiscussionPrompt(
            id=str(raw["id"]),
            text=raw.get("text") or raw.get("content") or "",
            category=raw.get("type") or "unknown",
        )

    @staticmethod
    def _to_response(raw: dict[str, Any]) -> DiscussionResponse:
        if raw.get("id") is None:
            raise ConversionError("Response without an id")
        prompt_id = raw.get("promptId", raw.get("prompt_id"))
        return DiscussionResponse(
            id=str(raw["id"]),
            prompt_id="" if prompt_id is None else str(prompt_id),
            text=raw.get("response") or raw.get("content") or "",
        )
