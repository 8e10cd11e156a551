"""
Requirement Extractor — turns the feature title, description, discussion
prompts/responses and user-supplied strings into a deduplicated list of
typed, prioritized requirements.

Sources, in encounter order:
  1. Title          → "Feature title: …" (functional / high) + sentence extraction
  2. Description    → sentence extraction
  3. Prompts        → one requirement per prompt (type/priority from its category)
                      + sentence extraction over the prompt text
  4. Responses      → sentence extraction, else the first meaningful sentence
  5. User input     → functional / medium, verbatim

Near-duplicates (similarity above the configured threshold) are dropped,
keeping the first encountered; survivors are renumbered req_1..req_n.
"""

from __future__ import annotations

import logging
from typing import Optional

from feature_analyzer.adapters import FeatureDiscussionAdapter
from feature_analyzer.config import Settings, get_settings
from feature_analyzer.engine.keyword_tables import KeywordTables, get_keyword_tables
from feature_analyzer.engine.text_utils import contains_any, similarity, split_sentences
from feature_analyzer.exceptions import ValidationError
from feature_analyzer.models.enums import RequirementPriority, RequirementType
from feature_analyzer.models.schemas import (
    DiscussionPrompt,
    FeatureAnalysisParams,
    FeatureDiscussion,
    Requirement,
)

logger = logging.getLogger(__name__)

# Substring tags recognised in a prompt's category, checked in order.
_CATEGORY_TYPES: list[tuple[tuple[str, ...], RequirementType]] = [
    (("performance",), RequirementType.PERFORMANCE),
    (("security",), RequirementType.SECURITY),
    (("ui", "interface"), RequirementType.USER_INTERFACE),
    (("compatibility",), RequirementType.COMPATIBILITY),
    (("reliability",), RequirementType.RELIABILITY),
]


class RequirementExtractor:
    """Extract requirements from every textual source of a feature."""

    def __init__(
        self,
        tables: Optional[KeywordTables] = None,
        settings: Optional[Settings] = None,
    ):
        self._tables = tables or get_keyword_tables()
        self._settings = settings or get_settings()

    def extract(self, params: FeatureAnalysisParams) -> list[Requirement]:
        discussion = self.resolve_discussion(params)
        title = params.title or (discussion.title if discussion else "")

        if not title and discussion is None and not params.additional_requirements:
            raise ValidationError(
                "No requirement source supplied: "
                "provide a title, discussion data or additional requirements"
            )

        candidates: list[Requirement] = []

        # ── Title ────────────────────────────────────────
        if title:
            candidates.append(self._make(
                candidates, f"Feature title: {title}",
                RequirementType.FUNCTIONAL, RequirementPriority.HIGH, "feature_title",
            ))
            candidates.extend(self.extract_from_text(title, "feature_title", candidates))

        # ── Description ──────────────────────────────────
        if params.description:
            candidates.extend(
                self.extract_from_text(params.description, "feature_description", candidates)
            )

        # ── Discussion ───────────────────────────────────
        if discussion is not None:
            self._extract_discussion(discussion, candidates)

        # ── User input ───────────────────────────────────
        for text in params.additional_requirements:
            if text.strip():
                candidates.append(self._make(
                    candidates, text.strip(),
                    RequirementType.FUNCTIONAL, RequirementPriority.MEDIUM, "user_input",
                ))

        requirements = self.deduplicate(candidates)
        if not requirements:
            raise ValidationError("No requirements could be extracted from the supplied sources")

        logger.debug(
            f"Extracted {len(requirements)} requirements "
            f"({len(candidates) - len(requirements)} duplicates dropped)"
        )
        return requirements

    @staticmethod
    def resolve_discussion(params: FeatureAnalysisParams) -> Optional[FeatureDiscussion]:
        """Structured discussion wins; a raw payload is adapted (ConversionError propagates)."""
        if params.discussion is not None:
            return params.discussion
        if params.discussion_data is not None:
            return FeatureDiscussionAdapter.from_external_format(params.discussion_data)
        return None

    # ── Sentence-level extraction ────────────────────────

    def extract_from_text(
        self,
        text: str,
        source: str,
        existing: Optional[list[Requirement]] = None,
    ) -> list[Requirement]:
        """
        Sentences of at least min_sentence_chars that carry a requirement
        marker or classify as a non-functional type become requirements.
        """
        offset = len(existing) if existing else 0
        found: list[Requirement] = []
        for sentence in split_sentences(text):
            if len(sentence) < self._settings.min_sentence_chars:
                continue

            req_type = self.classify_type(sentence)
            has_marker = contains_any(sentence, self._tables.extraction.requirement_markers)
            if has_marker or req_type != RequirementType.FUNCTIONAL:
                found.append(Requirement(
                    id=f"candidate_{offset + len(found) + 1}",
                    description=sentence,
                    type=req_type,
                    priority=self.classify_priority(sentence),
                    source=source,
                ))
        return found

    def classify_type(self, text: str) -> RequirementType:
        for req_type, indicators in self._tables.extraction.type_indicators.items():
            if contains_any(text, indicators):
                return req_type
        return RequirementType.FUNCTIONAL

    def classify_priority(self, text: str) -> RequirementPriority:
        if contains_any(text, self._tables.extraction.priority_high):
            return RequirementPriority.HIGH
        if contains_any(text, self._tables.extraction.priority_low):
            return RequirementPriority.LOW
        return RequirementPriority.MEDIUM

    # ── Discussion ───────────────────────────────────────

    def _extract_discussion(
        self, discussion: FeatureDiscussion, candidates: list[Requirement]
    ) -> None:
        for prompt in discussion.prompts:
            if not prompt.text.strip():
                continue
            req_type, priority = self.category_labels(prompt.category)
            candidates.append(self._make(
                candidates, prompt.text, req_type, priority, f"prompt_{prompt.id}",
            ))
            candidates.extend(self.extract_from_text(prompt.text, f"prompt_{prompt.id}", candidates))

        prompts_by_id: dict[str, DiscussionPrompt] = {p.id: p for p in discussion.prompts}
        for response in discussion.responses:
            source = f"response_{response.id}"
            found = self.extract_from_text(response.text, source, candidates)
            if found:
                candidates.extend(found)
                continue

            # Nothing explicit: fall back to the first meaningful sentence
            for sentence in split_sentences(response.text):
                if len(sentence) > self._settings.fallback_sentence_chars:
                    prompt = prompts_by_id.get(response.prompt_id)
                    if prompt is not None:
                        req_type, priority = self.category_labels(prompt.category)
                    else:
                        req_type, priority = RequirementType.FUNCTIONAL, RequirementPriority.MEDIUM
                    candidates.append(self._make(candidates, sentence, req_type, priority, source))
                    break

    @staticmethod
    def category_labels(category: str) -> tuple[RequirementType, RequirementPriority]:
        """Map a prompt's free-form category tag to (type, priority)."""
        tag = (category or "").lower()

        if "high" in tag or "critical" in tag:
            priority = RequirementPriority.HIGH
        elif "low" in tag or "optional" in tag:
            priority = RequirementPriority.LOW
        else:
            priority = RequirementPriority.MEDIUM

        req_type = RequirementType.FUNCTIONAL
        for markers, candidate_type in _CATEGORY_TYPES:
            if any(m in tag for m in markers):
                req_type = candidate_type
                break
        return req_type, priority

    # ── Deduplication ────────────────────────────────────

    def deduplicate(self, candidates: list[Requirement]) -> list[Requirement]:
        threshold = self._settings.dedup_similarity_threshold
        kept: list[Requirement] = []
        for candidate in candidates:
            if any(similarity(candidate.description, k.description) > threshold for k in kept):
                logger.debug(f"Dropping near-duplicate: {candidate.description[:60]}")
                continue
            kept.append(candidate)

        return [
            req.model_copy(update={"id": f"req_{i}"})
            for i, req in enumerate(kept, start=1)
        ]

    @staticmethod
    def _make(
        existing: list[Requirement],
        description: str,
        req_type: RequirementType,
        priority: RequirementPriority,
        source: str,
    ) -> Requirement:
        return Requirement(
            id=f"candidate_{len(existing) + 1}",
            description=description,
            type=req_type,
            priority=priority,
            source=source,
        )
