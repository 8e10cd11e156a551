"""
Tests: Requirement extraction, text helpers and keyword tables.

Run with:
    pytest feature_analyzer/tests/test_extractor.py -v
"""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from feature_analyzer.config import Settings
from feature_analyzer.engine import RequirementExtractor
from feature_analyzer.engine import keyword_tables as keyword_tables_module
from feature_analyzer.engine.keyword_tables import KeywordTables, get_keyword_tables
from feature_analyzer.engine.text_utils import (
    contains_phrase,
    round_half_up,
    significant_keywords,
    similarity,
    split_sentences,
)
from feature_analyzer.exceptions import ConversionError, ValidationError
from feature_analyzer.models.enums import RequirementPriority, RequirementType
from feature_analyzer.models.schemas import (
    DiscussionPrompt,
    DiscussionResponse,
    FeatureAnalysisParams,
    FeatureDiscussion,
)


def _by_source(requirements, source):
    return [r for r in requirements if r.source == source]


class TestTextHelpers:
    def test_phrase_matches_at_word_boundary(self):
        assert contains_phrase("Add users to the group", "add")
        assert contains_phrase("Users were added yesterday", "add")
        assert not contains_phrase("Address book sync", "add")

    def test_phrase_matching_is_case_insensitive(self):
        assert contains_phrase("THE SYSTEM SHALL log out idle users", "the system shall")

    def test_significant_keywords_skip_short_words_and_stopwords(self):
        words = significant_keywords("The user must export the data, then import it")
        assert words == ["user", "export", "data", "import"]

    def test_sentence_split_respects_decimals_and_abbreviations(self):
        sentences = split_sentences("Version 2.5 ships first, e.g. for admins. Then users get it! Done?")
        assert sentences == [
            "Version 2.5 ships first, e.g. for admins",
            "Then users get it",
            "Done",
        ]

    def test_identical_descriptions_are_fully_similar(self):
        assert similarity("Export  ", "export") == 1.0

    def test_similarity_without_keywords_is_zero(self):
        assert similarity("do it", "go on") == 0.0

    def test_round_half_up(self):
        assert round_half_up(3.15) == 3.2
        assert round_half_up(2.25) == 2.3
        assert round_half_up(4.04) == 4.0


class TestKeywordTables:
    def test_tables_are_frozen(self):
        tables = get_keyword_tables()
        with pytest.raises(PydanticValidationError):
            tables.stopwords = frozenset()

    def test_json_override_replaces_only_named_tables(self, tmp_path, monkeypatch):
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"contradiction": {"metrics": ["queue depth"]}}), encoding="utf-8")
        monkeypatch.setattr(
            keyword_tables_module, "get_settings",
            lambda: Settings(keyword_tables_path=str(path)),
        )
        get_keyword_tables.cache_clear()
        try:
            tables = get_keyword_tables()
            assert tables.contradiction.metrics == ("queue depth",)
            assert tables.extraction == KeywordTables().extraction
        finally:
            get_keyword_tables.cache_clear()

    def test_unreadable_override_falls_back_to_defaults(self, tmp_path, monkeypatch):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        monkeypatch.setattr(
            keyword_tables_module, "get_settings",
            lambda: Settings(keyword_tables_path=str(path)),
        )
        get_keyword_tables.cache_clear()
        try:
            assert get_keyword_tables() == KeywordTables()
        finally:
            get_keyword_tables.cache_clear()


class TestTitleAndUserInput:
    def test_title_yields_high_functional_requirement(self):
        reqs = RequirementExtractor().extract(
            FeatureAnalysisParams(feature_id="f1", title="Export reports")
        )
        assert len(reqs) == 1
        assert reqs[0].id == "req_1"
        assert reqs[0].description == "Feature title: Export reports"
        assert reqs[0].type == RequirementType.FUNCTIONAL
        assert reqs[0].priority == RequirementPriority.HIGH
        assert reqs[0].source == "feature_title"

    def test_additional_requirements_are_functional_medium(self):
        reqs = RequirementExtractor().extract(FeatureAnalysisParams(
            feature_id="f1",
            title="Search",
            additional_requirements=["Users can filter results by date", "Results are paginated"],
        ))
        user_reqs = _by_source(reqs, "user_input")
        assert [r.description for r in user_reqs] == [
            "Users can filter results by date",
            "Results are paginated",
        ]
        assert all(r.type == RequirementType.FUNCTIONAL for r in user_reqs)
        assert all(r.priority == RequirementPriority.MEDIUM for r in user_reqs)
        assert [r.id for r in reqs] == ["req_1", "req_2", "req_3"]

    def test_description_sentences_with_markers_are_extracted(self):
        reqs = RequirementExtractor().extract(FeatureAnalysisParams(
            feature_id="f1",
            title="Audit",
            description="The system must keep every change. Nice colours.",
        ))
        described = _by_source(reqs, "feature_description")
        assert [r.description for r in described] == ["The system must keep every change"]
        assert described[0].priority == RequirementPriority.HIGH

    def test_no_source_raises_validation_error(self):
        with pytest.raises(ValidationError, match="No requirement source"):
            RequirementExtractor().extract(
                FeatureAnalysisParams(feature_id="f1", description="Only a description")
            )

    def test_validation_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            RequirementExtractor().extract(FeatureAnalysisParams(feature_id="f1"))


class TestDeduplication:
    def test_near_duplicates_dropped_and_survivors_renumbered(self):
        reqs = RequirementExtractor().extract(FeatureAnalysisParams(
            feature_id="f1",
            title="Data exchange",
            additional_requirements=["Export data to CSV", "export data to csv ", "Import data from XML"],
        ))
        assert [r.description for r in reqs] == [
            "Feature title: Data exchange",
            "Export data to CSV",
            "Import data from XML",
        ]
        assert [r.id for r in reqs] == ["req_1", "req_2", "req_3"]

    def test_extraction_is_idempotent(self):
        params = FeatureAnalysisParams(
            feature_id="f1",
            title="Offline mode",
            description="The system shall cache pages. Sync must be reliable.",
            additional_requirements=["Show an offline banner"],
        )
        extractor = RequirementExtractor()
        assert extractor.extract(params) == extractor.extract(params)


class TestDiscussion:
    def _params(self, prompts, responses=(), title="Page speed"):
        return FeatureAnalysisParams(
            feature_id="f1",
            discussion=FeatureDiscussion(
                feature_id="f1",
                title=title,
                prompts=list(prompts),
                responses=list(responses),
            ),
        )

    def test_prompt_category_sets_type_and_priority(self):
        reqs = RequirementExtractor().extract(self._params([
            DiscussionPrompt(id="p1", text="How fast must the page load", category="performance-high"),
        ]))
        prompt_reqs = _by_source(reqs, "prompt_p1")
        # the identical sentence-level copy is dropped as a duplicate
        assert len(prompt_reqs) == 1
        assert prompt_reqs[0].type == RequirementType.PERFORMANCE
        assert prompt_reqs[0].priority == RequirementPriority.HIGH

    def test_discussion_title_used_when_params_title_missing(self):
        reqs = RequirementExtractor().extract(self._params([], title="Page speed"))
        assert reqs[0].description == "Feature title: Page speed"

    @pytest.mark.parametrize("category, expected_type, expected_priority", [
        ("ui-low", RequirementType.USER_INTERFACE, RequirementPriority.LOW),
        ("interface", RequirementType.USER_INTERFACE, RequirementPriority.MEDIUM),
        ("reliability-critical", RequirementType.RELIABILITY, RequirementPriority.HIGH),
        ("compatibility-optional", RequirementType.COMPATIBILITY, RequirementPriority.LOW),
        ("unknown", RequirementType.FUNCTIONAL, RequirementPriority.MEDIUM),
    ])
    def test_category_labels(self, category, expected_type, expected_priority):
        assert RequirementExtractor.category_labels(category) == (expected_type, expected_priority)

    def test_response_sentences_with_markers_are_extracted(self):
        reqs = RequirementExtractor().extract(self._params(
            [DiscussionPrompt(id="p1", text="Which exports need protection?", category="security")],
            [DiscussionResponse(id="r1", prompt_id="p1", text="The system must encrypt exports. Nothing else.")],
        ))
        response_reqs = _by_source(reqs, "response_r1")
        assert [r.description for r in response_reqs] == ["The system must encrypt exports"]
        assert response_reqs[0].priority == RequirementPriority.HIGH

    def test_response_fallback_inherits_prompt_labels(self):
        reqs = RequirementExtractor().extract(self._params(
            [DiscussionPrompt(id="p1", text="Who can see the audit log?", category="security-low")],
            [DiscussionResponse(
                id="r1", prompt_id="p1",
                text="Only administrators. Administrators and auditors get read access to the log.",
            )],
        ))
        response_reqs = _by_source(reqs, "response_r1")
        assert len(response_reqs) == 1
        assert response_reqs[0].description == "Administrators and auditors get read access to the log"
        assert response_reqs[0].type == RequirementType.SECURITY
        assert response_reqs[0].priority == RequirementPriority.LOW

    def test_response_to_unknown_prompt_falls_back_to_functional_medium(self):
        reqs = RequirementExtractor().extract(self._params(
            [],
            [DiscussionResponse(id="r1", prompt_id="missing", text="Administrators approve every request manually")],
        ))
        response_reqs = _by_source(reqs, "response_r1")
        assert response_reqs[0].type == RequirementType.FUNCTIONAL
        assert response_reqs[0].priority == RequirementPriority.MEDIUM

    def test_raw_discussion_payload_is_adapted(self):
        reqs = RequirementExtractor().extract(FeatureAnalysisParams(
            feature_id="f1",
            discussion_data={
                "id": "d1",
                "title": "Dark mode",
                "prompts": [{"id": "p1", "content": "Should the theme follow the OS setting?", "type": "ui"}],
                "responses": [],
            },
        ))
        assert reqs[0].description == "Feature title: Dark mode"
        prompt_reqs = _by_source(reqs, "prompt_p1")
        assert prompt_reqs[0].type == RequirementType.USER_INTERFACE

    def test_malformed_payload_raises_conversion_error(self):
        with pytest.raises(ConversionError):
            RequirementExtractor().extract(FeatureAnalysisParams(
                feature_id="f1", discussion_data={"title": "No id here"},
            ))
