"""
Tests: Complexity estimation.

Run with:
    pytest feature_analyzer/tests/test_complexity.py -v
"""

import pytest

from feature_analyzer.engine import ComplexityEstimator
from feature_analyzer.models.enums import DependencyKind, RequirementPriority, RequirementType
from feature_analyzer.models.schemas import DependencyEdge, Requirement


def _req(req_id, description, type=RequirementType.FUNCTIONAL, priority=RequirementPriority.MEDIUM):
    return Requirement(id=req_id, description=description, type=type, priority=priority)


class TestIndividualScores:
    def test_high_complexity_keyword(self):
        report = ComplexityEstimator().estimate([
            _req("req_1", "Recommend products with machine learning"),
        ])
        estimate = report.individual[0]
        assert estimate.score == 4.5
        assert estimate.score > 3 * 1.0
        assert estimate.factors == ["High: machine learning"]
        assert estimate.time_estimate == "3-5 days"

    def test_priority_multiplier_applies_to_base(self):
        report = ComplexityEstimator().estimate(
            [_req("req_1", "Support single sign-on", RequirementType.SECURITY, RequirementPriority.HIGH)],
        )
        assert report.individual[0].score == 6.0
        assert report.individual[0].factors == []
        assert report.individual[0].time_estimate == "3-5 days"

    def test_unlisted_type_and_priority_use_defaults(self):
        report = ComplexityEstimator().estimate(
            [_req("req_1", "Translate labels", RequirementType.LOCALIZATION, RequirementPriority.CRITICAL)],
        )
        assert report.individual[0].score == 3.0

    def test_score_clamped_to_ten(self):
        report = ComplexityEstimator().estimate([_req(
            "req_1",
            "Authentication with encryption, audit and compliance for confidential data",
            RequirementType.SECURITY,
            RequirementPriority.HIGH,
        )])
        assert report.individual[0].score == 10.0
        assert report.individual[0].time_estimate == "2+ weeks"

    def test_score_clamped_to_one(self):
        report = ComplexityEstimator().estimate([_req(
            "req_1",
            "Static page, simple form, basic styling",
            RequirementType.USER_INTERFACE,
            RequirementPriority.LOW,
        )])
        estimate = report.individual[0]
        assert estimate.score == 1.0
        assert estimate.factors == ["Low: static page", "Low: simple form", "Low: basic styling"]
        assert estimate.time_estimate == "hours(4-8)"

    def test_long_description(self):
        report = ComplexityEstimator().estimate([_req("req_1", "word " * 50)])
        assert "Long requirement description" in report.individual[0].factors
        assert report.individual[0].score == 3.6

    def test_complex_architecture(self):
        report = ComplexityEstimator().estimate(
            [_req("req_1", "Customer records")],
            existing_architecture={"complexity": "high", "services": 40},
        )
        assert report.individual[0].factors == ["Integration with complex existing architecture"]
        assert report.individual[0].score == 3.9

    def test_other_architecture_hints_ignored(self):
        report = ComplexityEstimator().estimate(
            [_req("req_1", "Customer records")],
            existing_architecture={"complexity": "low"},
        )
        assert report.individual[0].factors == []


class TestGraphFactors:
    def test_degree_factors_and_half_up_rounding(self):
        requirements = [_req("req_1", "Customer records"), _req("req_2", "Customer export")]
        edges = [DependencyEdge(requirement_id="req_2", depends_on_id="req_1", kind=DependencyKind.REQUIRES)]

        report = ComplexityEstimator().estimate(requirements, dependencies=edges)

        first, second = report.individual
        assert first.factors == ["1 requirement(s) depend on this"]
        assert first.score == 3.2  # 3 × 1.05 = 3.15 rounds half up
        assert second.factors == ["Depends on 1 other requirement(s)"]
        assert second.score == 3.3
        assert report.overall == 3.5

    def test_edges_computed_when_not_supplied(self):
        calls = []

        class FakeBuilder:
            def build(self, requirements):
                calls.append(len(requirements))
                return []

        estimator = ComplexityEstimator(graph_builder=FakeBuilder())
        estimator.estimate([_req("req_1", "Customer records"), _req("req_2", "Audit log")])
        assert calls == [2]


class TestOverall:
    def test_empty_requirement_list(self):
        report = ComplexityEstimator().estimate([])
        assert report.individual == []
        assert report.overall == 0.0

    def test_type_diversity_and_high_priority_share(self):
        report = ComplexityEstimator().estimate(
            [
                _req("req_1", "Bulk edit of records", priority=RequirementPriority.HIGH),
                _req("req_2", "Pages respond quickly", type=RequirementType.PERFORMANCE),
            ],
            dependencies=[],
        )
        # mean 3.8 × 1.1 (two types) × 1.1 (half high priority)
        assert report.overall == 4.6

    @pytest.mark.parametrize("description, type, priority", [
        ("Real-time streaming with distributed synchronization and blockchain", RequirementType.FUNCTIONAL, RequirementPriority.HIGH),
        ("Static page", RequirementType.USER_INTERFACE, RequirementPriority.LOW),
        ("Millions of users at petabyte scale", RequirementType.PERFORMANCE, RequirementPriority.HIGH),
        ("Basic logging", RequirementType.RELIABILITY, RequirementPriority.OPTIONAL),
    ])
    def test_scores_stay_in_range(self, description, type, priority):
        report = ComplexityEstimator().estimate([_req("req_1", description, type, priority)])
        assert 1.0 <= report.individual[0].score <= 10.0
        assert 1.0 <= report.overall <= 10.0
