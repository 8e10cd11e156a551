"""
Tests: Dependency graph passes and cycle resolution.

Run with:
    pytest feature_analyzer/tests/test_dependency_graph.py -v
"""

import networkx as nx

from feature_analyzer.engine import DependencyGraphBuilder, RequirementExtractor
from feature_analyzer.models.enums import DependencyKind, RequirementPriority, RequirementType
from feature_analyzer.models.schemas import DependencyEdge, FeatureAnalysisParams, Requirement


def _req(req_id, description, type=RequirementType.FUNCTIONAL,
         priority=RequirementPriority.MEDIUM, source=""):
    return Requirement(id=req_id, description=description, type=type, priority=priority, source=source)


def _triples(edges):
    return [(e.requirement_id, e.depends_on_id, e.kind) for e in edges]


def _is_acyclic(requirements, edges):
    graph = nx.MultiDiGraph()
    graph.add_nodes_from(r.id for r in requirements)
    graph.add_edges_from((e.requirement_id, e.depends_on_id) for e in edges)
    return nx.is_directed_acyclic_graph(graph)


class TestExplicitReferences:
    def test_id_token_creates_requires_edge(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "User login form"),
            _req("req_2", "Password reset depends on req_1"),
        ])
        assert _triples(edges) == [("req_2", "req_1", DependencyKind.REQUIRES)]
        assert edges[0].rationale == "Explicit reference to req_1"

    def test_requirement_number_forms(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "Store uploaded invoices"),
            _req("req_2", "Audit trail as described in requirement 1"),
            _req("req_3", "Nightly digest extends req #1"),
        ])
        assert ("req_2", "req_1", DependencyKind.REQUIRES) in _triples(edges)
        assert ("req_3", "req_1", DependencyKind.REQUIRES) in _triples(edges)

    def test_longer_number_is_not_a_reference(self):
        requirements = [_req(f"req_{i}", f"Placeholder item {i}") for i in range(1, 13)]
        requirements[11] = _req("req_12", "Unrelated note about requirement 12 wording")
        edges = DependencyGraphBuilder().build(requirements)
        assert ("req_12", "req_1", DependencyKind.REQUIRES) not in _triples(edges)


class TestMarkerOverlap:
    def test_marker_followed_by_candidate_keywords(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "Customer database schema"),
            _req("req_2", "Reporting requires the customer database"),
        ])
        assert _triples(edges) == [("req_2", "req_1", DependencyKind.REQUIRES)]

    def test_marker_without_enough_keywords_adds_nothing(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "Customer database schema"),
            _req("req_2", "Reporting requires a new customer"),
        ])
        assert edges == []


class TestKeywordSimilarity:
    def test_lower_priority_depends_on_higher(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "Export invoice data nightly", priority=RequirementPriority.HIGH),
            _req("req_2", "Export invoice data weekly", priority=RequirementPriority.LOW),
        ])
        assert _triples(edges) == [("req_2", "req_1", DependencyKind.RELATED_TO)]

    def test_unranked_priorities_do_not_decide_direction(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "Export invoice data nightly", priority=RequirementPriority.CRITICAL),
            _req("req_2", "Export invoice data weekly", priority=RequirementPriority.LOW),
        ])
        assert edges == []

    def test_type_direction_and_type_constraint(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "Encrypt stored invoice files", type=RequirementType.SECURITY),
            _req("req_2", "Upload invoice files"),
        ])
        assert _triples(edges) == [
            ("req_2", "req_1", DependencyKind.RELATED_TO),
            ("req_2", "req_1", DependencyKind.CONSTRAINED_BY),
        ]


class TestSequence:
    def test_sequence_marker_links_to_previous_requirement(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "Collect the shipping address", source="prompt_p1"),
            _req("req_2", "Then validate the postal code format", source="prompt_p1"),
        ])
        assert _triples(edges) == [("req_2", "req_1", DependencyKind.POTENTIALLY_FOLLOWS)]

    def test_part_whole_marker_links_to_previous_requirement(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "Checkout wizard", source="prompt_p1"),
            _req("req_2", "Coupon entry is part of the payment step", source="prompt_p1"),
        ])
        assert _triples(edges) == [("req_2", "req_1", DependencyKind.POTENTIALLY_FOLLOWS)]

    def test_different_sources_are_not_sequenced(self):
        edges = DependencyGraphBuilder().build([
            _req("req_1", "Collect the shipping address", source="prompt_p1"),
            _req("req_2", "Then validate the postal code format", source="prompt_p2"),
        ])
        assert edges == []


class TestCycleResolution:
    def test_lowest_confidence_edge_removed(self):
        edges = [
            DependencyEdge(requirement_id="A", depends_on_id="B", kind=DependencyKind.REQUIRES),
            DependencyEdge(requirement_id="B", depends_on_id="C", kind=DependencyKind.REQUIRES),
            DependencyEdge(requirement_id="C", depends_on_id="A", kind=DependencyKind.POTENTIALLY_FOLLOWS),
        ]
        resolved = DependencyGraphBuilder().resolve_cycles(edges, ["A", "B", "C"])
        assert _triples(resolved) == [
            ("A", "B", DependencyKind.REQUIRES),
            ("B", "C", DependencyKind.REQUIRES),
        ]
        graph = nx.DiGraph([(e.requirement_id, e.depends_on_id) for e in resolved])
        assert nx.is_directed_acyclic_graph(graph)

    def test_ties_remove_most_recent_edge(self):
        edges = [
            DependencyEdge(requirement_id="A", depends_on_id="B", kind=DependencyKind.RELATED_TO),
            DependencyEdge(requirement_id="B", depends_on_id="A", kind=DependencyKind.RELATED_TO),
        ]
        resolved = DependencyGraphBuilder().resolve_cycles(edges, ["A", "B"])
        assert _triples(resolved) == [("A", "B", DependencyKind.RELATED_TO)]

    def test_interlocking_cycles_all_broken(self):
        edges = [
            DependencyEdge(requirement_id="A", depends_on_id="B", kind=DependencyKind.REQUIRES),
            DependencyEdge(requirement_id="B", depends_on_id="A", kind=DependencyKind.CONSTRAINED_BY),
            DependencyEdge(requirement_id="B", depends_on_id="C", kind=DependencyKind.RELATED_TO),
            DependencyEdge(requirement_id="C", depends_on_id="A", kind=DependencyKind.REQUIRES),
        ]
        resolved = DependencyGraphBuilder().resolve_cycles(edges, ["A", "B", "C"])
        assert _triples(resolved) == [
            ("A", "B", DependencyKind.REQUIRES),
            ("C", "A", DependencyKind.REQUIRES),
        ]


class TestGraphProperties:
    def test_fewer_than_two_requirements_has_no_edges(self):
        assert DependencyGraphBuilder().build([]) == []
        assert DependencyGraphBuilder().build([_req("req_1", "Depends on req_1 itself")]) == []

    def test_edges_reference_known_ids_and_form_a_dag(self):
        requirements = RequirementExtractor().extract(FeatureAnalysisParams(
            feature_id="f1",
            title="Invoice export",
            description=(
                "The system must export invoice files nightly. "
                "Then the export must notify finance. "
                "Export depends on the invoice files being encrypted. "
                "Invoice export must be fast."
            ),
            additional_requirements=[
                "Encrypted invoice files require secure key storage",
                "Finance can download invoice files after notification",
                "Requirement 2 and req_3 share the export schedule",
            ],
        ))
        edges = DependencyGraphBuilder().build(requirements)

        known = {r.id for r in requirements}
        assert all(e.requirement_id in known and e.depends_on_id in known for e in edges)
        assert all(e.requirement_id != e.depends_on_id for e in edges)
        assert _is_acyclic(requirements, edges)
