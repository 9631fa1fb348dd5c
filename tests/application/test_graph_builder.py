"""Tests for the dependency graph and its builder."""

import logging

import pytest

from kanjiorder.application.corpus import Corpus
from kanjiorder.application.graph_builder import (
    build_graph,
    find_connected_components,
    find_isolated_nodes,
)
from kanjiorder.domain.errors import NotFoundError, SelfDependencyError
from kanjiorder.domain.models import Character


class TestBuildGraph:
    """Tests for building the graph from a corpus."""

    def test_edges_point_from_component_to_character(self, forest):
        graph = build_graph(Corpus.load(forest))

        assert graph.get_dependents("木") == ["林", "森"]
        assert graph.get_dependents("林") == ["森"]
        assert graph.get_prerequisites("森") == ["木", "林"]
        assert graph.get_prerequisites("木") == []
        assert graph.edge_count == 3

    def test_every_character_is_a_node(self, forest):
        graph = build_graph(Corpus.load(forest))

        assert len(graph) == 3
        assert graph.ids == ["木", "林", "森"]
        assert "林" in graph

    def test_handles_follow_code_points(self):
        chars = [Character("c"), Character("a"), Character("b", components=("c",))]
        graph = build_graph(Corpus.load(chars))

        assert [n.id for n in graph.nodes] == ["a", "b", "c"]
        assert graph.handle("c") == 2

    def test_same_graph_regardless_of_input_order(self, forest):
        forward = build_graph(Corpus.load(forest))
        backward = build_graph(Corpus.load(reversed(forest)))

        assert forward.nodes == backward.nodes
        assert forward.dependents == backward.dependents
        assert forward.prerequisites == backward.prerequisites

    def test_duplicate_components_collapse(self, caplog):
        chars = [Character("木"), Character("林", components=("木", "木"))]

        with caplog.at_level(logging.WARNING):
            graph = build_graph(Corpus.load(chars))

        assert graph.edge_count == 1
        assert graph.get_prerequisites("林") == ["木"]
        assert "Duplicate component" in caplog.text

    def test_self_reference_fails(self):
        chars = [Character("口", components=("口",))]

        with pytest.raises(SelfDependencyError) as exc:
            build_graph(Corpus.load(chars))

        assert exc.value.char_id == "口"

    def test_unknown_id_lookup(self, forest):
        graph = build_graph(Corpus.load(forest))

        with pytest.raises(NotFoundError):
            graph.get_dependents("山")

    def test_node_lookup(self, forest):
        graph = build_graph(Corpus.load(forest))

        assert graph.node("林").meaning == "grove"
        with pytest.raises(NotFoundError):
            graph.node("山")


class TestTraversal:
    """Tests for transitive queries."""

    def test_ancestors_and_descendants(self):
        chars = [
            Character("a"),
            Character("b", components=("a",)),
            Character("c", components=("b",)),
            Character("d", components=("a", "c")),
        ]
        graph = build_graph(Corpus.load(chars))

        assert graph.ancestors("d") == {"a", "b", "c"}
        assert graph.ancestors("a") == set()
        assert graph.descendants("a") == {"b", "c", "d"}
        assert graph.descendants("d") == set()

    def test_roots(self, forest):
        graph = build_graph(Corpus.load(forest + [Character("一")]))

        # 一 has no dependents so it is isolated, not a root
        assert graph.roots() == ["木"]


class TestHealthChecks:
    def test_isolated_nodes(self, forest):
        graph = build_graph(Corpus.load(forest + [Character("一"), Character("二")]))

        assert find_isolated_nodes(graph) == ["一", "二"]

    def test_connected_components(self):
        chars = [
            Character("a"),
            Character("b", components=("a",)),
            Character("x"),
            Character("y", components=("x",)),
            Character("z"),
        ]
        graph = build_graph(Corpus.load(chars))

        assert find_connected_components(graph) == [["a", "b"], ["x", "y"], ["z"]]
