"""
Tests for graph_builder.py
"""

import pytest

from knowledge.entity_models import EntityType, Relation, RelationType
from knowledge.graph_builder import ENTITY_COLORS, build_graph_data, get_entity_color, node_size


def test_node_size_formula():
    assert node_size(1) == pytest.approx(5.0)
    assert node_size(4) == pytest.approx(7.0)
    assert node_size(9) == pytest.approx(9.0)


def test_every_type_has_a_color():
    for entity_type in EntityType:
        assert get_entity_color(entity_type).startswith("#")
    assert get_entity_color(EntityType.PERSON) == "#FF6B6B"
    assert get_entity_color(EntityType.UNKNOWN) == ENTITY_COLORS[EntityType.UNKNOWN]


def test_build_graph_data(entity_factory):
    entities = [
        entity_factory("北京", frequency=4),
        entity_factory("华为公司", EntityType.ORGANIZATION),
    ]
    relations = [
        Relation(
            id="Organization:华为公司|Located|Location:北京|doc-1",
            source_id="Organization:华为公司",
            target_id="Location:北京",
            type=RelationType.LOCATED,
            document_id="doc-1",
            context="华为公司在北京",
        )
    ]

    graph = build_graph_data(entities, relations)

    assert [node.id for node in graph.nodes] == ["Location:北京", "Organization:华为公司"]
    beijing = graph.nodes[0]
    assert beijing.val == pytest.approx(7.0)
    assert beijing.color == "#45B7D1"
    assert beijing.document_ids == ["doc-1"]

    assert len(graph.links) == 1
    link = graph.links[0]
    assert link.source == "Organization:华为公司"
    assert link.target == "Location:北京"
    assert link.type == RelationType.LOCATED


def test_to_dict_shape(entity_factory):
    graph = build_graph_data([entity_factory("北京")], [])
    data = graph.to_dict()

    assert data["links"] == []
    assert data["nodes"] == [{
        "id": "Location:北京",
        "name": "北京",
        "type": "Location",
        "val": pytest.approx(5.0),
        "color": "#45B7D1",
        "documentIds": ["doc-1"],
    }]


def test_empty_graph():
    graph = build_graph_data([], [])
    assert graph.nodes == []
    assert graph.links == []
