"""
Tests for merging per-document results into corpus-wide sets.
"""

from knowledge.entity_models import Relation, RelationType
from knowledge.merge import merge_entities, merge_relations


def _relation(relation_id, context=None):
    return Relation(
        id=relation_id,
        source_id="Location:北京",
        target_id="Location:上海",
        type=RelationType.RELATED,
        document_id="doc-1",
        context=context,
    )


class TestMergeEntities:
    def test_collision_sums_frequency_and_unions_documents(self, entity_factory):
        existing = [entity_factory("北京", document_ids=["doc-1"], frequency=2)]
        incoming = [entity_factory("北京", document_ids=["doc-2", "doc-1"], frequency=3)]

        merged = merge_entities(existing, incoming)

        assert len(merged) == 1
        assert merged[0].frequency == 5
        assert merged[0].document_ids == ["doc-1", "doc-2"]

    def test_new_entities_appended_in_order(self, entity_factory):
        existing = [entity_factory("北京")]
        incoming = [entity_factory("上海"), entity_factory("北京"), entity_factory("广州")]

        merged = merge_entities(existing, incoming)

        assert [e.name for e in merged] == ["北京", "上海", "广州"]

    def test_inputs_not_mutated(self, entity_factory):
        existing = [entity_factory("北京", frequency=1)]
        incoming = [entity_factory("北京", document_ids=["doc-2"], frequency=1)]

        merged = merge_entities(existing, incoming)

        assert existing[0].frequency == 1
        assert existing[0].document_ids == ["doc-1"]
        assert merged[0] is not existing[0]
        assert merged[0].document_ids is not existing[0].document_ids

    def test_same_name_different_type_kept_apart(self, entity_factory):
        merged = merge_entities(
            [entity_factory("长城")],
            [entity_factory("长城", "Organization")],
        )
        assert {e.id for e in merged} == {"Location:长城", "Organization:长城"}

    def test_empty_inputs(self, entity_factory):
        assert merge_entities([], []) == []
        assert [e.id for e in merge_entities([], [entity_factory("北京")])] == ["Location:北京"]


class TestMergeRelations:
    def test_existing_wins(self):
        merged = merge_relations([_relation("r1", "old")], [_relation("r1", "new")])
        assert len(merged) == 1
        assert merged[0].context == "old"

    def test_union_in_order(self):
        merged = merge_relations([_relation("r1")], [_relation("r2"), _relation("r3")])
        assert [r.id for r in merged] == ["r1", "r2", "r3"]

    def test_returns_copies(self):
        existing = [_relation("r1")]
        merged = merge_relations(existing, [])
        assert merged[0] == existing[0]
        assert merged[0] is not existing[0]
