"""
Unit tests for single-document analysis and corpus folding.

Tests cover:
- Merge semantics of repeated analysis
- Corpus fold order and equivalence with the sequential pipeline
- Per-document memoization
- Skipping of documents with too little content
"""

import json

from knowledge.analysis import CorpusAnalyzer, analyze_corpus, analyze_document, content_fingerprint
from knowledge.cache import AnalysisCache
from knowledge.documents import DocumentRecord
from knowledge.entity_models import RelationType

OTHER_TEXT = "北京和上海都是大城市。"


def _frequencies(result):
    return {e.id: e.frequency for e in result.entities}


def _unordered(relations):
    return {
        (frozenset((r.source_id, r.target_id)), r.type, r.document_id, r.context)
        for r in relations
    }


class TestAnalyzeDocument:
    def test_sample_document(self, sample_text):
        result = analyze_document(sample_text, "doc-1")

        ids = {e.id for e in result.entities}
        assert {"Organization:华为公司", "Location:北京", "Location:深圳"} <= ids
        assert any(r.type == RelationType.LOCATED for r in result.relations)
        assert all(r.document_id == "doc-1" for r in result.relations)

    def test_reanalysis_doubles_frequency(self, sample_text):
        first = analyze_document(sample_text, "doc-1")
        second = analyze_document(sample_text, "doc-1", first.entities, first.relations)

        first_frequencies = _frequencies(first)
        assert _frequencies(second) == {k: v * 2 for k, v in first_frequencies.items()}
        assert [r.id for r in second.relations] == [r.id for r in first.relations]

    def test_existing_state_not_mutated(self, sample_text, entity_factory):
        existing = [entity_factory("北京", document_ids=["doc-0"])]
        result = analyze_document(sample_text, "doc-1", existing_entities=existing)

        assert existing[0].frequency == 1
        assert existing[0].document_ids == ["doc-0"]
        beijing = next(e for e in result.entities if e.id == "Location:北京")
        assert beijing.document_ids == ["doc-0", "doc-1"]

    def test_snapshot_content(self):
        snapshot = json.dumps({
            "blocks": {
                "props": {"text": {"delta": [{"insert": "北京和上海"}, {"insert": "都是大城市。"}]}},
            }
        }, ensure_ascii=False)
        result = analyze_document(snapshot, "doc-1")

        assert {"Location:北京", "Location:上海"} <= {e.id for e in result.entities}

    def test_empty_content(self):
        result = analyze_document("", "doc-1")
        assert result.entities == []
        assert result.relations == []


class TestCorpusAnalyzer:
    def _documents(self, sample_text):
        return [
            DocumentRecord(id=1, title="华为", content=sample_text),
            DocumentRecord(id=2, title="城市", content=OTHER_TEXT),
        ]

    def test_matches_sequential_fold(self, sample_text):
        documents = self._documents(sample_text)

        folded = analyze_document(sample_text, "doc-1")
        folded = analyze_document(OTHER_TEXT, "doc-2", folded.entities, folded.relations)

        result = CorpusAnalyzer().analyze(documents)

        assert [e.id for e in result.entities] == [e.id for e in folded.entities]
        assert _frequencies(result) == _frequencies(folded)
        # pairs are unordered; orientation follows each document's entity order
        assert _unordered(result.relations) == _unordered(folded.relations)

    def test_entities_shared_across_documents(self, sample_text):
        result = CorpusAnalyzer().analyze(self._documents(sample_text))
        beijing = next(e for e in result.entities if e.id == "Location:北京")
        assert beijing.document_ids == ["doc-1", "doc-2"]

    def test_short_documents_skipped(self, sample_text):
        documents = [
            DocumentRecord(id=1, title="短", content="北京"),
            DocumentRecord(id=2, title="十个字", content="北京上海广州深圳杭州"),
            DocumentRecord(id=3, title="长", content=sample_text),
        ]
        result = CorpusAnalyzer().analyze(documents)

        document_ids = {d for e in result.entities for d in e.document_ids}
        assert document_ids == {"doc-3"}

    def test_min_content_length_override(self):
        documents = [DocumentRecord(id=1, title="短", content="北京很大")]
        assert CorpusAnalyzer().analyze(documents).entities == []

        result = CorpusAnalyzer(min_content_length=0).analyze(documents)
        assert {e.id for e in result.entities} == {"Location:北京"}

    def test_cache_prevents_frequency_inflation(self, sample_text):
        cache = AnalysisCache(max_size=16)
        analyzer = CorpusAnalyzer(cache=cache)
        documents = self._documents(sample_text)

        first = analyzer.analyze(documents)
        second = analyzer.analyze(documents)

        assert _frequencies(first) == _frequencies(second)
        assert cache.stats() == {"size": 2, "hits": 2, "misses": 2}

    def test_cached_result_not_mutated_by_fold(self, sample_text):
        cache = AnalysisCache(max_size=16)
        analyzer = CorpusAnalyzer(cache=cache)
        documents = self._documents(sample_text)

        analyzer.analyze(documents)
        cached = cache.get("doc-1", content_fingerprint(sample_text))
        before = _frequencies(cached)
        analyzer.analyze(documents)

        assert _frequencies(cached) == before

    def test_changed_content_reanalyzed(self, sample_text):
        cache = AnalysisCache(max_size=16)
        analyzer = CorpusAnalyzer(cache=cache)

        analyzer.analyze([DocumentRecord(id=1, title="", content=sample_text)])
        result = analyzer.analyze([DocumentRecord(id=1, title="", content=OTHER_TEXT)])

        assert "Organization:华为公司" not in {e.id for e in result.entities}
        assert cache.stats()["size"] == 1

    def test_analyze_corpus_helper(self, sample_text):
        result = analyze_corpus([DocumentRecord(id=1, title="", content=sample_text)])
        assert "Organization:华为公司" in {e.id for e in result.entities}


def test_content_fingerprint_stable():
    assert content_fingerprint("北京") == content_fingerprint("北京")
    assert content_fingerprint("北京") != content_fingerprint("上海")
    assert content_fingerprint(None) == content_fingerprint("")
