"""Knowledge graph endpoints."""

import logging

from fastapi import APIRouter, HTTPException

from api.models import (
    CacheClearResponse,
    ExtractRequest,
    ExtractResponse,
    GraphRequest,
    GraphResponse,
)
from knowledge.analysis import analyze_document
from knowledge.documents import DocumentRecord
from knowledge.entity_graph import get_graph_stats
from knowledge.graph_builder import build_graph_data
from knowledge.graph_filters import count_entity_types, filter_graph
from knowledge.singletons import (
    get_analysis_cache,
    get_corpus_analyzer,
    get_entity_extractor,
    get_relation_extractor,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=GraphResponse)
def analyze_graph(request: GraphRequest) -> GraphResponse:
    """Analyze the submitted notes and return graph JSON for the UI."""
    documents = [
        DocumentRecord(id=doc.id, title=doc.title, content=doc.content)
        for doc in request.documents
    ]

    try:
        result = get_corpus_analyzer().analyze(documents)
        entities, relations = filter_graph(
            result.entities,
            result.relations,
            document_id=request.document_id,
            entity_type=request.entity_type,
            search_term=request.search,
        )
        graph_data = build_graph_data(entities, relations)
        payload = graph_data.to_dict()
        type_counts = {t.value: n for t, n in count_entity_types(result.entities).items()}
        stats = get_graph_stats(graph_data)
    except Exception as exc:  # pragma: no cover - thin HTTP wrapper
        logger.exception("Failed to build knowledge graph: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to build knowledge graph")

    return GraphResponse(
        nodes=payload["nodes"],
        links=payload["links"],
        type_counts=type_counts,
        stats=stats.to_dict(),
    )


@router.post("/extract", response_model=ExtractResponse)
def extract_document(request: ExtractRequest) -> ExtractResponse:
    """Return the entities and relations of a single document."""
    try:
        result = analyze_document(
            request.content,
            request.document_id,
            entity_extractor=get_entity_extractor(),
            relation_extractor=get_relation_extractor(),
        )
    except Exception as exc:  # pragma: no cover - thin HTTP wrapper
        logger.exception("Failed to analyze document %s: %s", request.document_id, exc)
        raise HTTPException(status_code=500, detail="Failed to analyze document")

    return ExtractResponse(
        entities=[entity.to_dict() for entity in result.entities],
        relations=[relation.to_dict() for relation in result.relations],
    )


@router.delete("/cache", response_model=CacheClearResponse)
def clear_analysis_cache() -> CacheClearResponse:
    """Drop memoized per-document analyses."""
    cache = get_analysis_cache()
    if cache is None:
        return CacheClearResponse(status="disabled", cleared=0)

    cleared = cache.stats()["size"]
    cache.clear()
    logger.info(f"Cleared {cleared} cached document analyses")
    return CacheClearResponse(status="cleared", cleared=cleared)
