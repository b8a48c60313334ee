#!/usr/bin/env python3
"""Build the knowledge graph of a notes collection and export it.

Reads notes from the desktop app's SQLite database (``markdowns`` table) or
from a JSON dump, runs the analysis pipeline and writes graph JSON or GraphML.

Run:
    python scripts/build_knowledge_graph.py --db ~/.config/notes/markdown.db --format graphml --output notes.graphml
    python scripts/build_knowledge_graph.py --json notes.json --type Location
"""
import argparse
import json
import logging
import sqlite3
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import settings
from knowledge.analysis import CorpusAnalyzer
from knowledge.documents import load_documents_json, load_markdown_documents
from knowledge.entity_graph import get_graph_stats, write_graphml
from knowledge.entity_models import EntityType
from knowledge.graph_builder import build_graph_data
from knowledge.graph_filters import filter_graph
from knowledge.singletons import get_entity_extractor, get_relation_extractor

logger = logging.getLogger("build_knowledge_graph")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Build a knowledge graph from stored notes")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--db", help="Path to the notes SQLite database")
    source.add_argument("--json", help="Path to a JSON list of {id, title, content} records")
    parser.add_argument("--format", choices=["json", "graphml"], default="json")
    parser.add_argument("--output", help="Output file (JSON goes to stdout when omitted)")
    parser.add_argument("--document-id", help="Only entities of this document (doc-<id>)")
    parser.add_argument(
        "--type",
        choices=[t.value for t in EntityType],
        help="Only entities of this type",
    )
    parser.add_argument("--search", help="Case-insensitive entity name filter")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    try:
        documents = load_markdown_documents(args.db) if args.db else load_documents_json(args.json)
    except (OSError, ValueError, sqlite3.Error) as e:
        logger.error(f"Failed to load documents: {e}")
        return 1

    analyzer = CorpusAnalyzer(
        entity_extractor=get_entity_extractor(),
        relation_extractor=get_relation_extractor(),
    )
    result = analyzer.analyze(documents)
    entities, relations = filter_graph(
        result.entities,
        result.relations,
        document_id=args.document_id,
        entity_type=EntityType(args.type) if args.type else None,
        search_term=args.search,
    )
    graph_data = build_graph_data(entities, relations)

    if args.format == "graphml":
        if not args.output:
            logger.error("--output is required for GraphML export")
            return 2
        write_graphml(graph_data, args.output)
    else:
        payload = graph_data.to_dict()
        payload["stats"] = get_graph_stats(graph_data).to_dict()
        text = json.dumps(payload, ensure_ascii=False, indent=2)
        if args.output:
            Path(args.output).write_text(text, encoding="utf-8")
            logger.info(f"Wrote graph JSON to {args.output}")
        else:
            print(text)

    return 0


if __name__ == "__main__":
    sys.exit(main())
