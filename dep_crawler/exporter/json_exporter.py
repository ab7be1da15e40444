"""JSON rendering of relationships."""

from __future__ import annotations

import json

from dep_crawler.models import RelationshipGraph


def export_json(relationships: RelationshipGraph) -> str:
    return json.dumps(relationships.payload(), indent=2) + "\n"
