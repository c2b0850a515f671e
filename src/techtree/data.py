"""
Data loading for tech tree models.

Turns plain structured data (the JSON-compatible records produced by
GraphModel.to_records) into a GraphModel.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, List, Union

from .model import GraphModel, Node, NodeType, TechTreeError, ValidationError


class ParseError(TechTreeError):
    """Raised when input data cannot be turned into a model."""

    pass


def _parse_record(index: int, record: Any) -> Node:
    if not isinstance(record, Mapping):
        raise ParseError(f"Record {index}: expected an object, got {record!r}")

    title = record.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ParseError(f"Record {index}: missing or empty title")

    try:
        node_type = NodeType.parse(record.get("type", NodeType.CORE_TECHNOLOGY))
    except ValidationError as e:
        raise ParseError(f"Record {index}: {e}") from e

    relations = record.get("relations") or []
    if isinstance(relations, str) or not isinstance(relations, Iterable):
        raise ParseError(f"Record {index}: relations must be a list of titles")
    relations = list(relations)
    for relation in relations:
        if not isinstance(relation, str):
            raise ParseError(
                f"Record {index}: relation {relation!r} is not a title string"
            )

    return Node(title=title, type=node_type, relations=tuple(relations))


def load_nodes(records: Iterable[Any]) -> GraphModel:
    """
    Build a model from an ordered list of node records.

    Each record is a mapping with ``title``, ``type`` and optional
    ``relations``. Order is kept.

    Args:
        records: Ordered node records

    Returns:
        GraphModel with one node per record

    Raises:
        ParseError: If a record is malformed
    """
    if isinstance(records, (str, bytes, Mapping)):
        raise ParseError("Expected a list of node records")
    nodes: List[Node] = [
        _parse_record(index, record) for index, record in enumerate(records)
    ]
    return GraphModel(nodes)


def loads(text: str) -> GraphModel:
    """Parse a JSON array of node records."""
    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}") from e
    return load_nodes(records)


def load_file(filename: Union[str, Path]) -> GraphModel:
    """Load a model from a JSON file."""
    return loads(Path(filename).read_text(encoding="utf-8"))
