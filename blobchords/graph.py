"""
Weighted chord-transition graph loaded from a JSON document of the form
``{name, description, nodes: [{id}], links: [{source, target, weight}]}``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class GraphError(ValueError):
    """Raised when a chord graph document is malformed."""


class NodeModel(BaseModel):
    id: str


class LinkModel(BaseModel):
    source: str
    target: str
    weight: float


class GraphDocument(BaseModel):
    name: str = "Untitled"
    description: str = ""
    nodes: List[NodeModel]
    links: List[LinkModel] = []


@dataclass(frozen=True)
class ChordLink:
    source: str
    target: str
    weight: float


@dataclass(frozen=True)
class ChordGraph:
    """Immutable once loaded; links keep their declaration order."""

    name: str
    description: str
    nodes: Tuple[str, ...]
    links: Tuple[ChordLink, ...]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ChordGraph:
        try:
            doc = GraphDocument(**data)
        except (TypeError, ValidationError) as exc:
            raise GraphError(f"Invalid chord graph document: {exc}") from exc

        nodes = tuple(node.id for node in doc.nodes)
        seen = set()
        for node in nodes:
            if node in seen:
                raise GraphError(f"Duplicate chord node {node!r}")
            seen.add(node)

        links = []
        for link in doc.links:
            for end in (link.source, link.target):
                if end not in seen:
                    raise GraphError(
                        f"Link {link.source!r} -> {link.target!r} references unknown node {end!r}"
                    )
            if not 0.0 < link.weight <= 1.0:
                raise GraphError(
                    f"Link {link.source!r} -> {link.target!r} has weight {link.weight} outside (0, 1]"
                )
            links.append(ChordLink(link.source, link.target, float(link.weight)))

        return cls(
            name=doc.name,
            description=doc.description,
            nodes=nodes,
            links=tuple(links),
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> ChordGraph:
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise GraphError(f"{path} is not valid JSON: {exc}") from exc
        graph = cls.from_dict(data)
        logger.info(
            "Loaded chord graph %r (%d nodes, %d links)",
            graph.name,
            len(graph.nodes),
            len(graph.links),
        )
        return graph

    def links_from(self, source: str) -> List[ChordLink]:
        return [link for link in self.links if link.source == source]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "nodes": [{"id": node} for node in self.nodes],
            "links": [
                {"source": link.source, "target": link.target, "weight": link.weight}
                for link in self.links
            ],
        }
