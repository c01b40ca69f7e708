"""Decode a lineage service response into a GraphModel.

Expected shape (extra node fields are kept as node metadata):

    {
      "seed": "urn:lsid:...:S1",
      "nodes": {
        "urn:lsid:...:S1": {
          "name": "S1",
          "type": "Sample",
          "parents": [{"lsid": "urn:lsid:...:R1", "role": "Sample"}],
          "children": []
        }
      }
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lineagewalk.kernel.graph import Edge, GraphModel, GraphValidationError, Node


class LineageFormatError(ValueError):
    """Raised when a lineage payload does not have the expected shape."""


class LineageLinkRecord(BaseModel):
    lsid: str
    role: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("lsid")
    @classmethod
    def validate_lsid(cls, v: str) -> str:
        if not v:
            raise ValueError("Lineage link lsid must not be empty")
        return v


class LineageNodeRecord(BaseModel):
    lsid: Optional[str] = None
    parents: List[LineageLinkRecord] = Field(default_factory=list)
    children: List[LineageLinkRecord] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")

    def metadata(self) -> Dict[str, Any]:
        """Every field other than the lsid and the edge lists."""
        return dict(self.model_extra or {})


class LineageResponse(BaseModel):
    seed: Optional[str] = None
    nodes: Dict[str, LineageNodeRecord] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore")


@dataclass(frozen=True)
class LineageDocument:
    """A decoded lineage payload: the graph and the seed the service reported."""
    graph: GraphModel
    seed: Optional[str] = None


def _links_to_edges(links: List[LineageLinkRecord]) -> List[Edge]:
    return [Edge(target=link.lsid, position=i, role=link.role) for i, link in enumerate(links)]


def parse_lineage(data: Dict[str, Any]) -> LineageDocument:
    """Validate a lineage payload dict and build the graph.

    Raises:
        LineageFormatError: if the payload shape is invalid or a node's own
            lsid disagrees with its key.
    """
    if not isinstance(data, dict):
        raise LineageFormatError("Lineage payload must be a JSON object")
    try:
        response = LineageResponse(**data)
    except ValidationError as e:
        raise LineageFormatError(f"Invalid lineage payload: {e}") from e

    nodes = []
    try:
        for key, record in response.nodes.items():
            if record.lsid is not None and record.lsid != key:
                raise LineageFormatError(
                    f"Node key '{key}' does not match its lsid '{record.lsid}'"
                )
            nodes.append(
                Node(
                    id=key,
                    parent_edges=_links_to_edges(record.parents),
                    child_edges=_links_to_edges(record.children),
                    metadata=record.metadata(),
                )
            )
        graph = GraphModel.from_nodes(nodes)
    except GraphValidationError as e:
        raise LineageFormatError(str(e)) from e

    return LineageDocument(graph=graph, seed=response.seed)


def load_lineage_from_path(path: Path) -> LineageDocument:
    """Load a lineage payload from a JSON file."""
    path = Path(path)
    if not path.exists():
        raise LineageFormatError(f"Lineage file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise LineageFormatError(f"Lineage file is not valid JSON: {path}: {e}") from e
    return parse_lineage(data)
