"""lineagewalk: depth layering and depth-first unrolling of derivation lineage graphs."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("lineagewalk")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
# Kernel functions stay under lineagewalk.kernel; result models come from lineagewalk.api
from lineagewalk.api import layers, depth_first, grid, LayersResult, DepthFirstResult, GridResult
from lineagewalk.codes import DiagnosticCode
from lineagewalk.kernel.graph import Direction, Edge, GraphModel, Node
from lineagewalk.kernel.options import (
    AllPolicy,
    MultiPolicy,
    NearestPolicy,
    SpecificPolicy,
    TraversalOptions,
)

__all__ = [
    "__version__",
    "layers",
    "depth_first",
    "grid",
    "LayersResult",
    "DepthFirstResult",
    "GridResult",
    "DiagnosticCode",
    "Direction",
    "Edge",
    "GraphModel",
    "Node",
    "AllPolicy",
    "MultiPolicy",
    "NearestPolicy",
    "SpecificPolicy",
    "TraversalOptions",
]
