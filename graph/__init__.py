"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge
    from graph import NodeState, EdgeState
    from graph import GraphError, InvalidSourceError
"""

from graph.node   import Node,  NodeState
from graph.edge   import Edge,  EdgeState
from graph.graph  import Graph
from graph.errors import TraceError, GraphError, InvalidSourceError, UnknownAlgorithmError

__all__ = [
    "Node",      "NodeState",
    "Edge",      "EdgeState",
    "Graph",
    "TraceError", "GraphError", "InvalidSourceError", "UnknownAlgorithmError",
]
