"""Object navigation over a Roam graph, plus a REST client for its backend API."""

from roamgraph.core.attribute import Attribute
from roamgraph.core.entity import Block, Entity, Page
from roamgraph.core.exceptions import ConfigurationError, RoamAPIError, RoamGraphError
from roamgraph.core.graph import Graph, RoamAPI
from roamgraph.core.rest import RestClient

__version__ = "0.1.0"

__all__ = [
    "Attribute",
    "Block",
    "ConfigurationError",
    "Entity",
    "Graph",
    "Page",
    "RestClient",
    "RoamAPI",
    "RoamAPIError",
    "RoamGraphError",
]
