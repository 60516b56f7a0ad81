"""Static route enumeration.

Lists every addressable page of a navigation definition so the build step can
pre-render it. Routes are produced from the same decoded tree the navigation
normalizer walks: each route maps to exactly one navigation leaf.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypedDict

from sitecontent.core.definition import (
    LeafDef,
    LinkDef,
    NavigationDefinition,
    NestedDef,
    NodeDef,
    PageListDef,
    decode_definition,
)
from sitecontent.core.types import LogicalPath

if TYPE_CHECKING:
    from sitecontent.core.chronology import ChronologicalIndex

logger = logging.getLogger(__name__)


class RouteDict(TypedDict):
    """Dictionary representation of a route."""

    params: list[str]


class RouteManifestDict(TypedDict):
    """Dictionary representation of a route manifest."""

    paths: list[RouteDict]
    fallback: bool


@dataclass(frozen=True)
class RouteDescriptor:
    """Addressable page, as path segments relative to its content root."""

    params: tuple[str, ...]

    def logical_path(self, root_key: str) -> LogicalPath:
        """Content store path for this route under root_key."""
        return LogicalPath("/".join((root_key, *self.params)))

    def to_dict(self) -> RouteDict:
        """Convert to dictionary for JSON serialization."""
        return {"params": list(self.params)}


@dataclass(frozen=True)
class RouteManifest:
    """Route list for static generation.

    Unknown routes are build-time errors, so there is never a fallback.
    """

    routes: list[RouteDescriptor] = field(default_factory=list)
    fallback: bool = False

    def to_dict(self) -> RouteManifestDict:
        """Convert to dictionary for JSON serialization."""
        return {"paths": [route.to_dict() for route in self.routes], "fallback": self.fallback}


def enumerate_routes(
    definition: Mapping[str, object] | NavigationDefinition,
) -> list[RouteDescriptor]:
    """Enumerate all routes of a navigation definition.

    Args:
        definition: Authored or decoded navigation definition

    Returns:
        Routes in definition insertion order

    Raises:
        DefinitionError: If the authored definition is malformed
    """
    decoded = decode_definition(definition)
    routes = [RouteDescriptor(params=params) for params in _walk(decoded.nodes, ())]
    logger.debug("Enumerated %d routes", len(routes))
    return routes


def enumerate_feed_routes(index: "ChronologicalIndex", root_key: str) -> list[RouteDescriptor]:
    """Enumerate one route per dated entry, newest first.

    Raises:
        InvalidDateError: If any entry has a missing or unparseable date
    """
    return [RouteDescriptor(params=(entry.key,)) for entry in index.order_by_date(root_key)]


def _walk(nodes: tuple[NodeDef, ...], prefix: tuple[str, ...]) -> Iterator[tuple[str, ...]]:
    for node in nodes:
        match node:
            case LeafDef(key=key):
                yield (*prefix, key)
            case PageListDef(key=key, pages=pages):
                for page in pages:
                    yield (*prefix, key, page)
            case NestedDef(key=key, children=children):
                yield from _walk(children, (*prefix, key))
            case LinkDef():
                continue
