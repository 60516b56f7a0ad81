"""Navigation tree normalizer.

Walks a decoded navigation definition and resolves every page against the
content store, producing the menu tree handed to page props. Titles come from
front matter, with the short ``menu`` title taking precedence over ``title``.
"""

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TypedDict

from sitecontent.core.definition import (
    LeafDef,
    LinkDef,
    NavigationDefinition,
    NestedDef,
    NodeDef,
    PageListDef,
    decode_definition,
)
from sitecontent.core.store import ContentStore
from sitecontent.core.types import LogicalPath, URLPath
from sitecontent.errors import MalformedMetadataError

logger = logging.getLogger(__name__)


class NavNodeDict(TypedDict, total=False):
    """Dictionary representation of a navigation node."""

    key: str
    title: str
    href: str
    external: bool
    children: dict[str, "NavNodeDict"]


@dataclass(frozen=True)
class NavLeaf:
    """Navigation entry for a single routed page."""

    key: str
    title: str
    href: URLPath

    def to_dict(self) -> NavNodeDict:
        """Convert to dictionary for JSON serialization."""
        return {"key": self.key, "title": self.title, "href": self.href}


@dataclass(frozen=True)
class NavLink:
    """Navigation entry pointing outside the site."""

    key: str
    title: str
    href: str

    def to_dict(self) -> NavNodeDict:
        """Convert to dictionary for JSON serialization."""
        return {"key": self.key, "title": self.title, "href": self.href, "external": True}


@dataclass(frozen=True)
class NavGroup:
    """Navigation entry with ordered children."""

    key: str
    title: str
    children: dict[str, "NavNode"] = field(default_factory=dict)

    def to_dict(self) -> NavNodeDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "title": self.title,
            "children": {key: child.to_dict() for key, child in self.children.items()},
        }


NavNode = NavLeaf | NavGroup | NavLink


@dataclass(frozen=True)
class NavigationTree:
    """Resolved navigation for one content root."""

    root_key: str
    items: dict[str, NavNode] = field(default_factory=dict)

    def leaves(self) -> Iterator[NavLeaf]:
        """Yield every routed page in definition order."""
        yield from _iter_leaves(self.items)

    def leaf_paths(self) -> list[LogicalPath]:
        """Logical paths of every routed page in definition order."""
        return [LogicalPath(leaf.href.lstrip("/")) for leaf in self.leaves()]

    def to_dict(self) -> dict[str, NavNodeDict]:
        """Convert to dictionary for JSON serialization."""
        return {key: item.to_dict() for key, item in self.items.items()}


class NavigationBuilder:
    """Builds navigation trees by resolving definitions against a content store."""

    def __init__(self, store: ContentStore) -> None:
        self._store = store

    @property
    def store(self) -> ContentStore:
        return self._store

    def normalize(
        self,
        definition: Mapping[str, object] | NavigationDefinition,
        root_key: str,
    ) -> NavigationTree:
        """Resolve a navigation definition into a titled tree.

        Every page is loaded once. Any missing document aborts the whole
        normalization; no partial tree is returned.

        Args:
            definition: Authored or decoded navigation definition
            root_key: Content root the definition's pages live under

        Returns:
            NavigationTree with items in definition order

        Raises:
            NotFoundError: If a referenced document does not exist
            MalformedMetadataError: If a page has no usable title
            DefinitionError: If the authored definition is malformed
        """
        decoded = decode_definition(definition)
        items = self._normalize_nodes(decoded.nodes, (root_key,))
        logger.debug("Normalized navigation for %s with %d top-level items", root_key, len(items))
        return NavigationTree(root_key=root_key, items=items)

    def _normalize_nodes(
        self,
        nodes: tuple[NodeDef, ...],
        prefix: tuple[str, ...],
    ) -> dict[str, NavNode]:
        return {node.key: self._normalize_node(node, prefix) for node in nodes}

    def _normalize_node(self, node: NodeDef, prefix: tuple[str, ...]) -> NavNode:
        match node:
            case LeafDef(key=key):
                return self._load_leaf(key, prefix)
            case PageListDef(key=key, pages=pages):
                group_prefix = (*prefix, key)
                return NavGroup(
                    key=key,
                    title=node.menu or node.title or key,
                    children={page: self._load_leaf(page, group_prefix) for page in pages},
                )
            case NestedDef(key=key, children=children):
                return NavGroup(
                    key=key,
                    title=node.menu or node.title or key,
                    children=self._normalize_nodes(children, (*prefix, key)),
                )
            case LinkDef(key=key, title=title, href=href):
                return NavLink(key=key, title=title, href=href)
        raise TypeError(f"Unknown navigation node: {node!r}")

    def _load_leaf(self, key: str, prefix: tuple[str, ...]) -> NavLeaf:
        logical_path = "/".join((*prefix, key))
        metadata = self._store.load_document(logical_path).metadata
        title = metadata.get("menu") or metadata.get("title")
        if not title:
            raise MalformedMetadataError(logical_path, "missing 'title'")
        return NavLeaf(key=key, title=str(title), href=URLPath(f"/{logical_path}"))


def _iter_leaves(items: dict[str, NavNode]) -> Iterator[NavLeaf]:
    for item in items.values():
        if isinstance(item, NavLeaf):
            yield item
        elif isinstance(item, NavGroup):
            yield from _iter_leaves(item.children)
