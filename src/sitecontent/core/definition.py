"""Navigation definition decoding.

An authored navigation definition is a nested mapping. Its node shapes are
recognized once here and turned into a typed tree which both the navigation
normalizer and the route enumerator walk, so the two can never disagree on
what is a page.

Shapes, per node value:

- ``{}`` or ``None``: a single page (leaf)
- ``{"title": ..., "pages": ["a", "b"]}``: a group with a fixed page list
- ``{"title": ..., "href": "https://..."}``: an external link, never routed
- any other mapping: a nested group whose non-attribute keys are children
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from sitecontent.errors import DefinitionError

# Keys that describe a node rather than name a child
ATTRIBUTE_KEYS = frozenset({"title", "menu", "pages", "href"})


@dataclass(frozen=True)
class LeafDef:
    """Single page resolved from the content store."""

    key: str


@dataclass(frozen=True)
class PageListDef:
    """Group whose children are an ordered list of page keys."""

    key: str
    title: str | None
    menu: str | None
    pages: tuple[str, ...]


@dataclass(frozen=True)
class NestedDef:
    """Group recursing into further sub-definitions."""

    key: str
    title: str | None
    menu: str | None
    children: tuple["NodeDef", ...]


@dataclass(frozen=True)
class LinkDef:
    """External link shown in the menu but never routed or loaded."""

    key: str
    title: str
    href: str


NodeDef = LeafDef | PageListDef | NestedDef | LinkDef


@dataclass(frozen=True)
class NavigationDefinition:
    """Decoded navigation definition, children in authored order."""

    nodes: tuple[NodeDef, ...]

    def __iter__(self) -> Iterator[NodeDef]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)


def decode_definition(raw: Mapping[str, object] | NavigationDefinition) -> NavigationDefinition:
    """Decode an authored navigation mapping into a typed tree.

    Already decoded definitions are returned unchanged.

    Args:
        raw: Ordered mapping of key to node value

    Returns:
        NavigationDefinition preserving insertion order

    Raises:
        DefinitionError: If any node has an invalid shape
    """
    if isinstance(raw, NavigationDefinition):
        return raw
    if not isinstance(raw, Mapping):
        raise DefinitionError("<root>", "Navigation definition must be a mapping")
    return NavigationDefinition(nodes=_decode_children(raw, ()))


def _decode_children(raw: Mapping[str, object], parents: tuple[str, ...]) -> tuple[NodeDef, ...]:
    return tuple(_decode_node(key, value, parents) for key, value in raw.items())


def _decode_node(key: object, value: object, parents: tuple[str, ...]) -> NodeDef:
    key_path = "/".join((*parents, str(key)))
    if not isinstance(key, str) or not key or "/" in key or key in (".", ".."):
        raise DefinitionError(key_path, "Navigation key must be a non-empty path segment")

    if value is None:
        return LeafDef(key=key)
    if not isinstance(value, Mapping):
        raise DefinitionError(key_path, "Navigation node must be a mapping")

    title = _optional_str(value, "title", key_path)
    menu = _optional_str(value, "menu", key_path)
    children = {k: v for k, v in value.items() if k not in ATTRIBUTE_KEYS}

    if "href" in value:
        href = _optional_str(value, "href", key_path)
        if href is None or title is None:
            raise DefinitionError(key_path, "External link requires title and href")
        if "pages" in value or children:
            raise DefinitionError(key_path, "External link cannot have children")
        return LinkDef(key=key, title=title, href=href)

    if "pages" in value:
        if children:
            raise DefinitionError(key_path, "Page list group cannot also have nested children")
        return PageListDef(
            key=key,
            title=title,
            menu=menu,
            pages=_decode_pages(value["pages"], key_path),
        )

    if not children:
        return LeafDef(key=key)

    return NestedDef(
        key=key,
        title=title,
        menu=menu,
        children=_decode_children(children, (*parents, key)),
    )


def _decode_pages(raw: object, key_path: str) -> tuple[str, ...]:
    if not isinstance(raw, list | tuple):
        raise DefinitionError(key_path, "pages must be a list")

    pages: list[str] = []
    for item in raw:
        if not isinstance(item, str) or not item or "/" in item or item in (".", ".."):
            raise DefinitionError(key_path, "pages items must be non-empty path segments")
        if item in pages:
            raise DefinitionError(f"{key_path}/{item}", "Duplicate page key")
        pages.append(item)
    return tuple(pages)


def _optional_str(data: Mapping[str, object], name: str, key_path: str) -> str | None:
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise DefinitionError(key_path, f"{name} must be a string")
    return value
