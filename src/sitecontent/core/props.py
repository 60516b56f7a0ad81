"""Page props assembly.

Entry point for rendering a page: joins the requested route into a logical
path, loads the document, normalizes the full navigation tree and attaches
app-wide context. App context is passed in explicitly so every page of a
build sees the same value.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from sitecontent.core.chronology import ChronologicalEntry, ChronologicalIndex
from sitecontent.core.definition import NavigationDefinition
from sitecontent.core.navigation import NavigationBuilder, NavigationTree
from sitecontent.core.store import ContentStore, Document
from sitecontent.errors import NotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContext:
    """Context shared by every page of a build."""

    latest_entry: ChronologicalEntry | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        latest = self.latest_entry.to_dict() if self.latest_entry else None
        return {"latest_entry": latest}


@dataclass(frozen=True)
class PageProps:
    """Render payload for a navigation page."""

    title: str | None
    body: str
    menu: NavigationTree
    data: dict[str, Any] = field(default_factory=dict)
    app: AppContext = field(default_factory=AppContext)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "body": self.body,
            "menu": self.menu.to_dict(),
            "data": jsonable(self.data),
            "app": self.app.to_dict(),
        }


@dataclass(frozen=True)
class FeedPageProps:
    """Render payload for a dated feed page, with a year-grouped menu."""

    title: str | None
    body: str
    menu: dict[int, list[ChronologicalEntry]]
    data: dict[str, Any] = field(default_factory=dict)
    app: AppContext = field(default_factory=AppContext)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "body": self.body,
            "menu": {
                str(year): [entry.to_dict() for entry in entries]
                for year, entries in self.menu.items()
            },
            "data": jsonable(self.data),
            "app": self.app.to_dict(),
        }


def build_app_context(index: ChronologicalIndex, feed_root: str) -> AppContext:
    """Compute app context from the newest entry of the feed root."""
    return AppContext(latest_entry=index.latest(feed_root))


def join_route(root_key: str, segments: Sequence[str] | str) -> str:
    """Join route segments into a logical path under root_key.

    Raises:
        NotFoundError: If segments are empty or contain non-segment values
    """
    if isinstance(segments, str):
        segments = [segments]
    attempted = "/".join((root_key, *segments))
    if not segments:
        raise NotFoundError(attempted)
    for segment in segments:
        if not segment or "/" in segment or segment in (".", ".."):
            raise NotFoundError(attempted)
    return attempted


class PropsAssembler:
    """Assembles page props from the content store and navigation."""

    def __init__(self, store: ContentStore, navigation: NavigationBuilder | None = None) -> None:
        self._store = store
        self._navigation = navigation or NavigationBuilder(store)

    def assemble(
        self,
        definition: Mapping[str, object] | NavigationDefinition,
        root_key: str,
        segments: Sequence[str],
        app: AppContext | None = None,
    ) -> PageProps:
        """Assemble props for one navigation route.

        Args:
            definition: Navigation definition of the content root
            root_key: Content root, e.g. "tokio"
            segments: Route segments, e.g. ["tutorial", "spawning"]
            app: App-wide context; empty when omitted

        Returns:
            PageProps for the requested page

        Raises:
            NotFoundError: If the target document does not exist. For routes
                produced by enumerate_routes this means the definition and the
                content have drifted apart.
        """
        logical_path = join_route(root_key, segments)
        document = self._store.load_document(logical_path)
        menu = self._navigation.normalize(definition, root_key)
        logger.debug("Assembled props for %s", logical_path)
        return PageProps(
            title=document.title,
            body=document.body,
            menu=menu,
            data=document.metadata,
            app=app or AppContext(),
        )

    def assemble_feed_page(
        self,
        index: ChronologicalIndex,
        root_key: str,
        segments: Sequence[str],
        menu_size: int,
        app: AppContext | None = None,
    ) -> FeedPageProps:
        """Assemble props for one dated feed entry.

        Args:
            index: Chronological index over the content store
            root_key: Dated content root, e.g. "blog"
            segments: Route segments, e.g. ["2020-12-tokio-1-0"]
            menu_size: Number of newest entries shown in the menu
            app: App-wide context; empty when omitted

        Raises:
            NotFoundError: If the target document does not exist
            InvalidDateError: If any entry of the root has a bad date
        """
        logical_path = join_route(root_key, segments)
        document: Document = self._store.load_document(logical_path)
        return FeedPageProps(
            title=document.title,
            body=document.body,
            menu=index.group_by_year(root_key, menu_size),
            data=document.metadata,
            app=app or AppContext(),
        )


def jsonable(value: Any) -> Any:
    """Convert front matter values into JSON-serializable data."""
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {str(k): jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set):
        return [jsonable(v) for v in value]
    return value
