"""Static export of route manifests and page props.

Writes one JSON payload per page plus a route manifest per content root:

    out/
    ├── routes/
    │   ├── tokio.json              # {"paths": [...], "fallback": false}
    │   └── blog.json
    └── props/
        ├── tokio/
        │   └── tutorial/
        │       └── spawning.json   # PageProps
        └── blog/
            └── 2020-12-tokio-1-0.json   # FeedPageProps

A failing page is logged and reported but does not stop the other pages.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sitecontent.config import Config
from sitecontent.core.chronology import ChronologicalIndex
from sitecontent.core.navigation import NavigationBuilder
from sitecontent.core.props import AppContext, PropsAssembler, build_app_context
from sitecontent.core.routes import (
    RouteDescriptor,
    RouteManifest,
    enumerate_feed_routes,
    enumerate_routes,
)
from sitecontent.core.store import ContentStore
from sitecontent.errors import ContentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageFailure:
    """Page whose props could not be assembled."""

    path: str
    error: str


@dataclass
class ExportReport:
    """Outcome of a static export."""

    pages: list[str] = field(default_factory=list)
    failures: list[PageFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class SiteExporter:
    """Exports every routed page of the configured sections."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._store = ContentStore(config.content.source_dir)
        self._index = ChronologicalIndex(self._store)
        self._assembler = PropsAssembler(self._store, NavigationBuilder(self._store))

    @property
    def output_dir(self) -> Path:
        return self._config.content.output_dir

    def export(self) -> ExportReport:
        """Write manifests and props for all sections and the feed.

        Returns:
            ExportReport listing written pages and per-page failures

        Raises:
            DefinitionError: If a navigation definition is malformed
            InvalidDateError: If the feed cannot be ordered
        """
        report = ExportReport()
        feed_root = self._config.feed.root
        app = build_app_context(self._index, feed_root)

        for root_key, definition in self._config.sections.items():
            routes = enumerate_routes(definition)
            self._write_manifest(root_key, routes)
            logger.info("Exporting %d pages of %s", len(routes), root_key)
            for route in routes:
                self._export_page(report, root_key, route, definition, app)

        feed_routes = []
        if feed_root not in self._config.sections:
            feed_routes = enumerate_feed_routes(self._index, feed_root)
        if feed_routes:
            self._write_manifest(feed_root, feed_routes)
            logger.info("Exporting %d feed entries of %s", len(feed_routes), feed_root)
            for route in feed_routes:
                self._export_feed_page(report, feed_root, route, app)

        for failure in report.failures:
            logger.error("Failed to export %s: %s", failure.path, failure.error)
        return report

    def _export_page(
        self,
        report: ExportReport,
        root_key: str,
        route: RouteDescriptor,
        definition: dict[str, Any],
        app: AppContext,
    ) -> None:
        logical_path = route.logical_path(root_key)
        try:
            props = self._assembler.assemble(definition, root_key, route.params, app)
        except ContentError as e:
            report.failures.append(PageFailure(path=e.path or logical_path, error=str(e)))
            return
        self._write_json(self.output_dir / "props" / f"{logical_path}.json", props.to_dict())
        report.pages.append(logical_path)

    def _export_feed_page(
        self,
        report: ExportReport,
        root_key: str,
        route: RouteDescriptor,
        app: AppContext,
    ) -> None:
        logical_path = route.logical_path(root_key)
        try:
            props = self._assembler.assemble_feed_page(
                self._index,
                root_key,
                route.params,
                self._config.feed.menu_size,
                app,
            )
        except ContentError as e:
            report.failures.append(PageFailure(path=e.path or logical_path, error=str(e)))
            return
        self._write_json(self.output_dir / "props" / f"{logical_path}.json", props.to_dict())
        report.pages.append(logical_path)

    def _write_manifest(self, root_key: str, routes: list[RouteDescriptor]) -> None:
        manifest = RouteManifest(routes=routes)
        self._write_json(self.output_dir / "routes" / f"{root_key}.json", manifest.to_dict())

    def _write_json(self, path: Path, data: object) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.debug("Wrote %s", path)
