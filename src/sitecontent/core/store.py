"""Filesystem-backed content store.

Documents live at ``{source_dir}/{logical_path}.md`` and start with an
optional YAML front matter block. The store is the only source of truth:
nothing is cached between calls.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import frontmatter
import yaml

from sitecontent.core.types import LogicalPath, URLPath
from sitecontent.errors import MalformedMetadataError, NotFoundError

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"


@dataclass(frozen=True)
class Document:
    """Loaded content document."""

    logical_path: LogicalPath
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""

    @property
    def title(self) -> str | None:
        return self.metadata.get("title")


@dataclass(frozen=True)
class DocumentSummary:
    """Listing entry produced without loading the document body."""

    key: str
    metadata: dict[str, Any]
    href: URLPath

    @property
    def logical_path(self) -> LogicalPath:
        return LogicalPath(self.href.lstrip("/"))


class ContentStore:
    """Reads documents and their front matter from a content directory."""

    def __init__(self, source_dir: Path) -> None:
        """Initialize store.

        Args:
            source_dir: Root directory containing ``{category}/{key}.md`` files
        """
        self._source_dir = source_dir

    @property
    def source_dir(self) -> Path:
        """Root directory containing markdown sources."""
        return self._source_dir

    def load_document(self, logical_path: str) -> Document:
        """Load a document with its metadata and body.

        Args:
            logical_path: Path relative to source_dir without the .md extension,
                e.g. "tokio/tutorial/spawning"

        Returns:
            Document with parsed front matter and raw body text

        Raises:
            NotFoundError: If no file resolves for the logical path
            MalformedMetadataError: If the front matter block cannot be parsed
        """
        source_path = self._resolve_source_path(logical_path)
        logger.debug("Loading document %s from %s", logical_path, source_path)

        text = source_path.read_text(encoding="utf-8")
        metadata, body = _parse_front_matter(logical_path, text)
        return Document(logical_path=LogicalPath(logical_path), metadata=metadata, body=body)

    def list_documents(self, root_key: str) -> list[DocumentSummary]:
        """List all documents directly under a content root.

        Only the front matter block of each file is read. Results come back in
        filesystem order; callers are responsible for ordering.

        Args:
            root_key: Content category directory, e.g. "blog"

        Returns:
            Document summaries, empty if the directory is missing or empty
        """
        root_dir = self._source_dir / root_key
        if not root_dir.is_dir():
            logger.debug("Content root %s does not exist", root_dir)
            return []

        summaries: list[DocumentSummary] = []
        for source_path in root_dir.glob("*.md"):
            if source_path.name.startswith((".", "_")) or not source_path.is_file():
                continue
            key = source_path.stem
            logical_path = f"{root_key}/{key}"
            summaries.append(
                DocumentSummary(
                    key=key,
                    metadata=_read_front_matter_only(logical_path, source_path),
                    href=URLPath(f"/{logical_path}"),
                )
            )

        logger.debug("Listed %d documents under %s", len(summaries), root_key)
        return summaries

    def _resolve_source_path(self, logical_path: str) -> Path:
        """Resolve a logical path to an existing markdown file.

        Raises:
            NotFoundError: If the file is missing or lies outside source_dir
        """
        if not logical_path or logical_path.startswith("/"):
            raise NotFoundError(logical_path)

        source_path = self._source_dir / f"{logical_path}.md"
        root = self._source_dir.resolve()
        if not source_path.resolve().is_relative_to(root):
            raise NotFoundError(logical_path)
        if not source_path.is_file():
            raise NotFoundError(logical_path)
        return source_path


def _parse_front_matter(logical_path: str, text: str) -> tuple[dict[str, Any], str]:
    """Split text into front matter metadata and body.

    Raises:
        MalformedMetadataError: If the YAML block is invalid
    """
    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as exc:
        raise MalformedMetadataError(logical_path, str(exc)) from exc

    return dict(post.metadata), post.content


def _read_front_matter_only(logical_path: str, source_path: Path) -> dict[str, Any]:
    """Read only the front matter of a file, stopping at the closing delimiter.

    Leading blank lines are skipped, as python-frontmatter does. A file without
    an opening delimiter, or whose block is never closed, has no metadata.
    """
    lines: list[str] = []
    with source_path.open("r", encoding="utf-8") as f:
        first_line = f.readline()
        while first_line and not first_line.strip():
            first_line = f.readline()
        if first_line.strip() != FRONT_MATTER_DELIMITER:
            return {}
        lines.append(first_line)
        for line in f:
            lines.append(line)
            if line.strip() == FRONT_MATTER_DELIMITER:
                break
        else:
            return {}

    metadata, _ = _parse_front_matter(logical_path, "".join(lines))
    return metadata
