"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
from sitecontent.config import Config, ContentConfig, FeedConfig, ServerConfig
from sitecontent.core.store import ContentStore

WritePage = Callable[..., Path]


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create an empty content directory."""
    source_dir = tmp_path / "content"
    source_dir.mkdir(exist_ok=True)
    return source_dir


@pytest.fixture
def store(content_dir: Path) -> ContentStore:
    return ContentStore(content_dir)


@pytest.fixture
def write_page(content_dir: Path) -> WritePage:
    """Return a helper writing a markdown page with front matter.

    Metadata values are written verbatim into the YAML block, so
    ``date="2021-03-04"`` is read back as a date.
    """

    def write(logical_path: str, body: str = "Content.", **metadata: str) -> Path:
        path = content_dir / f"{logical_path}.md"
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = ["---", *(f"{key}: {value}" for key, value in metadata.items()), "---", body]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return write


@pytest.fixture
def test_config(tmp_path: Path, content_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories."""
    return Config(
        server=ServerConfig(),
        content=ContentConfig(source_dir=content_dir, output_dir=tmp_path / "out"),
        feed=FeedConfig(root="blog", menu_size=10),
        sections={
            "tokio": {
                "overview": {"title": "Overview", "pages": ["what", "why"]},
                "glossary": {},
                "api": {"title": "API documentation", "href": "https://docs.rs/tokio"},
            },
        },
    )


@pytest.fixture
def tokio_content(write_page: WritePage) -> None:
    """Write pages for the tokio section of test_config and two blog posts."""
    write_page("tokio/overview/what", "What is Tokio.", title="What is Tokio?", menu="What")
    write_page("tokio/overview/why", "Why Tokio.", title="Why Tokio?")
    write_page("tokio/glossary", "Terms.", title="Glossary")
    write_page("blog/2020-12-tokio-1-0", "Released.", title="Announcing Tokio 1.0", date="2020-12-23")
    write_page("blog/2021-07-tokio-1-8", "Update.", title="Tokio 1.8", date="2021-07-01")
