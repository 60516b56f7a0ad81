"""Configuration management for Sitecontent.

Supports TOML configuration format with auto-discovery. Navigation
definitions are authored in the same file, one ``[sections.<root>]`` table
per content root; TOML tables keep their insertion order, which is the menu
order.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "sitecontent.toml"


@dataclass
class ServerConfig:
    """Preview server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class ContentConfig:
    """Content store configuration."""

    source_dir: Path = field(default_factory=lambda: Path("content"))
    output_dir: Path = field(default_factory=lambda: Path("out"))


@dataclass
class FeedConfig:
    """Dated feed configuration."""

    root: str = "blog"
    menu_size: int = 10


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    feed: FeedConfig
    sections: dict[str, dict[str, Any]] = field(default_factory=dict)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for sitecontent.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            content=ContentConfig(),
            feed=FeedConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid configuration file {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            content=cls._parse_content(data.get("content"), config_dir),
            feed=cls._parse_feed(data.get("feed")),
            sections=cls._parse_sections(data.get("sections")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(
                source_dir=config_dir / "content",
                output_dir=config_dir / "out",
            )

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        source_dir = data.get("source_dir", "content")
        if not isinstance(source_dir, str):
            raise ValueError("content.source_dir must be a string")

        output_dir = data.get("output_dir", "out")
        if not isinstance(output_dir, str):
            raise ValueError("content.output_dir must be a string")

        return ContentConfig(
            source_dir=config_dir / source_dir,
            output_dir=config_dir / output_dir,
        )

    @classmethod
    def _parse_feed(cls, data: object) -> FeedConfig:
        if data is None:
            return FeedConfig()

        if not isinstance(data, dict):
            raise ValueError("feed section must be a dictionary")

        root = data.get("root", "blog")
        if not isinstance(root, str) or not root:
            raise ValueError("feed.root must be a non-empty string")

        menu_size = data.get("menu_size", 10)
        if not isinstance(menu_size, int) or isinstance(menu_size, bool) or menu_size < 0:
            raise ValueError("feed.menu_size must be a non-negative integer")

        return FeedConfig(root=root, menu_size=menu_size)

    @classmethod
    def _parse_sections(cls, data: object) -> dict[str, dict[str, Any]]:
        """Parse navigation definitions.

        Only the container shape is checked here; node shapes are validated
        when the definition is decoded.
        """
        if data is None:
            return {}

        if not isinstance(data, dict):
            raise ValueError("sections must be a dictionary")

        sections: dict[str, dict[str, Any]] = {}
        for root_key, definition in data.items():
            if not isinstance(definition, dict):
                raise ValueError(f"sections.{root_key} must be a dictionary")
            sections[root_key] = definition
        return sections

    def get_section(self, root_key: str) -> dict[str, Any]:
        """Navigation definition for a content root.

        Raises:
            KeyError: If no section is defined for root_key
        """
        if root_key not in self.sections:
            raise KeyError(f"No navigation section defined for {root_key!r}")
        return self.sections[root_key]

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        output_dir: Path | None = None,
        feed_root: str | None = None,
        menu_size: int | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if source_dir is not None or output_dir is not None:
            content = replace(
                self.content,
                source_dir=source_dir if source_dir is not None else self.content.source_dir,
                output_dir=output_dir if output_dir is not None else self.content.output_dir,
            )

        feed = self.feed
        if feed_root is not None or menu_size is not None:
            feed = replace(
                self.feed,
                root=feed_root if feed_root is not None else self.feed.root,
                menu_size=menu_size if menu_size is not None else self.feed.menu_size,
            )

        return replace(self, server=server, content=content, feed=feed)
