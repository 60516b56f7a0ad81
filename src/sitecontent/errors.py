"""Error types for content resolution.

Every content error carries the logical path that was being resolved so a
failed build can point at the offending document.
"""


class ContentError(Exception):
    """Base class for content resolution failures."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class NotFoundError(ContentError):
    """No document resolves at the requested logical path."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "Document not found")


class MalformedMetadataError(ContentError):
    """Front matter block is present but cannot be parsed into a mapping."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, f"Malformed front matter ({reason})")
        self.reason = reason


class InvalidDateError(ContentError):
    """Dated document has a missing or unparseable ``date`` field."""

    def __init__(self, path: str, value: object) -> None:
        super().__init__(path, f"Invalid date {value!r}")
        self.value = value


class DefinitionError(ValueError):
    """Authored navigation definition has an invalid shape."""

    def __init__(self, key_path: str, message: str) -> None:
        super().__init__(f"{message}: {key_path}")
        self.key_path = key_path
