"""Core type definitions."""

from typing import NewType

# URL path for routing (e.g., "/tokio/tutorial/spawning")
# Distinct from LogicalPath to catch type mismatches
URLPath = NewType("URLPath", str)

# Content store path without extension (e.g., "tokio/tutorial/spawning")
LogicalPath = NewType("LogicalPath", str)
