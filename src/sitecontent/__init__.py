"""Sitecontent - build-time content resolution for documentation sites."""
