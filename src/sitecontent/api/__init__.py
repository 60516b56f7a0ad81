"""JSON API endpoints of the preview server."""
