"""Core content resolution: store, navigation, routes, chronology, props."""
