"""Foojra food-ordering marketplace backend (JSON-file mock data layer + API)."""

__version__ = "1.0.0"
