"""Query gateway for dynamically specified JT400 endpoints."""

__version__ = "0.1.0"
