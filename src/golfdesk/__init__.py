"""golfdesk: multi-tenant golf lesson reservation API."""

__version__ = "0.1.0"
