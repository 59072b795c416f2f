"""Database access for golfdesk."""
