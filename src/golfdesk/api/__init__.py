"""HTTP API for golfdesk."""
