"""HTTP API for the querydesk engine."""
