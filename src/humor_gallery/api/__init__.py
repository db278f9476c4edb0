"""HTTP API for the Humor Gallery service."""
