"""HTTP API for the mobile client."""
