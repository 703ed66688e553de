"""HTTP API: health endpoints and versioned module routes."""
