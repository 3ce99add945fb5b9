"""HTTP API for roastreel."""
