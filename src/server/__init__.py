"""HTTP API for wpbook."""
