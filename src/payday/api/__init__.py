"""HTTP API for the payday engine."""
