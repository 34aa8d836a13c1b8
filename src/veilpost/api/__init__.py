"""HTTP API for Veilpost."""
