"""Business services for Veilpost."""
