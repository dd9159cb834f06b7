"""Request and response schemas for the holeplan HTTP API."""
