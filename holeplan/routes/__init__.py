"""HTTP routes for the holeplan API."""
