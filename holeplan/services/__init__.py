"""Domain services for holeplan."""
