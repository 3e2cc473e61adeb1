"""Domain state, definitions and pure rule modules."""
