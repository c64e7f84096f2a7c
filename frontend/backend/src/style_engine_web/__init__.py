"""HTTP surface for the style engine."""
