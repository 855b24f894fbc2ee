"""HTTP surface for the pagecraft conversion engine."""
