"""hukukrag developer CLI."""
