"""Application modules."""
