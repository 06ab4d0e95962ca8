"""HTTP serving utilities for workers."""
