"""Core pipeline: token decoding, event normalization, display projection, relay."""
