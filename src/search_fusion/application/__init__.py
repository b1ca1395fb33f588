"""Application layer: search aggregation and AI overview use cases."""
