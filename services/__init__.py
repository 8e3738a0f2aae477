"""MetaProp - Batch services."""
