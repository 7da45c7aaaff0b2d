"""Quote fetchers."""
