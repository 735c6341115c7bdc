"""HTTP API presentation layer: middleware and error rendering."""
