"""Discography REST API with a tag-invalidated paginated collection cache."""
