"""External services: the Sanity content repository and YouTube search."""
