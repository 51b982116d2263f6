"""Disk access for scene assets: path resolution, loading and caching."""
