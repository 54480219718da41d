"""Adapters connecting the domain ports to HTTP and SQL infrastructure."""
