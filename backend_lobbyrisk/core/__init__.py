"""
Core utilities: error taxonomy and cross-cutting concerns shared by the cache
layer, profile source, worker pool, and API server.
"""
