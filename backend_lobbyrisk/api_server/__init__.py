"""
API server package: HTTP interface over the aggregation orchestrator.

Receives a list of identities, returns per-identity risk and the lobby risk as JSON.
"""
