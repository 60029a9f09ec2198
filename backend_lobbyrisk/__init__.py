"""
Backend LobbyRisk: risk aggregation service for Steam lobbies.

Scores each requested profile (cache first, bounded-concurrency fetch on miss)
and folds the individual scores into one lobby risk. Modular architecture with
clear separation between cache, profile source, analysis engine, worker pool,
and API server.
"""

__version__ = "0.1.0"
