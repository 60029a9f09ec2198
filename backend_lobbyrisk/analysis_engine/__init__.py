"""
Analysis engine: profile risk scoring, comment matching, and lobby aggregation.

Pure, deterministic functions; no I/O.
"""

from backend_lobbyrisk.analysis_engine.comments import CommentMatcher
from backend_lobbyrisk.analysis_engine.lobby import lobby_risk_exponential
from backend_lobbyrisk.analysis_engine.models import (
    LobbyResult,
    ProfileSnapshot,
    RecentGame,
    TaskResult,
)
from backend_lobbyrisk.analysis_engine.scorer import ScoringConfig, compute_risk_score

__all__ = [
    "CommentMatcher",
    "LobbyResult",
    "ProfileSnapshot",
    "RecentGame",
    "ScoringConfig",
    "TaskResult",
    "compute_risk_score",
    "lobby_risk_exponential",
]
