"""
Domain models: recent game entries, profile snapshots, lobby and task results.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from backend_lobbyrisk.analysis_engine.scorer import (
    DEFAULT_SCORING_CONFIG,
    ScoringConfig,
    compute_risk_score,
)


@dataclass(frozen=True)
class RecentGame:
    """One entry of a profile's recent activity list."""

    id: str
    title: str
    hours_played: float

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "hoursPlayed": self.hours_played}


@dataclass(frozen=True)
class ProfileSnapshot:
    """
    Parsed and scored representation of one identity at one fetch time.

    risk_score is derived from the other fields in __post_init__; it cannot be
    passed in. Snapshots are immutable; a new lookup builds a new snapshot.
    """

    is_private: bool
    vac_banned: bool | None
    level: int | None
    friend_count: int | None
    recent_games: tuple[RecentGame, ...] = ()
    flagged_by_comments: bool = False
    scoring: ScoringConfig = field(default=DEFAULT_SCORING_CONFIG, repr=False, compare=False)
    risk_score: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "recent_games", tuple(self.recent_games))
        object.__setattr__(self, "risk_score", compute_risk_score(self, self.scoring))

    @classmethod
    def private(cls, scoring: ScoringConfig = DEFAULT_SCORING_CONFIG) -> ProfileSnapshot:
        """Snapshot for a private profile or one with no recent activity."""
        return cls(
            is_private=True,
            vac_banned=None,
            level=None,
            friend_count=None,
            recent_games=(),
            flagged_by_comments=False,
            scoring=scoring,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "isPrivate": self.is_private,
            "vacBanned": self.vac_banned,
            "level": self.level,
            "friendCount": self.friend_count,
            "recentGames": [g.to_dict() for g in self.recent_games],
            "flaggedByComments": self.flagged_by_comments,
            "riskScore": self.risk_score,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)


@dataclass(frozen=True)
class TaskResult:
    """Outcome of one fetch-and-score task: a score or a failure marker."""

    identity: str
    risk_score: float | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.risk_score is not None

    @classmethod
    def success(cls, identity: str, risk_score: float) -> TaskResult:
        return cls(identity=identity, risk_score=risk_score)

    @classmethod
    def failure(cls, identity: str, error: str) -> TaskResult:
        return cls(identity=identity, error=error)


@dataclass(frozen=True)
class LobbyResult:
    """Per-identity scores plus the lobby aggregate for one request batch."""

    profiles: dict[str, float]
    lobby_risk: float

    def to_dict(self) -> dict[str, Any]:
        return {"profiles": dict(self.profiles), "lobbyRisk": self.lobby_risk}
