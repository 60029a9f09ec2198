"""
Profile risk score computation: rules and aggregation.

Priority cascade first (VAC ban, private profile, no recent games each force the
maximum score), then an additive weighted-signal model over comments, reference
game hours, friend count, and level. Fully deterministic and explainable; no ML.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from backend_lobbyrisk.analysis_engine.models import ProfileSnapshot

# Counter-Strike app id on Steam
REFERENCE_GAME_ID = "730"
SHORT_CIRCUIT_SCORE = 99.9
MAX_SCORE = 100.0


@dataclass(frozen=True)
class ScoringConfig:
    """Thresholds and weights; defaults are the production rule."""

    reference_game_id: str = REFERENCE_GAME_ID
    short_circuit_score: float = SHORT_CIRCUIT_SCORE
    max_score: float = MAX_SCORE
    flagged_comments_weight: float = 50.0
    veteran_hours_threshold: float = 1000.0
    veteran_hours_weight: float = 10.0
    experienced_hours_threshold: float = 500.0
    experienced_hours_weight: float = 20.0
    min_friend_count: int = 50
    low_friends_weight: float = 10.0
    min_level: int = 10
    low_level_weight: float = 10.0


DEFAULT_SCORING_CONFIG = ScoringConfig()


def compute_risk_score(
    profile: ProfileSnapshot,
    config: ScoringConfig | None = None,
) -> float:
    """
    Compute a risk score (0-100) from a profile's pre-score fields.

    Rule, first short-circuit wins:
        1. vac_banned -> short_circuit_score
        2. is_private -> short_circuit_score
        3. no recent games -> short_circuit_score
        4. additive: flagged comments, reference game hours (the >1000h and
           >500h checks are independent and both fire above 1000h),
           friend count below minimum, level below minimum; clamped to max_score.

    Only reads is_private, vac_banned, level, friend_count, recent_games and
    flagged_by_comments, so any object exposing those attributes is accepted.
    """
    cfg = config or DEFAULT_SCORING_CONFIG

    if profile.vac_banned:
        return cfg.short_circuit_score
    if profile.is_private:
        return cfg.short_circuit_score
    if not profile.recent_games:
        return cfg.short_circuit_score

    score = 0.0
    if profile.flagged_by_comments:
        score += cfg.flagged_comments_weight

    reference = next(
        (g for g in profile.recent_games if g.id == cfg.reference_game_id),
        None,
    )
    if reference is not None:
        if reference.hours_played > cfg.veteran_hours_threshold:
            score += cfg.veteran_hours_weight
        if reference.hours_played > cfg.experienced_hours_threshold:
            score += cfg.experienced_hours_weight

    if profile.friend_count is not None and profile.friend_count < cfg.min_friend_count:
        score += cfg.low_friends_weight
    if profile.level is not None and profile.level < cfg.min_level:
        score += cfg.low_level_weight

    return min(cfg.max_score, score)
