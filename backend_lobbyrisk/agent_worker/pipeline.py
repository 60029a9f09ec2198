"""
Fetch -> render -> parse -> score -> cache for one identity.

A private profile (or one with no recent activity) short-circuits to the
private snapshot without fetching the comment feed. Every render call is bounded
by render_timeout_sec. Errors (FetchFailure, FetchTimeout, ParseFailure) propagate
to the task pool, which records them as task failures.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from backend_lobbyrisk.analysis_engine.comments import CommentMatcher
from backend_lobbyrisk.analysis_engine.models import ProfileSnapshot
from backend_lobbyrisk.analysis_engine.scorer import DEFAULT_SCORING_CONFIG, ScoringConfig
from backend_lobbyrisk.cache.client import CacheClient
from backend_lobbyrisk.config.settings import (
    DEFAULT_PROFILE_BASE_URL,
    DEFAULT_RENDER_TIMEOUT_SEC,
    DEFAULT_SUSPICIOUS_TERMS,
    DEFAULT_VAC_BAN_MARKERS,
    Settings,
)
from backend_lobbyrisk.core.exceptions import FetchTimeout
from backend_lobbyrisk.lobbyrisk_logging import bind_identity
from backend_lobbyrisk.profile_source.parser import parse_comments, parse_profile
from backend_lobbyrisk.profile_source.render import (
    Renderer,
    RenderSession,
    comments_url,
    profile_url,
)


@dataclass(frozen=True)
class PipelineConfig:
    """Per-task knobs; built from Settings at startup."""

    profile_base_url: str = DEFAULT_PROFILE_BASE_URL
    render_timeout_sec: float = DEFAULT_RENDER_TIMEOUT_SEC
    suspicious_terms: tuple[str, ...] = DEFAULT_SUSPICIOUS_TERMS
    vac_ban_markers: tuple[str, ...] = DEFAULT_VAC_BAN_MARKERS
    scoring: ScoringConfig = field(default=DEFAULT_SCORING_CONFIG)

    @classmethod
    def from_settings(cls, settings: Settings) -> PipelineConfig:
        return cls(
            profile_base_url=settings.profile_base_url,
            render_timeout_sec=settings.render_timeout_sec,
            suspicious_terms=settings.suspicious_terms,
            vac_ban_markers=settings.vac_ban_markers,
        )


class ProfilePipeline:
    """Builds, scores and caches one ProfileSnapshot per run()."""

    def __init__(
        self,
        renderer: Renderer,
        cache: CacheClient,
        config: PipelineConfig | None = None,
    ) -> None:
        self._renderer = renderer
        self._cache = cache
        self.config = config or PipelineConfig()
        self._matcher = CommentMatcher(self.config.suspicious_terms)

    async def _render(self, session: RenderSession, url: str) -> str:
        timeout = self.config.render_timeout_sec
        try:
            return await asyncio.wait_for(session.render(url, timeout=timeout), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise FetchTimeout(f"render timed out after {timeout}s", url=url) from e

    async def build_snapshot(self, identity: str) -> ProfileSnapshot:
        """Render and parse the profile (and comments when public) into a snapshot."""
        cfg = self.config
        async with self._renderer.session() as session:
            html = await self._render(session, profile_url(cfg.profile_base_url, identity))
            parsed = parse_profile(html, vac_ban_markers=cfg.vac_ban_markers)

            if parsed.is_private or not parsed.recent_games:
                bind_identity(identity, __name__).debug("pipeline_private_profile", is_private=parsed.is_private)
                return ProfileSnapshot.private(scoring=cfg.scoring)

            comments_html = await self._render(session, comments_url(cfg.profile_base_url, identity))
            comments = parse_comments(comments_html)

        return ProfileSnapshot(
            is_private=False,
            vac_banned=parsed.vac_banned,
            level=parsed.level,
            friend_count=parsed.friend_count,
            recent_games=parsed.recent_games,
            flagged_by_comments=self._matcher.any_match(comments),
            scoring=cfg.scoring,
        )

    async def run(self, identity: str) -> float:
        """Build the snapshot, write it to the cache, and return its risk score."""
        snapshot = await self.build_snapshot(identity)
        cached = await self._cache.set(identity, snapshot)
        bind_identity(identity, __name__).info(
            "task_completed",
            risk_score=snapshot.risk_score,
            is_private=snapshot.is_private,
            flagged_by_comments=snapshot.flagged_by_comments,
            cached=cached,
        )
        return snapshot.risk_score
