"""
Parse capability: extract the fields the scorer consumes from profile markup.

All knowledge of the profile page's selectors lives here. Missing numeric
fields on a public profile default to 0; VAC status is read from the ban
banner text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from bs4 import BeautifulSoup

from backend_lobbyrisk.analysis_engine.models import RecentGame
from backend_lobbyrisk.config.settings import DEFAULT_VAC_BAN_MARKERS
from backend_lobbyrisk.core.exceptions import ParseFailure

PRIVATE_SELECTOR = ".profile_private_info"
LEVEL_SELECTOR = ".friendPlayerLevelNum"
FRIEND_COUNT_SELECTOR = ".profile_friend_links .profile_count_link_total"
RECENT_GAME_SELECTOR = ".recent_game"
GAME_TITLE_SELECTOR = ".game_name a"
GAME_DETAILS_SELECTOR = ".game_info_details"
BAN_SELECTOR = ".profile_ban_status .profile_ban"
COMMENT_SELECTOR = ".commentthread_comment_text"

HOURS_SUFFIX = " hrs on record"
_LEADING_INT = re.compile(r"^\s*([\d,]+)")
_LEADING_NUMBER = re.compile(r"^\s*([\d,]*\.?\d+)")


@dataclass(frozen=True)
class ParsedProfile:
    """Fields extracted from the primary profile document."""

    is_private: bool
    level: int | None = None
    friend_count: int | None = None
    recent_games: tuple[RecentGame, ...] = ()
    vac_banned: bool | None = None


def _soup(document: str) -> BeautifulSoup:
    if not isinstance(document, str) or not document.strip():
        raise ParseFailure("empty document")
    try:
        return BeautifulSoup(document, "html.parser")
    except Exception as e:
        raise ParseFailure(f"markup could not be parsed: {e}") from e


def _text(soup: BeautifulSoup, selector: str) -> str:
    return " ".join(el.get_text(strip=True) for el in soup.select(selector)).strip()


def _int_or_zero(text: str) -> int:
    m = _LEADING_INT.match(text or "")
    if not m:
        return 0
    digits = m.group(1).replace(",", "")
    return int(digits) if digits else 0


def _hours(text: str) -> float:
    """Leading number before ' hrs on record'; thousands separators removed."""
    head = (text or "").split(HOURS_SUFFIX)[0]
    m = _LEADING_NUMBER.match(head)
    if not m:
        return 0.0
    try:
        return float(m.group(1).replace(",", ""))
    except ValueError:
        return 0.0


def _game_id(href: str | None) -> str:
    if not href:
        return ""
    return href.rstrip("/").split("/")[-1]


def parse_profile(
    document: str,
    *,
    vac_ban_markers: Iterable[str] = DEFAULT_VAC_BAN_MARKERS,
) -> ParsedProfile:
    """
    Extract privacy, level, friend count, recent games, and VAC status.

    Raises:
        ParseFailure: empty or unparseable document.
    """
    soup = _soup(document)
    if soup.select_one(PRIVATE_SELECTOR) is not None:
        return ParsedProfile(is_private=True)

    games: list[RecentGame] = []
    for element in soup.select(RECENT_GAME_SELECTOR):
        anchor = element.find("a", href=True)
        title_el = element.select_one(GAME_TITLE_SELECTOR)
        details_el = element.select_one(GAME_DETAILS_SELECTOR)
        games.append(
            RecentGame(
                id=_game_id(anchor["href"] if anchor is not None else None),
                title=title_el.get_text(strip=True) if title_el is not None else "",
                hours_played=_hours(details_el.get_text(strip=True) if details_el is not None else ""),
            )
        )

    ban_text = _text(soup, BAN_SELECTOR).lower()
    vac_banned = any(m.lower() in ban_text for m in vac_ban_markers if m)

    return ParsedProfile(
        is_private=False,
        level=_int_or_zero(_text(soup, LEVEL_SELECTOR)),
        friend_count=_int_or_zero(_text(soup, FRIEND_COUNT_SELECTOR)),
        recent_games=tuple(games),
        vac_banned=vac_banned,
    )


def parse_comments(document: str) -> list[str]:
    """Return the stripped text of every comment in a comment feed document."""
    soup = _soup(document)
    return [el.get_text(strip=True) for el in soup.select(COMMENT_SELECTOR)]
