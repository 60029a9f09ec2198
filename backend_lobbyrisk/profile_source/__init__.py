"""
Profile source: render (fetch raw markup) and parse (extract scorer fields).
"""

from backend_lobbyrisk.profile_source.parser import ParsedProfile, parse_comments, parse_profile
from backend_lobbyrisk.profile_source.render import (
    HttpxRenderer,
    Renderer,
    RenderSession,
    comments_url,
    profile_url,
)

__all__ = [
    "HttpxRenderer",
    "ParsedProfile",
    "RenderSession",
    "Renderer",
    "comments_url",
    "parse_comments",
    "parse_profile",
    "profile_url",
]
