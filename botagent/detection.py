"""
Bot detection queries over a compiled pattern source.

``BotDetector`` pairs a default pattern source with an injected
``MatcherCache``. The module-level functions delegate to one default
detector, built lazily via ``functools.lru_cache`` so there is no
import-time I/O; the bundled pattern list is only read on the first query.

Every query propagates loader and compiler errors. A query never answers
``False`` because the patterns could not be loaded.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Callable, Optional, Union

import regex

from botagent.config import BotAgentSettings, get_settings
from botagent.errors import CompileError
from botagent.loader import PatternSource
from botagent.matcher import CompiledMatcher, MatcherCache

DEFAULT_PATTERNS_PATH = Path(__file__).parent / "data" / "patterns.json"


class BotDetector:
    """Answer bot queries against a cached, compiled pattern source.

    Args:
        pattern_source: Default pattern file for queries that do not name
            one. ``None`` uses the configured ``patterns_path`` or, failing
            that, the bundled list.
        cache: Matcher cache to use. Defaults to a new cache configured from
            *settings*.
        settings: Defaults to the process-wide settings.
    """

    def __init__(
        self,
        pattern_source: Optional[PatternSource] = None,
        *,
        cache: Optional[MatcherCache] = None,
        settings: Optional[BotAgentSettings] = None,
    ) -> None:
        if settings is None:
            settings = get_settings()
        if pattern_source is None:
            pattern_source = settings.matcher.patterns_path or DEFAULT_PATTERNS_PATH
        self.pattern_source = pattern_source
        self.cache = cache if cache is not None else MatcherCache.from_settings(
            settings.matcher
        )

    def matcher(self, pattern_source: Optional[PatternSource] = None) -> CompiledMatcher:
        return self.cache.get(
            pattern_source if pattern_source is not None else self.pattern_source
        )

    def is_bot(
        self, user_agent: Optional[str], pattern_source: Optional[PatternSource] = None
    ) -> bool:
        """Return True if any pattern matches anywhere in *user_agent*."""
        return self.matcher(pattern_source).search(user_agent or "")

    def is_bot_match(
        self, user_agent: Optional[str], pattern_source: Optional[PatternSource] = None
    ) -> Optional[str]:
        """Return the first listed pattern that matches *user_agent*, or None."""
        return self.matcher(pattern_source).first_fragment(user_agent or "")

    def is_bot_patterns(
        self, user_agent: Optional[str], pattern_source: Optional[PatternSource] = None
    ) -> list[str]:
        """Return every pattern that matches *user_agent*, in list order."""
        return self.matcher(pattern_source).matching_fragments(user_agent or "")

    def is_bot_text(
        self, user_agent: Optional[str], pattern_source: Optional[PatternSource] = None
    ) -> Optional[str]:
        """Return the part of *user_agent* that the patterns matched, or None."""
        return self.matcher(pattern_source).matched_text(user_agent or "")


@lru_cache(maxsize=1)
def get_default_detector() -> BotDetector:
    return BotDetector()


def is_bot(user_agent: Optional[str], pattern_source: Optional[PatternSource] = None) -> bool:
    """Return True if *user_agent* looks like an automated client.

    Args:
        user_agent: The ``User-Agent`` header value.
        pattern_source: Path to a JSON array of patterns; defaults to the
            bundled list.

    Raises:
        IoError, ParseError, CompileError: The pattern source is unusable.

    Example:
        >>> is_bot("Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)")
        True
    """
    return get_default_detector().is_bot(user_agent, pattern_source)


def is_bot_match(
    user_agent: Optional[str], pattern_source: Optional[PatternSource] = None
) -> Optional[str]:
    """Return the first pattern, in list order, that matches *user_agent*."""
    return get_default_detector().is_bot_match(user_agent, pattern_source)


def is_bot_patterns(
    user_agent: Optional[str], pattern_source: Optional[PatternSource] = None
) -> list[str]:
    """Return all patterns that match *user_agent*, in list order."""
    return get_default_detector().is_bot_patterns(user_agent, pattern_source)


def is_bot_text(
    user_agent: Optional[str], pattern_source: Optional[PatternSource] = None
) -> Optional[str]:
    return get_default_detector().is_bot_text(user_agent, pattern_source)


def create_is_bot(pattern: Union[str, regex.Pattern]) -> Callable[[str], bool]:
    """Build a predicate from a single custom pattern.

    The predicate answers False for an empty user agent and otherwise
    reports whether *pattern* matches anywhere in it.

    Raises:
        CompileError: *pattern* is a string that does not compile.

    Example:
        >>> custom = create_is_bot(r"Googlebot")
        >>> custom("Mozilla/5.0 (compatible; Googlebot/2.1)")
        True
    """
    if isinstance(pattern, str):
        try:
            pattern = regex.compile(pattern)
        except regex.error as exc:
            raise CompileError(f"custom pattern does not compile: {exc}") from exc

    def _is_bot(user_agent: str) -> bool:
        return bool(user_agent) and pattern.search(user_agent) is not None

    return _is_bot
