"""
Compile pattern fragments into one alternation and cache the result.

Fragments use lookbehind with alternatives of differing widths, e.g.
``(?<! (?:channel/|google/))google``, which the standard library ``re``
rejects, so compilation goes through the ``regex`` package.

Each fragment is wrapped in a non-capturing group and the alternatives sit in
a branch-reset group ``(?|...)``, so capture groups in every fragment are
numbered from 1 and numbered backreferences keep pointing at their own
fragment. The alternation accepts exactly the union of what the fragments
accept. Inline flags inside a fragment should use the scoped form, e.g.
``(?i:googlebot)``.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import regex

from botagent.config import MatcherSettings
from botagent.errors import CompileError, MatchTimeoutError
from botagent.loader import PatternSource, load_patterns, source_key
from botagent.logger import get_logger, log_with_context

log = get_logger(__name__)

# Matches nothing; used when the pattern list is empty
_NEVER = r"(?!)"


@dataclass(frozen=True)
class CompiledMatcher:
    """An immutable, ready-to-use matcher for one pattern source."""

    source: str
    fragments: tuple[str, ...]
    pattern: regex.Pattern
    fragment_patterns: tuple[regex.Pattern, ...]
    timeout: Optional[float] = None

    def __len__(self) -> int:
        return len(self.fragments)

    def _search(self, pattern: regex.Pattern, text: str):
        try:
            return pattern.search(text, timeout=self.timeout)
        except TimeoutError as exc:
            log.warning(
                "match_timeout",
                source=self.source,
                timeout=self.timeout,
                user_agent=text,
            )
            raise MatchTimeoutError(
                f"search exceeded {self.timeout}s", source=self.source
            ) from exc

    def search(self, text: str) -> bool:
        """True if any fragment matches anywhere in *text*."""
        return self._search(self.pattern, text) is not None

    def first_fragment(self, text: str) -> Optional[str]:
        """Return the earliest listed fragment that matches *text*."""
        if not self.search(text):
            return None
        for fragment, pattern in zip(self.fragments, self.fragment_patterns):
            if self._search(pattern, text) is not None:
                return fragment
        return None

    def matching_fragments(self, text: str) -> list[str]:
        """Return every fragment that matches *text*, in source order."""
        if not self.search(text):
            return []
        return [
            fragment
            for fragment, pattern in zip(self.fragments, self.fragment_patterns)
            if self._search(pattern, text) is not None
        ]

    def matched_text(self, text: str) -> Optional[str]:
        """Return the substring of *text* matched by the alternation."""
        match = self._search(self.pattern, text)
        return match.group(0) if match is not None else None


def compile_fragments(
    fragments: Iterable[str],
    *,
    source: str = "<memory>",
    ignore_case: bool = False,
    timeout: Optional[float] = None,
) -> CompiledMatcher:
    """Compile *fragments* into a :class:`CompiledMatcher`.

    Every fragment is compiled on its own first so a bad one can be
    reported by position, then the joined alternation is compiled.

    Raises:
        CompileError: A fragment or the alternation is not a valid pattern.
    """
    fragments = tuple(fragments)
    flags = regex.IGNORECASE if ignore_case else 0
    clog = log_with_context(log, source=source)

    fragment_patterns = []
    for index, fragment in enumerate(fragments):
        try:
            fragment_patterns.append(regex.compile(fragment, flags))
        except regex.error as exc:
            clog.warning("matcher_compile_failed", index=index, error=str(exc))
            raise CompileError(
                f"{source}: fragment {index} {fragment!r} does not compile: {exc}",
                source=source,
                index=index,
            ) from exc

    if fragments:
        alternation = "(?|" + "|".join(f"(?:{fragment})" for fragment in fragments) + ")"
    else:
        alternation = _NEVER
    try:
        pattern = regex.compile(alternation, flags)
    except regex.error as exc:
        clog.warning("matcher_compile_failed", index=None, error=str(exc))
        raise CompileError(
            f"{source}: combined pattern does not compile: {exc}", source=source
        ) from exc

    return CompiledMatcher(
        source=source,
        fragments=fragments,
        pattern=pattern,
        fragment_patterns=tuple(fragment_patterns),
        timeout=timeout,
    )


MatcherBuilder = Callable[[str], CompiledMatcher]


class MatcherCache:
    """Process-local map from pattern source to its compiled matcher.

    Matchers are built lazily on the first :meth:`get` for a source and
    kept for the lifetime of the cache. Concurrent first calls for the same
    source compile once and all receive the same object; a failed build
    leaves no entry behind, so the next call tries again.
    """

    def __init__(
        self,
        builder: Optional[MatcherBuilder] = None,
        *,
        ignore_case: bool = False,
        timeout: Optional[float] = None,
    ) -> None:
        self._builder = builder or self._load_and_compile
        self._ignore_case = ignore_case
        self._timeout = timeout
        self._matchers: dict[str, CompiledMatcher] = {}
        self._slot_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: MatcherSettings) -> "MatcherCache":
        return cls(ignore_case=settings.ignore_case, timeout=settings.match_timeout)

    def _load_and_compile(self, key: str) -> CompiledMatcher:
        return compile_fragments(
            load_patterns(key),
            source=key,
            ignore_case=self._ignore_case,
            timeout=self._timeout,
        )

    def __contains__(self, source: PatternSource) -> bool:
        return source_key(source) in self._matchers

    def __len__(self) -> int:
        return len(self._matchers)

    def get(self, source: PatternSource) -> CompiledMatcher:
        """Return the matcher for *source*, building it on first use."""
        key = source_key(source)
        matcher = self._matchers.get(key)
        if matcher is not None:
            return matcher

        with self._lock:
            slot_lock = self._slot_locks.setdefault(key, threading.Lock())

        with slot_lock:
            matcher = self._matchers.get(key)
            if matcher is None:
                matcher = self._builder(key)
                with self._lock:
                    self._matchers[key] = matcher
                log.info("matcher_compiled", source=key, fragments=len(matcher))
        return matcher
