"""
botagent: detect bot user agents with a curated list of regex patterns.

    >>> from botagent import is_bot, is_bot_match
    >>> is_bot("curl/8.4.0")
    True
"""

from botagent.detection import (
    DEFAULT_PATTERNS_PATH,
    BotDetector,
    create_is_bot,
    get_default_detector,
    is_bot,
    is_bot_match,
    is_bot_patterns,
    is_bot_text,
)
from botagent.errors import (
    BotAgentError,
    CompileError,
    IoError,
    MatchTimeoutError,
    ParseError,
)
from botagent.loader import load_patterns, parse_patterns
from botagent.matcher import CompiledMatcher, MatcherCache, compile_fragments

__all__ = [
    "DEFAULT_PATTERNS_PATH",
    "BotDetector",
    "create_is_bot",
    "get_default_detector",
    "is_bot",
    "is_bot_match",
    "is_bot_patterns",
    "is_bot_text",
    "BotAgentError",
    "CompileError",
    "IoError",
    "MatchTimeoutError",
    "ParseError",
    "load_patterns",
    "parse_patterns",
    "CompiledMatcher",
    "MatcherCache",
    "compile_fragments",
]
