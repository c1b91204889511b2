"""
Pattern loader: read an ordered list of regex fragments from a JSON file.

The file must hold a JSON array of non-empty strings. Anything else (an
object, a number, malformed JSON, a non-string or empty entry) is rejected
as a whole; no partial list is ever returned.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Union

from pydantic import StringConstraints, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from botagent.errors import IoError, ParseError
from botagent.logger import get_logger

log = get_logger(__name__)

PatternSource = Union[str, os.PathLike]

Fragment = Annotated[str, StringConstraints(strict=True, min_length=1)]

_fragment_list = TypeAdapter(list[Fragment])


def _unreadable(path: str, exc: Exception) -> IoError:
    log.warning(
        "pattern_source_unreadable",
        source=path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    reason = getattr(exc, "strerror", None) or exc
    return IoError(f"cannot read pattern source {path!r}: {reason}", source=path)


def source_key(source: PatternSource) -> str:
    """Normalise *source* to the absolute path string used as a cache key.

    Raises:
        IoError: *source* cannot name a file (e.g. it holds a NUL byte).
    """
    path = os.fspath(source)
    try:
        return str(Path(path).expanduser().resolve())
    except (OSError, ValueError) as exc:
        raise _unreadable(path, exc) from exc


def parse_patterns(
    raw: Union[str, bytes], source: str = "<memory>"
) -> tuple[str, ...]:
    """Validate raw JSON and return its fragments in source order.

    Args:
        raw: JSON text or bytes.
        source: Identifier used in error messages.

    Raises:
        ParseError: *raw* is not a JSON array of non-empty strings. When a
            single entry is at fault its position is set on ``index``.
    """
    try:
        fragments = _fragment_list.validate_json(raw)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        loc = first.get("loc", ())
        index = loc[0] if loc and isinstance(loc[0], int) else None
        if first["type"] == "json_invalid":
            message = f"{source}: malformed JSON ({first['msg']})"
        elif index is None:
            message = f"{source}: expected a JSON array of strings"
        else:
            message = f"{source}: entry {index} is not a non-empty string"
        log.warning(
            "pattern_source_invalid",
            source=source,
            error_type=first["type"],
            index=index,
        )
        raise ParseError(
            message,
            source=source,
            details=exc.errors(include_url=False, include_input=False),
            index=index,
        ) from exc
    return tuple(fragments)


def load_patterns(source: PatternSource) -> tuple[str, ...]:
    """Read and validate the pattern file at *source*.

    Raises:
        IoError: The file is missing, is a directory, cannot be read, or
            *source* is not a usable file name.
        ParseError: See :func:`parse_patterns`.
    """
    path = os.fspath(source)
    try:
        raw = Path(path).read_bytes()
    except (OSError, ValueError) as exc:
        raise _unreadable(path, exc) from exc

    fragments = parse_patterns(raw, source=path)
    log.debug("patterns_loaded", source=path, count=len(fragments))
    return fragments
