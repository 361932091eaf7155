"""
Answer normalization for loosely-encoded stored content.

Question fields were written over the years by different content scripts and
LLM generators, so the same logical value shows up as:
- a JSON-encoded string ('["a", "b"]', '2', '"Paris"')
- an already-decoded value (list, int, bool)
- plain text, sometimes wrapped in stray quote characters

Nothing in this module raises. Parsing failures hand back the original value,
and option resolution returns a typed failure instead of guessing.
"""

from __future__ import annotations

import json
import math
import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Callable, NamedTuple

_WHITESPACE = re.compile(r"\s+")
_DIGITS = re.compile(r"[0-9]+")


# =============================================================================
# Parsing
# =============================================================================


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are not JSON; stored text like "Infinity" stays literal
    raise ValueError(f"non-standard JSON constant: {token}")


class ParseResult(NamedTuple):
    """Outcome of a structured parse attempt."""

    ok: bool
    value: Any


def safe_parse(value: Any) -> ParseResult:
    """
    Parse a value that may be JSON-encoded text.

    None and non-string values are returned as already parsed. Strings that
    are not valid JSON come back unchanged with ok=False.
    """
    if value is None:
        return ParseResult(True, None)
    if not isinstance(value, str):
        return ParseResult(True, value)
    try:
        return ParseResult(True, json.loads(value, parse_constant=_reject_constant))
    except (ValueError, RecursionError):
        return ParseResult(False, value)


def parse_json_loose(value: Any) -> Any:
    """Parsed value when parseable, otherwise the original."""
    return safe_parse(value).value


def parse_object(value: Any) -> dict | None:
    parsed = safe_parse(value)
    if parsed.ok and isinstance(parsed.value, dict):
        return parsed.value
    return None


def parse_string_array(value: Any) -> list[str] | None:
    parsed = safe_parse(value)
    if parsed.ok and isinstance(parsed.value, list):
        return [to_text(v) for v in parsed.value]
    return None


def parse_source_meta(value: Any) -> dict:
    """Source metadata as a dict; anything unparseable becomes {}."""
    return parse_object(value) or {}


# =============================================================================
# Text
# =============================================================================


def to_text(value: Any) -> str:
    """
    Stringify a decoded JSON value the way the web client does.

    Integral floats drop their fractional part (6.0 -> "6") and booleans are
    lowercase, so stored 6.0 and a submitted "6" compare equal.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


def normalize_text(value: Any) -> str:
    """Canonical comparator: NFKC, collapsed whitespace, trimmed, lowercase."""
    text = unicodedata.normalize("NFKC", to_text(value))
    return _WHITESPACE.sub(" ", text).strip().lower()


def strip_quotes(text: str) -> str:
    """Remove one leading and one trailing quote character, if present."""
    if text[:1] in ("'", '"'):
        text = text[1:]
    if text[-1:] in ("'", '"'):
        text = text[:-1]
    return text


def is_digit_string(text: str) -> bool:
    return bool(_DIGITS.fullmatch(text))


def find_option_index(options: list, target: Any) -> int:
    """Index of the option whose normalized text equals target, or -1."""
    wanted = normalize_text(target)
    if not wanted:
        return -1
    for index, option in enumerate(options):
        if normalize_text(option) == wanted:
            return index
    return -1


# =============================================================================
# Stored answer shapes
# =============================================================================


@dataclass(frozen=True)
class IndexAnswer:
    value: int


@dataclass(frozen=True)
class BoolAnswer:
    value: bool


@dataclass(frozen=True)
class LiteralAnswer:
    value: str


@dataclass(frozen=True)
class NumberAnswer:
    value: float


@dataclass(frozen=True)
class ValueListAnswer:
    value: list


@dataclass(frozen=True)
class UnknownAnswer:
    value: Any


StoredAnswer = IndexAnswer | BoolAnswer | LiteralAnswer | NumberAnswer | ValueListAnswer | UnknownAnswer


def classify_stored_answer(value: Any) -> StoredAnswer:
    """Tag a decoded stored answer with its shape."""
    if isinstance(value, bool):
        return BoolAnswer(value)
    if isinstance(value, int):
        return IndexAnswer(value)
    if isinstance(value, float):
        # JSON has no separate integer type; 2.0 is an index.
        if math.isfinite(value) and value.is_integer():
            return IndexAnswer(int(value))
        return NumberAnswer(value)
    if isinstance(value, str):
        return LiteralAnswer(value)
    if isinstance(value, (list, tuple)):
        return ValueListAnswer(list(value))
    return UnknownAnswer(value)


# =============================================================================
# Option resolution
# =============================================================================


@dataclass(frozen=True)
class OptionResolution:
    """Resolved correct option, or the reason it could not be resolved."""

    ok: bool
    index: int | None = None
    text: Any = None
    reason: str | None = None

    @classmethod
    def found(cls, options: list, index: int) -> OptionResolution:
        return cls(ok=True, index=index, text=options[index])

    @classmethod
    def failed(cls, reason: str) -> OptionResolution:
        return cls(ok=False, reason=reason)


ResolverStage = Callable[[list, StoredAnswer], "OptionResolution | None"]


def _in_range(options: list, index: int) -> bool:
    return 0 <= index < len(options)


def _resolve_index(options: list, answer: StoredAnswer) -> OptionResolution | None:
    if not isinstance(answer, IndexAnswer):
        return None
    if _in_range(options, answer.value):
        return OptionResolution.found(options, answer.value)
    return OptionResolution.failed("index_out_of_range")


def _resolve_boolean(options: list, answer: StoredAnswer) -> OptionResolution | None:
    if not isinstance(answer, BoolAnswer):
        return None
    index = find_option_index(options, "true" if answer.value else "false")
    if index >= 0:
        return OptionResolution.found(options, index)
    # Positional ["True", "False"] convention
    if len(options) == 2:
        return OptionResolution.found(options, 0 if answer.value else 1)
    return OptionResolution.failed("boolean_no_match")


def _literal_or_index(options: list, text: str) -> OptionResolution | None:
    index = find_option_index(options, text)
    if index >= 0:
        return OptionResolution.found(options, index)
    if is_digit_string(text) and _in_range(options, int(text)):
        return OptionResolution.found(options, int(text))
    return None


def _resolve_literal(options: list, answer: StoredAnswer) -> OptionResolution | None:
    if not isinstance(answer, LiteralAnswer):
        return None
    return _literal_or_index(options, answer.value.strip())


def _resolve_quoted(options: list, answer: StoredAnswer) -> OptionResolution | None:
    if not isinstance(answer, LiteralAnswer):
        return None
    trimmed = answer.value.strip()
    stripped = strip_quotes(trimmed).strip()
    if not stripped or stripped == trimmed:
        return None
    return _literal_or_index(options, stripped)


def _resolve_number(options: list, answer: StoredAnswer) -> OptionResolution | None:
    if not isinstance(answer, NumberAnswer):
        return None
    index = find_option_index(options, answer.value)
    return OptionResolution.found(options, index) if index >= 0 else None


RESOLVER_STAGES: tuple[ResolverStage, ...] = (
    _resolve_index,
    _resolve_boolean,
    _resolve_literal,
    _resolve_quoted,
    _resolve_number,
)


def resolve_option_text(
    options: Any,
    stored_answer: Any,
    stages: tuple[ResolverStage, ...] = RESOLVER_STAGES,
) -> OptionResolution:
    """
    Resolve a stored correct answer of unknown shape to ``{index, text}``.

    Stages run in order; the first one that applies decides. A failed
    resolution is a content problem, not a wrong answer.

    Args:
        options: Decoded option list
        stored_answer: Decoded stored answer, or an already-classified StoredAnswer
        stages: Resolver stages to try

    Returns:
        OptionResolution with index/text, or ok=False and a reason
    """
    if not isinstance(options, list) or not options:
        return OptionResolution.failed("no_options")

    if not isinstance(
        stored_answer,
        (IndexAnswer, BoolAnswer, LiteralAnswer, NumberAnswer, ValueListAnswer, UnknownAnswer),
    ):
        stored_answer = classify_stored_answer(stored_answer)

    for stage in stages:
        resolution = stage(options, stored_answer)
        if resolution is not None:
            return resolution

    return OptionResolution.failed("no_match")
