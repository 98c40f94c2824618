from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import List, Optional

from abc_lint.abc.beats import calculate_measure_beats
from abc_lint.abc.cleaning import remove_timeless
from abc_lint.abc.context import DEFAULT_CONTEXT, AbcContext, extract_context
from abc_lint.abc.highlight import is_comment_line
from abc_lint.abc.patterns import ABC_FIELD_RE, COMMENT_CHAR

"""
Measure length checks for ABC tunes.

Every music line containing a bar line is split on '|'. Each piece is a
measure candidate; pieces that are empty or start with ':' (repeat marks) or
'[' (voltas, inline fields) are skipped and do not count towards the measure
index. The remaining measures are summed with the beat calculator and compared
to the meter's numerator.
"""


logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.01


@dataclass(frozen=True)
class ValidationError:
    line: int          # 0-based line number
    measure_index: int  # 0-based, counting evaluated measures on the line only
    start_col: int
    end_col: int
    expected: float
    actual: float
    message: str


def beats_match(actual: float | Fraction, expected: float | int, tolerance: float = DEFAULT_TOLERANCE) -> bool:
    return abs(float(actual) - float(expected)) <= tolerance


def strip_inline_comment(line: str) -> str:
    """Drop a trailing '% ...' comment; an escaped '\\%' is kept."""
    i = line.find(COMMENT_CHAR)
    while i > 0 and line[i - 1] == "\\":
        i = line.find(COMMENT_CHAR, i + 1)
    return line if i < 0 else line[:i]


def _is_skipped_measure(trimmed: str) -> bool:
    return trimmed == "" or trimmed.startswith(":") or trimmed.startswith("[")


def validate_line(
    line: str,
    line_index: int,
    context: AbcContext,
    tolerance: float = DEFAULT_TOLERANCE,
) -> List[ValidationError]:
    errors: List[ValidationError] = []
    music = strip_inline_comment(line)
    if "|" not in music:
        return errors

    parts = music.split("|")
    expected = context.meter.beats_per_measure
    cursor = 0
    evaluated = 0

    for idx, measure in enumerate(parts):
        trimmed = measure.strip()
        if idx == len(parts) - 1 and trimmed == "":
            break

        if _is_skipped_measure(trimmed):
            cursor += len(measure) + 1
            continue

        actual = calculate_measure_beats(remove_timeless(trimmed), context)
        logger.debug("line %d measure %d %r: %s beats", line_index, evaluated, trimmed, actual)

        if not beats_match(actual, expected, tolerance):
            start = line.find(trimmed, cursor)
            errors.append(
                ValidationError(
                    line=line_index,
                    measure_index=evaluated,
                    start_col=start,
                    end_col=start + len(trimmed),
                    expected=expected,
                    actual=float(actual),
                    message=f"Expected {expected} beats, got {float(actual):.2f}",
                )
            )

        evaluated += 1
        cursor += len(measure) + 1

    return errors


def validate_abc(
    code: str,
    tolerance: float = DEFAULT_TOLERANCE,
    defaults: Optional[AbcContext] = None,
) -> List[ValidationError]:
    """Check every measure of `code` against the tune's meter.

    Returns diagnostics in line order, then measure order.
    """
    context = extract_context(code, defaults=defaults or DEFAULT_CONTEXT)
    logger.debug("context: %s", context)

    errors: List[ValidationError] = []
    for line_index, line in enumerate(code.split("\n")):
        if is_comment_line(line) or ABC_FIELD_RE.match(line):
            continue
        errors.extend(validate_line(line, line_index, context, tolerance=tolerance))
    return errors
