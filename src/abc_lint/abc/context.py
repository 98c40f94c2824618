from __future__ import annotations

import re
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from abc_lint.abc.patterns import ABC_FIELD_RE


@dataclass(frozen=True)
class MeterInfo:
    beats_per_measure: int
    beat_unit: int


@dataclass(frozen=True)
class AbcContext:
    meter: MeterInfo
    unit_note_length: Fraction


DEFAULT_METER = MeterInfo(beats_per_measure=4, beat_unit=4)
DEFAULT_UNIT_NOTE_LENGTH = Fraction(1, 8)
DEFAULT_CONTEXT = AbcContext(meter=DEFAULT_METER, unit_note_length=DEFAULT_UNIT_NOTE_LENGTH)

_RATIO_RE = re.compile(r"^(\d+)/(\d+)$")


def _parse_ratio(s: str) -> Optional[tuple[int, int]]:
    m = _RATIO_RE.match(s.strip())
    if not m:
        return None
    a, b = int(m.group(1)), int(m.group(2))
    if a <= 0 or b <= 0:
        return None
    return a, b


def parse_meter(meter: str, default: Optional[MeterInfo] = DEFAULT_METER) -> Optional[MeterInfo]:
    """Parse an M: value.

    'C' is common time (4/4), 'C|' cut time (2/2), 'n/m' is taken literally.
    Anything else falls back to `default`.
    """
    s = str(meter).strip()
    if s == "C":
        return MeterInfo(4, 4)
    if s == "C|":
        return MeterInfo(2, 2)
    ratio = _parse_ratio(s)
    if ratio is None:
        return default
    return MeterInfo(*ratio)


def parse_unit_note_length(value: str, default: Optional[Fraction] = DEFAULT_UNIT_NOTE_LENGTH) -> Optional[Fraction]:
    """Parse an L: value like '1/8' into a fraction of a whole note."""
    ratio = _parse_ratio(str(value))
    if ratio is None:
        return default
    return Fraction(*ratio)


def extract_context(code: str, defaults: AbcContext = DEFAULT_CONTEXT) -> AbcContext:
    """Read M: and L: from the header lines of `code`.

    Header lines are scanned in order and the last occurrence of each field wins.
    """
    meter = defaults.meter
    unit = defaults.unit_note_length

    for line in code.split("\n"):
        m = ABC_FIELD_RE.match(line)
        if not m:
            continue
        key, value = m.group(1), m.group(2)
        if key == "M:":
            meter = parse_meter(value, default=defaults.meter)
        elif key == "L:":
            unit = parse_unit_note_length(value, default=defaults.unit_note_length)

    return AbcContext(meter=meter, unit_note_length=unit)
