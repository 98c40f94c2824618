from __future__ import annotations

"""Beat counting for a single measure.

Lengths are exact fractions of a whole note. A note written with multiplier m
lasts `L * m`; inside a tuplet (p:q:r) it is further scaled by q/p. One beat
is 1/D of a whole note for a meter N/D, so

    beats = L * m * D

Example, M:4/4 with L:1/8:
    C   -> 1/8 * 4 = 0.5 beats
    C2  -> 1/4 * 4 = 1 beat
"""

from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Tuple

from abc_lint.abc import patterns as P
from abc_lint.abc.context import AbcContext


def length_multiplier_from_suffix(suffix: str) -> Fraction:
    """Convert an ABC length suffix to a multiplier of the unit note length.

      ''    -> 1
      '2'   -> 2
      '/'   -> 1/2
      '//'  -> 1/4
      '/4'  -> 1/4
      '3/2' -> 3/2
      '3/'  -> 3/2
      '3//' -> 3/4

    A zero denominator leaves the length unchanged.
    """
    s = str(suffix or "")
    if not s:
        return Fraction(1)

    head, sep, tail = s.partition("/")
    num = int(head) if head.isdigit() else 1
    if not sep:
        return Fraction(num)

    slashes = 1 + len(tail) - len(tail.lstrip("/"))
    den_digits = tail.lstrip("/")
    if den_digits.isdigit():
        den = int(den_digits)
    elif not den_digits:
        den = 2 ** slashes
    else:
        # 3/2/ and friends: only the first fraction counts
        first = den_digits.split("/", 1)[0]
        den = int(first) if first.isdigit() else 2 ** slashes
    if den == 0:
        return Fraction(1)
    return Fraction(num, den)


# Conventional q for a bare (p: 2, 4 and 8 notes take the time of 3;
# everything else takes the time of 2.
_TUPLET_DEFAULT_Q = {2: 3, 3: 2, 4: 3, 5: 2, 6: 2, 7: 2, 8: 3, 9: 2}


@dataclass
class TupletInfo:
    p: int
    q: int
    remaining: int

    @property
    def ratio(self) -> Fraction:
        return Fraction(self.q, self.p)


def default_tuplet_q(p: int) -> int:
    return _TUPLET_DEFAULT_Q.get(p, 2)


def parse_tuplet(content: str, index: int) -> Optional[Tuple[TupletInfo, int]]:
    """Parse '(p', '(p:q' or '(p:q:r' at `index`.

    Returns the tuplet and the index after it, or None for a plain slur.
    """
    m = P.TUPLET_RE.match(content, index)
    if not m:
        return None
    p = int(m.group(1))
    if p <= 0:
        return None
    q = int(m.group(2)) if m.group(2) else default_tuplet_q(p)
    r = int(m.group(3)) if m.group(3) else p
    return TupletInfo(p=p, q=q, remaining=r), m.end()


def _read_length(content: str, j: int) -> Tuple[Fraction, int]:
    end = P.scan_duration(content, j)
    return length_multiplier_from_suffix(content[j:end]), end


def _skip_chord(content: str, i: int) -> int:
    """Index of the closing ']' of a chord opened at `i`, or len(content)."""
    j = i + 1
    while j < len(content) and content[j] != "]":
        j += 1
    return j


def calculate_measure_beats(measure: str, context: AbcContext) -> Fraction:
    """Total beats of one measure (bar lines already stripped)."""
    total = Fraction(0)
    beat_unit = context.meter.beat_unit
    tuplet: Optional[TupletInfo] = None
    i = 0
    n = len(measure)

    while i < n:
        ch = measure[i]

        if ch == "\\":
            i += 1
            continue

        if ch == "(":
            parsed = parse_tuplet(measure, i)
            if parsed is None:
                i += 1
            else:
                tuplet, i = parsed
            continue

        if ch in P.MULTI_MEASURE_RESTS:
            # Z4 stands for whole bars of rest; the slot it sits in is one bar
            _mult, i = _read_length(measure, i + 1)
            total += context.meter.beats_per_measure
            continue

        if ch in P.NOTE_LETTERS or ch in P.RESTS:
            j = i + 1
            while j < n and measure[j] in P.OCTAVE_MARKS:
                j += 1
            mult, j = _read_length(measure, j)
        elif ch == "[":
            j = _skip_chord(measure, i)
            if j >= n:
                # unterminated chord: nothing left to count
                i = j
                continue
            mult, j = _read_length(measure, j + 1)
        else:
            i += 1
            continue

        length = context.unit_note_length * mult
        if tuplet is not None:
            length *= tuplet.ratio
            tuplet.remaining -= 1
            if tuplet.remaining <= 0:
                tuplet = None

        total += length * beat_unit
        i = j

    return total
