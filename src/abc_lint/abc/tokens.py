from __future__ import annotations

"""
Span and category types produced by the highlighter.

A Span covers a contiguous run of one source line. Spans for a line are
ordered, never overlap and together reproduce the line exactly. The raw text
is kept on the span; HTML escaping happens only when rendering.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TokenCategory(str, Enum):
    BAR = "bar"
    ACCIDENTAL = "accidental"
    NOTE = "note"
    DURATION = "duration"
    REST = "rest"
    REST_INVISIBLE = "rest-invisible"
    TIE = "tie"
    ORNAMENT = "ornament"
    SLUR = "slur"
    TUPLET = "tuplet"
    CHORD = "chord"
    CHORD_SYMBOL = "chord-symbol"
    DECORATION = "decoration"
    GRACE_NOTE = "grace-note"
    ANNOTATION = "annotation"
    INLINE_FIELD = "inline-field"
    VOLTA_BRACKET = "volta-bracket"
    BROKEN_RHYTHM = "broken-rhythm"
    META_KEY = "meta-key"
    META_VALUE = "meta-value"
    LYRICS_KEY = "lyrics-key"
    LYRICS_VALUE = "lyrics-value"
    COMMENT = "comment"
    PLAIN_TEXT = "text"


class DurationKind(str, Enum):
    LONG = "long"          # C2
    SHORT = "short"        # C/2, C/, C//
    FRACTION = "fraction"  # C3/2, C3/


CSS_PREFIX = "abc-"


@dataclass(frozen=True)
class Span:
    category: TokenCategory
    text: str
    start_col: int
    end_col: int
    duration_kind: Optional[DurationKind] = None
    slur_level: Optional[int] = None  # colour level, already reduced modulo the palette size
    dotted: bool = False

    def css_class(self) -> str:
        """Class attribute used by the HTML renderer, e.g. 'abc-slur abc-slur-level-1'."""
        base = f"{CSS_PREFIX}{self.category.value}"
        if self.category is TokenCategory.DURATION and self.duration_kind is not None:
            return f"{base} {base}-{self.duration_kind.value}"
        if self.category is TokenCategory.SLUR and self.slur_level is not None:
            return f"{base} {base}-level-{self.slur_level}"
        if self.category is TokenCategory.TIE and self.dotted:
            return f"{base} {base}-dotted"
        return base
