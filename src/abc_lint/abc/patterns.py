from __future__ import annotations

import re
from typing import Optional, Tuple

from abc_lint.abc.tokens import DurationKind

"""
Recognizer rules for ABC music lines.

Each `match_*` helper answers one question: does the text starting at index
`i` belong to a given category, and if so where does it end? They return the
end index (exclusive) or None and never raise. Delimited forms ("...", !...!,
+...+, {...}) fail closed when the closing delimiter is missing on the line.
"""


# Header / field lines. Lowercase m, r, s, w are distinct field keys in ABC.
FIELD_KEYS = "ABCDFGHIKLMmNOPQRrSsTUVWwXZ"
ABC_FIELD_RE = re.compile(r"^([ABCDFGHIKLMmNOPQRrSsTUVWwXZ]:)(.*)$")
LYRICS_KEYS = {"w:", "W:"}

NOTE_LETTERS = frozenset("ABCDEFGabcdefg")
ACCIDENTALS = frozenset("^_=")
OCTAVE_MARKS = frozenset("',")
RESTS = frozenset("zx")
MULTI_MEASURE_RESTS = frozenset("ZX")
INVISIBLE_RESTS = frozenset("xX")
# Shorthand decorations: staccato, roll, fermata, accent, mordents, coda,
# segno, trill, up/down bow.
ORNAMENTS = frozenset("~.HLMOPSTuv")
COMMENT_CHAR = "%"

# Bar runs start on | or : and soak up the usual repeat/double-bar variants
# (|, ||, |:, :|, ::, :||, |]).
BAR_RUN_RE = re.compile(r"[|:][|:\]]*")
BROKEN_RHYTHM_RE = re.compile(r">+|<+")
TUPLET_RE = re.compile(r"\((\d+)(?::(\d*)(?::(\d*))?)?")
VOLTA_RE = re.compile(r"\[\d+(?:[,-]\d+)*")
INLINE_FIELD_START_RE = re.compile(r"\[[%s]:" % FIELD_KEYS)
TIE_RE = re.compile(r"\.?-")

# The only accepted spellings of a note length suffix.
_VALID_DURATION_RE = re.compile(r"\d+/\d+|\d+/+|/\d+|/+|\d+")

# Chord symbols: root, optional accidental, quality, extensions, optional bass.
CHORD_SYMBOL_RE = re.compile(
    r"""
    ^[A-G][#b]?                                  # root
    (?:maj|min|dim|aug|sus|add|m|M|\+|°|ø)?      # quality
    \d*                                          # extension
    (?:(?:sus|add|maj|b|\#)\d+)*                 # alterations
    (?:/[A-G][#b]?)?$                            # bass note
    """,
    re.VERBOSE,
)
# Leading placement characters mark free text annotations ("^above", "_below").
ANNOTATION_PLACEMENTS = frozenset("^_<>@")


def scan_delimited(text: str, i: int, open_ch: str, close_ch: str) -> Optional[int]:
    """Return the index just past `close_ch` for a pair opening at `i`."""
    if i >= len(text) or text[i] != open_ch:
        return None
    close = text.find(close_ch, i + 1)
    if close < 0:
        return None
    return close + 1


def match_bar(text: str, i: int) -> Optional[int]:
    m = BAR_RUN_RE.match(text, i)
    return m.end() if m else None


def match_decoration(text: str, i: int) -> Optional[int]:
    end = scan_delimited(text, i, "!", "!")
    if end is None:
        end = scan_delimited(text, i, "+", "+")
    # an empty pair (!! or ++) is not a decoration name
    if end is not None and end - i <= 2:
        return None
    return end


def match_grace_note(text: str, i: int) -> Optional[int]:
    return scan_delimited(text, i, "{", "}")


def match_accidental(text: str, i: int) -> Optional[int]:
    if i < len(text) and text[i] in ACCIDENTALS:
        return i + 1
    return None


def match_ornament(text: str, i: int) -> Optional[int]:
    if i >= len(text) or text[i] not in ORNAMENTS:
        return None
    # ".-" is a dotted tie, never staccato
    if text[i] == "." and text[i + 1:i + 2] == "-":
        return None
    return i + 1


def is_chord_symbol_text(content: str) -> bool:
    return bool(CHORD_SYMBOL_RE.match(content))


def is_annotation_text(content: str) -> bool:
    if content[:1] in ANNOTATION_PLACEMENTS:
        return True
    return not is_chord_symbol_text(content)


def match_annotation(text: str, i: int) -> Optional[int]:
    end = scan_delimited(text, i, '"', '"')
    if end is None:
        return None
    return end if is_annotation_text(text[i + 1:end - 1]) else None


def match_chord_symbol(text: str, i: int) -> Optional[int]:
    end = scan_delimited(text, i, '"', '"')
    if end is None:
        return None
    content = text[i + 1:end - 1]
    if is_annotation_text(content):
        return None
    return end


def match_tuplet(text: str, i: int) -> Optional[int]:
    m = TUPLET_RE.match(text, i)
    return m.end() if m else None


def match_rest(text: str, i: int) -> Optional[int]:
    if i < len(text) and (text[i] in RESTS or text[i] in MULTI_MEASURE_RESTS):
        return i + 1
    return None


def match_note_letter(text: str, i: int) -> Optional[int]:
    """Match a note letter plus any octave marks (c', C,,)."""
    if i >= len(text) or text[i] not in NOTE_LETTERS:
        return None
    j = i + 1
    while j < len(text) and text[j] in OCTAVE_MARKS:
        j += 1
    return j


def match_broken_rhythm(text: str, i: int) -> Optional[int]:
    m = BROKEN_RHYTHM_RE.match(text, i)
    return m.end() if m else None


def match_inline_field(text: str, i: int) -> Optional[int]:
    if not INLINE_FIELD_START_RE.match(text, i):
        return None
    close = text.find("]", i)
    return len(text) if close < 0 else close + 1


def match_volta(text: str, i: int) -> Optional[int]:
    m = VOLTA_RE.match(text, i)
    return m.end() if m else None


def match_chord_bracket(text: str, i: int) -> Optional[int]:
    if i < len(text) and text[i] in "[]":
        return i + 1
    return None


def match_tie(text: str, i: int) -> Optional[int]:
    m = TIE_RE.match(text, i)
    return m.end() if m else None


def _skip_digits(text: str, j: int) -> int:
    while j < len(text) and text[j].isdigit():
        j += 1
    return j


def scan_duration(text: str, i: int) -> int:
    """Greedy length suffix scan: slash run, digits, optional '/digits'.

    Returns the end index; equal to `i` when there is no suffix.
    """
    j = i
    while j < len(text) and text[j] == "/":
        j += 1
    j = _skip_digits(text, j)
    if j < len(text) and text[j] == "/":
        j += 1
        j = _skip_digits(text, j)
    return j


def match_duration(text: str, i: int) -> Optional[Tuple[int, DurationKind]]:
    """Match a well-formed length suffix for display.

    A suffix that does not parse backs off to the position before its first
    '/', so leading digits are still taken but the slash is left unconsumed.
    """
    j = _skip_digits(text, i)
    digits_end = j
    if j < len(text) and text[j] == "/":
        end = scan_duration(text, j)
        # 3/2, 3/ and 3// are read as one fraction; /2 and // as a short form
        candidate = text[i:end]
        if _VALID_DURATION_RE.fullmatch(candidate):
            kind = DurationKind.FRACTION if digits_end > i else DurationKind.SHORT
            return end, kind
        j = digits_end
    if j == i:
        return None
    return j, DurationKind.LONG
