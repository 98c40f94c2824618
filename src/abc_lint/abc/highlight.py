from __future__ import annotations

"""
Syntax highlighting for ABC notation.

Header and comment lines become one or two spans. Music lines are walked left
to right: at each position the parsers below are tried in a fixed priority
order and the first hit wins. Anything no parser claims becomes a single
character of plain text, so the spans of a line always add back up to the
line itself.

Slur colours cycle through a small palette; the colour of an opening slur is
taken before the nesting level goes up, the colour of a closing slur after
it comes down.
"""

from typing import Callable, List, NamedTuple, Optional

from abc_lint.abc import patterns as P
from abc_lint.abc.tokens import Span, TokenCategory


SLUR_COLORS = 5


class ParseResult(NamedTuple):
    spans: List[Span]
    next_index: int
    slur_delta: int = 0


Parser = Callable[[str, int, int, int], Optional[ParseResult]]


def escape_html(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def _span(category: TokenCategory, line: str, start: int, end: int, **extra) -> Span:
    return Span(category=category, text=line[start:end], start_col=start, end_col=end, **extra)


def _simple(category: TokenCategory, matcher: Callable[[str, int], Optional[int]]) -> Parser:
    """Wrap a plain matcher into a parser that emits a single span."""

    def parse(line: str, i: int, slur_level: int = 0, colors: int = SLUR_COLORS) -> Optional[ParseResult]:
        end = matcher(line, i)
        if end is None or end <= i:
            return None
        return ParseResult([_span(category, line, i, end)], end)

    parse.__name__ = f"parse_{category.name.lower()}"
    return parse


parse_bar_line = _simple(TokenCategory.BAR, P.match_bar)
parse_decoration = _simple(TokenCategory.DECORATION, P.match_decoration)
parse_grace_note = _simple(TokenCategory.GRACE_NOTE, P.match_grace_note)
parse_accidental = _simple(TokenCategory.ACCIDENTAL, P.match_accidental)
parse_ornament = _simple(TokenCategory.ORNAMENT, P.match_ornament)
parse_annotation = _simple(TokenCategory.ANNOTATION, P.match_annotation)
parse_chord_symbol = _simple(TokenCategory.CHORD_SYMBOL, P.match_chord_symbol)
parse_broken_rhythm = _simple(TokenCategory.BROKEN_RHYTHM, P.match_broken_rhythm)
parse_inline_field = _simple(TokenCategory.INLINE_FIELD, P.match_inline_field)
parse_volta_bracket = _simple(TokenCategory.VOLTA_BRACKET, P.match_volta)
parse_chord_bracket = _simple(TokenCategory.CHORD, P.match_chord_bracket)


def parse_inline_comment(line: str, i: int, slur_level: int = 0, colors: int = SLUR_COLORS) -> Optional[ParseResult]:
    if line[i] != P.COMMENT_CHAR:
        return None
    return ParseResult([_span(TokenCategory.COMMENT, line, i, len(line))], len(line))


def parse_tuplet_or_slur(line: str, i: int, slur_level: int = 0, colors: int = SLUR_COLORS) -> Optional[ParseResult]:
    """'(3' is a tuplet, '(' opens a slur, ')' closes one."""
    end = P.match_tuplet(line, i)
    if end is not None:
        return ParseResult([_span(TokenCategory.TUPLET, line, i, end)], end)

    ch = line[i]
    if ch == "(":
        level = slur_level % colors
        return ParseResult([_span(TokenCategory.SLUR, line, i, i + 1, slur_level=level)], i + 1, 1)
    if ch == ")":
        level = max(0, slur_level - 1) % colors
        return ParseResult([_span(TokenCategory.SLUR, line, i, i + 1, slur_level=level)], i + 1, -1)
    return None


def _with_duration(line: str, spans: List[Span], j: int) -> ParseResult:
    dur = P.match_duration(line, j)
    if dur is None:
        return ParseResult(spans, j)
    end, kind = dur
    spans.append(_span(TokenCategory.DURATION, line, j, end, duration_kind=kind))
    return ParseResult(spans, end)


def parse_rest(line: str, i: int, slur_level: int = 0, colors: int = SLUR_COLORS) -> Optional[ParseResult]:
    end = P.match_rest(line, i)
    if end is None:
        return None
    category = TokenCategory.REST_INVISIBLE if line[i] in P.INVISIBLE_RESTS else TokenCategory.REST
    return _with_duration(line, [_span(category, line, i, end)], end)


def parse_note_with_duration(line: str, i: int, slur_level: int = 0, colors: int = SLUR_COLORS) -> Optional[ParseResult]:
    end = P.match_note_letter(line, i)
    if end is None:
        return None
    return _with_duration(line, [_span(TokenCategory.NOTE, line, i, end)], end)


def parse_tie(line: str, i: int, slur_level: int = 0, colors: int = SLUR_COLORS) -> Optional[ParseResult]:
    end = P.match_tie(line, i)
    if end is None:
        return None
    return ParseResult([_span(TokenCategory.TIE, line, i, end, dotted=end - i > 1)], end)


# Order matters: first match wins.
MUSIC_LINE_PARSERS: List[Parser] = [
    parse_inline_comment,
    parse_bar_line,
    parse_decoration,
    parse_grace_note,
    parse_accidental,
    parse_ornament,
    parse_annotation,
    parse_chord_symbol,
    parse_tuplet_or_slur,
    parse_rest,
    parse_note_with_duration,
    parse_broken_rhythm,
    parse_inline_field,
    parse_volta_bracket,
    parse_chord_bracket,
    parse_tie,
]


def tokenize_music_line(line: str, colors: int = SLUR_COLORS) -> List[Span]:
    spans: List[Span] = []
    slur_level = 0
    i = 0
    n = len(line)

    while i < n:
        for parser in MUSIC_LINE_PARSERS:
            result = parser(line, i, slur_level, colors)
            if result is not None:
                spans.extend(result.spans)
                slur_level = max(0, slur_level + result.slur_delta)
                i = result.next_index
                break
        else:
            spans.append(_span(TokenCategory.PLAIN_TEXT, line, i, i + 1))
            i += 1

    return spans


def is_comment_line(line: str) -> bool:
    return line.strip().startswith(P.COMMENT_CHAR)


def classify_line(line: str, colors: int = SLUR_COLORS) -> List[Span]:
    """Split one source line into classified spans."""
    if is_comment_line(line):
        return [_span(TokenCategory.COMMENT, line, 0, len(line))]

    m = P.ABC_FIELD_RE.match(line)
    if m:
        key = m.group(1)
        if key in P.LYRICS_KEYS:
            key_cat, value_cat = TokenCategory.LYRICS_KEY, TokenCategory.LYRICS_VALUE
        else:
            key_cat, value_cat = TokenCategory.META_KEY, TokenCategory.META_VALUE
        spans = [_span(key_cat, line, 0, len(key))]
        if len(line) > len(key):
            spans.append(_span(value_cat, line, len(key), len(line)))
        return spans

    return tokenize_music_line(line, colors=colors)


def classify(code: str, colors: int = SLUR_COLORS) -> List[List[Span]]:
    """Classify a whole document; one span list per line."""
    return [classify_line(line, colors=colors) for line in code.split("\n")]


def render_spans(spans: List[Span]) -> str:
    parts: List[str] = []
    for s in spans:
        text = escape_html(s.text)
        if s.category is TokenCategory.PLAIN_TEXT:
            parts.append(text)
        else:
            parts.append(f'<span class="{s.css_class()}">{text}</span>')
    return "".join(parts)


def highlight_music_line(line: str, colors: int = SLUR_COLORS) -> str:
    return render_spans(tokenize_music_line(line, colors=colors))


def highlight_abc(code: str, colors: int = SLUR_COLORS) -> str:
    """Render a whole document as highlighted HTML, one output line per input line."""
    return "\n".join(render_spans(spans) for spans in classify(code, colors=colors))
