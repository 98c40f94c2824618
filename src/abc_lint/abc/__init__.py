"""ABC notation highlighting and measure validation."""

from .tokens import DurationKind, Span, TokenCategory
from .context import AbcContext, MeterInfo, extract_context, parse_meter, parse_unit_note_length
from .beats import calculate_measure_beats, length_multiplier_from_suffix, parse_tuplet
from .highlight import classify, classify_line, escape_html, highlight_abc, highlight_music_line
from .validate import ValidationError, validate_abc

__all__ = [
    "DurationKind",
    "Span",
    "TokenCategory",
    "AbcContext",
    "MeterInfo",
    "extract_context",
    "parse_meter",
    "parse_unit_note_length",
    "calculate_measure_beats",
    "length_multiplier_from_suffix",
    "parse_tuplet",
    "classify",
    "classify_line",
    "escape_html",
    "highlight_abc",
    "highlight_music_line",
    "ValidationError",
    "validate_abc",
]
