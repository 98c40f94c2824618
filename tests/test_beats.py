"""Unit tests for measure beat counting."""

from fractions import Fraction

import pytest

from abc_lint.abc.beats import (
    TupletInfo,
    calculate_measure_beats,
    default_tuplet_q,
    length_multiplier_from_suffix,
    parse_tuplet,
)
from abc_lint.abc.cleaning import remove_timeless
from abc_lint.abc.context import AbcContext, MeterInfo

QUARTER_44 = AbcContext(meter=MeterInfo(4, 4), unit_note_length=Fraction(1, 4))
EIGHTH_44 = AbcContext(meter=MeterInfo(4, 4), unit_note_length=Fraction(1, 8))
EIGHTH_68 = AbcContext(meter=MeterInfo(6, 8), unit_note_length=Fraction(1, 8))


@pytest.mark.parametrize(
    "suffix, expected",
    [
        ("", Fraction(1)),
        ("2", Fraction(2)),
        ("/", Fraction(1, 2)),
        ("//", Fraction(1, 4)),
        ("///", Fraction(1, 8)),
        ("/4", Fraction(1, 4)),
        ("3/2", Fraction(3, 2)),
        ("3/", Fraction(3, 2)),
        ("3//", Fraction(3, 4)),
        ("/0", Fraction(1)),
    ],
)
def test_length_multiplier_from_suffix(suffix: str, expected: Fraction) -> None:
    assert length_multiplier_from_suffix(suffix) == expected


@pytest.mark.parametrize("p, q", [(2, 3), (3, 2), (4, 3), (5, 2), (6, 2), (7, 2), (8, 3), (9, 2), (11, 2)])
def test_default_tuplet_q(p: int, q: int) -> None:
    assert default_tuplet_q(p) == q


def test_parse_tuplet_forms() -> None:
    assert parse_tuplet("(3CDE", 0) == (TupletInfo(3, 2, 3), 2)
    assert parse_tuplet("(3:2:3CDE", 0) == (TupletInfo(3, 2, 3), 6)
    assert parse_tuplet("(5:4C", 0) == (TupletInfo(5, 4, 5), 4)
    assert parse_tuplet("(3::2C", 0) == (TupletInfo(3, 2, 2), 5)
    assert parse_tuplet("(CD", 0) is None


def test_simple_quarter_notes() -> None:
    assert calculate_measure_beats("C D E F", QUARTER_44) == 4


def test_eighth_notes_under_default_unit() -> None:
    assert calculate_measure_beats("CDEF GABc", EIGHTH_44) == 4
    assert calculate_measure_beats("C2 D2", EIGHTH_44) == 2


def test_compound_meter_counts_in_eighths() -> None:
    assert calculate_measure_beats("ABc def", EIGHTH_68) == 6


def test_duration_shorthand() -> None:
    assert calculate_measure_beats("C/", QUARTER_44) == Fraction(1, 2)
    assert calculate_measure_beats("C//", QUARTER_44) == Fraction(1, 4)


def test_octave_marks_do_not_change_length() -> None:
    assert calculate_measure_beats("c'2 C,,2", QUARTER_44) == 4


def test_triplet_default_ratio() -> None:
    assert calculate_measure_beats("(3C D E", QUARTER_44) == 2
    assert calculate_measure_beats("(3C D E F G", QUARTER_44) == 4


def test_tuplet_expires_after_r_notes() -> None:
    # only two notes are in the (3:2:2 group
    assert calculate_measure_beats("(3:2:2C D E", QUARTER_44) == Fraction(4, 3) + 1


def test_slur_paren_is_ignored() -> None:
    assert calculate_measure_beats("(C D) (E F)", QUARTER_44) == 4


def test_chord_counts_as_one_note() -> None:
    assert calculate_measure_beats("[CEG]2", QUARTER_44) == 2
    assert calculate_measure_beats("[C,EG']", QUARTER_44) == 1


def test_chord_inside_tuplet() -> None:
    assert calculate_measure_beats("(3[CE]DE", QUARTER_44) == 2


def test_unterminated_chord_counts_nothing() -> None:
    assert calculate_measure_beats("C [CEG", QUARTER_44) == 1


def test_rests_count_and_backslash_is_skipped() -> None:
    assert calculate_measure_beats("z/ x/ C D\\ E", QUARTER_44) == 4


def test_multi_measure_rest_fills_the_bar() -> None:
    assert calculate_measure_beats("Z4", QUARTER_44) == 4


def test_broken_rhythm_is_not_interpreted() -> None:
    assert calculate_measure_beats("C/>D/ E F G", QUARTER_44) == 4


def test_remove_timeless_drops_text_and_decorations() -> None:
    assert remove_timeless('"Am"A{g}B !trill! c [K:D] d') == "AB  c  d"
    cleaned = remove_timeless('"Bm"B2 !fermata!A2')
    assert calculate_measure_beats(cleaned, QUARTER_44) == 4
