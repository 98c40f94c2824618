from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict
import yaml

from abc_lint.abc.context import (
    DEFAULT_METER,
    DEFAULT_UNIT_NOTE_LENGTH,
    AbcContext,
    MeterInfo,
    parse_meter,
    parse_unit_note_length,
)
from abc_lint.abc.highlight import SLUR_COLORS
from abc_lint.abc.validate import DEFAULT_TOLERANCE


@dataclass(frozen=True)
class ValidationConfig:
    tolerance: float


@dataclass(frozen=True)
class DefaultsConfig:
    meter: MeterInfo
    unit_note_length: Fraction

    def context(self) -> AbcContext:
        return AbcContext(meter=self.meter, unit_note_length=self.unit_note_length)


@dataclass(frozen=True)
class HighlightConfig:
    slur_colors: int


@dataclass(frozen=True)
class AppConfig:
    validation: ValidationConfig
    defaults: DefaultsConfig
    highlight: HighlightConfig


def default_config() -> AppConfig:
    return AppConfig(
        validation=ValidationConfig(tolerance=DEFAULT_TOLERANCE),
        defaults=DefaultsConfig(meter=DEFAULT_METER, unit_note_length=DEFAULT_UNIT_NOTE_LENGTH),
        highlight=HighlightConfig(slur_colors=SLUR_COLORS),
    )


def _parse_meter_strict(value: Any) -> MeterInfo:
    meter = parse_meter(str(value), default=None)
    if meter is None:
        raise ValueError(f"defaults.meter is not a meter: {value!r}")
    return meter


def _parse_unit_strict(value: Any) -> Fraction:
    unit = parse_unit_note_length(str(value), default=None)
    if unit is None:
        raise ValueError(f"defaults.unit_note_length is not a fraction like 1/8: {value!r}")
    return unit


def config_from_dict(data: Dict[str, Any]) -> AppConfig:
    base = default_config()
    validation = data.get("validation") or {}
    defaults = data.get("defaults") or {}
    highlight = data.get("highlight") or {}

    tolerance = float(validation.get("tolerance", base.validation.tolerance))
    if tolerance < 0:
        raise ValueError(f"validation.tolerance must be >= 0, got {tolerance}")

    slur_colors = int(highlight.get("slur_colors", base.highlight.slur_colors))
    if slur_colors < 1:
        raise ValueError(f"highlight.slur_colors must be >= 1, got {slur_colors}")

    return AppConfig(
        validation=ValidationConfig(tolerance=tolerance),
        defaults=DefaultsConfig(
            meter=_parse_meter_strict(defaults["meter"]) if "meter" in defaults else base.defaults.meter,
            unit_note_length=(
                _parse_unit_strict(defaults["unit_note_length"])
                if "unit_note_length" in defaults
                else base.defaults.unit_note_length
            ),
        ),
        highlight=HighlightConfig(slur_colors=slur_colors),
    )


def load_config(path: str | Path) -> AppConfig:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {p}")
    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if data is None:
        return default_config()
    if not isinstance(data, dict):
        raise ValueError(f"{p} must contain a YAML mapping at the top level")
    return config_from_dict(data)
