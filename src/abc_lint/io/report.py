from __future__ import annotations
from dataclasses import asdict
from pathlib import Path
from typing import Iterable

import pandas as pd

from abc_lint.abc.validate import ValidationError

"""
Tabular export of measure diagnostics.

`diagnostics_frame()` flattens ValidationError records into a DataFrame with a
stable column order (kept even when there are no diagnostics), and
`write_report()` saves it as CSV.
"""


REPORT_COLS = ["line", "measure_index", "start_col", "end_col", "expected", "actual", "message"]


def diagnostics_frame(errors: Iterable[ValidationError]) -> pd.DataFrame:
    rows = [asdict(e) for e in errors]
    return pd.DataFrame(rows, columns=REPORT_COLS)


def should_skip(dest: Path, overwrite: bool) -> bool:
    return dest.exists() and (not overwrite)


def write_report(df: pd.DataFrame, dest: Path) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(dest, index=False)
