import logging
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from abc_lint.abc.context import extract_context
from abc_lint.abc.highlight import classify, highlight_abc
from abc_lint.abc.validate import validate_abc
from abc_lint.config import AppConfig, default_config, load_config
from abc_lint.io.loaders import load_abc
from abc_lint.io.report import diagnostics_frame, should_skip, write_report


app = typer.Typer(add_completion=False)
console = Console(soft_wrap=True)


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


def _config(path: Optional[str]) -> AppConfig:
    if path is None:
        return default_config()
    try:
        return load_config(path)
    except (FileNotFoundError, ValueError) as exc:
        print(f"[red]Config error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2)


def _read(path: Path) -> str:
    try:
        return load_abc(path)
    except OSError as exc:
        print(f"[red]Cannot read {escape(str(path))}:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2)


@app.command()
def validate(
    path: Path,
    config: Optional[str] = None,
    report: Optional[Path] = None,
    overwrite: bool = False,
    verbose: bool = False,
):
    """Check that every measure holds the number of beats the meter asks for."""
    _setup_logging(verbose)
    cfg = _config(config)
    code = _read(path)

    errors = validate_abc(code, tolerance=cfg.validation.tolerance, defaults=cfg.defaults.context())

    for e in errors:
        console.print(f"{escape(str(path))}:{e.line + 1}:{e.start_col}-{e.end_col} measure {e.measure_index}: {e.message}")

    if report is not None:
        if should_skip(report, overwrite):
            print(f"[yellow]Report exists, not overwriting:[/yellow] {report}")
        else:
            write_report(diagnostics_frame(errors), report)
            print(f"Wrote {len(errors):,} rows -> {report}")

    if errors:
        print(f"[red]{len(errors)} measure(s) with wrong length[/red]")
        raise typer.Exit(code=1)
    print("[green]All measures OK[/green]")


@app.command()
def highlight(
    path: Path,
    output: Optional[Path] = None,
    config: Optional[str] = None,
):
    """Render the file as syntax-highlighted HTML."""
    cfg = _config(config)
    code = _read(path)
    html = f'<pre class="abc-source">{highlight_abc(code, colors=cfg.highlight.slur_colors)}</pre>\n'

    if output is None:
        typer.echo(html, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    print(f"Wrote -> {output}")


@app.command()
def tokens(
    path: Path,
    line: Optional[int] = typer.Option(None, help="Only show this line (1-based)."),
    config: Optional[str] = None,
):
    """Show the classified spans of each line."""
    cfg = _config(config)
    code = _read(path)

    table = Table("line", "category", "text", "start", "end")
    for line_no, spans in enumerate(classify(code, colors=cfg.highlight.slur_colors), start=1):
        if line is not None and line_no != line:
            continue
        for s in spans:
            table.add_row(str(line_no), s.css_class(), escape(s.text), str(s.start_col), str(s.end_col))
    print(table)


@app.command()
def context(path: Path, config: Optional[str] = None):
    """Print the meter and unit note length the validator will use."""
    cfg = _config(config)
    ctx = extract_context(_read(path), defaults=cfg.defaults.context())
    print(f"Meter: {ctx.meter.beats_per_measure}/{ctx.meter.beat_unit}")
    print(f"Unit note length: {ctx.unit_note_length}")


def main() -> None:
    app()
