from pathlib import Path


def load_abc(path: Path) -> str:
    """
    Read an ABC file as text.

    Line endings are normalised to '\\n' so column positions match what an
    editor shows for each line.
    """
    text = Path(path).read_text(encoding="utf-8")
    return text.replace("\r\n", "\n").replace("\r", "\n")
