"""Workbook reading helpers."""

import zipfile
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException


def read_rows(path: str | Path) -> list[tuple[Any, ...]]:
    """Read every row of the first worksheet as a tuple of cell values.

    Date cells come back as ``datetime`` objects, empty cells as None.

    Raises:
        FileNotFoundError: If the workbook doesn't exist
        ValueError: If the file is not a readable workbook
    """
    workbook_path = Path(path)
    if not workbook_path.exists():
        raise FileNotFoundError(f"Workbook not found: {workbook_path}")

    try:
        workbook = openpyxl.load_workbook(workbook_path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile) as e:
        raise ValueError(f"Could not read workbook '{workbook_path}': {e}")
    try:
        sheet = workbook.worksheets[0]
        return [tuple(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()
