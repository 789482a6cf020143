"""Read a catalog file from disk and hand its text to the parser."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from apicall.catalog.parser import parse_catalog
from apicall.exceptions import CatalogError
from apicall.models import ApiDefinition


def load_catalog(path: Union[str, Path]) -> list[ApiDefinition]:
    """Load and parse the catalog at *path*.

    Args:
        path: Catalog file to read (UTF-8).

    Returns:
        The parsed definitions in file order.

    Raises:
        CatalogError: If the file does not exist, cannot be read, or is not
            valid UTF-8.
        MalformedRecordError: If the file content is not a valid catalog.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise CatalogError(f"Catalog file not found: {file_path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogError(f"Failed to read catalog {file_path}: {exc}") from exc

    return parse_catalog(content, path=str(file_path))
