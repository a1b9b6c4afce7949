"""
Compiler diagnostics and their mapping back to original source locations.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Diagnostic(BaseModel):
    """An error reported by the compiler service against a compile-ready path."""
    model_config = ConfigDict(frozen=True)

    file: Optional[str]
    line: int
    column: int
    code: str
    message: str


class OriginalLocation(BaseModel):
    """Where a diagnostic points in the file the user actually wrote."""
    model_config = ConfigDict(frozen=True)

    path: str
    line: int
    column: int


def find_owner(diagnostic, units):
    """Find the unit whose compile-ready path matches the diagnostic's file, ignoring case."""
    if diagnostic.file is None:
        return None
    wanted = diagnostic.file.lower()
    for unit in units:
        if unit.compile_path.lower() == wanted:
            return unit
    return None


def original_location(diagnostic, units):
    """
    Map a diagnostic back to the original file.

    Returns None for diagnostics that concern no file (e.g. library references).
    """
    if diagnostic.file is None:
        return None
    owner = find_owner(diagnostic, units)
    if owner is None:
        return OriginalLocation(path=diagnostic.file, line=diagnostic.line, column=diagnostic.column)
    return OriginalLocation(
        path=owner.source_path,
        line=diagnostic.line + owner.line_offset,
        column=diagnostic.column,
    )


def format_diagnostic(diagnostic, units=()):
    """Format as ``<file>(<line>,<column>) : error <code>: <message>``."""
    location = original_location(diagnostic, units)
    if location is None:
        return f"error {diagnostic.code}: {diagnostic.message}"
    return f"{location.path}({location.line},{location.column}) : error {diagnostic.code}: {diagnostic.message}"
