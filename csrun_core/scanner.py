"""
Directive scanner.

Reads the leading section of a source file, collecting ``//#include`` and
``//#import`` directives, and produces a compile-ready ``SourceUnit``.

A file may start with a metadata block::

    ::{
    ...anything...
    }::

which is not valid source syntax, so such files are rewritten into a
temporary copy that starts at the first code line. The number of lines
dropped is kept as ``line_offset`` so compiler diagnostics can be mapped
back to the original file.
"""
import errno
import os
import tempfile
from typing import Tuple

from pydantic import BaseModel, ConfigDict

from .errors import ScanError
from .logger import debug_log
from .resolvers import IncludeResolver, ImportResolver

METADATA_OPEN = "::{"
METADATA_CLOSE = "}::"
INCLUDE_TAG = "//#include"
IMPORT_TAG = "//#import"
BLOCK_COMMENT_OPEN = "/*"
BLOCK_COMMENT_CLOSE = "*/"
LINE_COMMENT = "//"


class SourceUnit(BaseModel):
    """One scanned source file. Owns the temporary copy, if one was made."""
    model_config = ConfigDict(frozen=True)

    source_path: str
    compile_path: str
    line_offset: int = 0
    includes: Tuple[str, ...] = ()
    imports: Tuple[str, ...] = ()

    @property
    def is_rewritten(self) -> bool:
        return self.compile_path != self.source_path

    def release(self):
        """Delete the temporary copy. Safe to call on units that were not rewritten."""
        if self.is_rewritten and os.path.exists(self.compile_path):
            os.remove(self.compile_path)
            debug_log(f"Removed temporary file {self.compile_path} for {self.source_path}")


class _LineReader:
    """Hands out lines one at a time and remembers the 1-based number of the last one."""

    def __init__(self, lines):
        self._lines = lines
        self.line_number = 0

    def read_line(self):
        if self.line_number >= len(self._lines):
            return None
        line = self._lines[self.line_number]
        self.line_number += 1
        return line

    def remaining(self):
        return self._lines[self.line_number:]


def _match_directive(line):
    """
    Return ``(tag, target)`` when ``line`` is a directive, else None.

    Directives only count at column zero and the tag must be followed by
    whitespace, so ``  //#include x`` and ``//#includex`` are plain comments.
    """
    for tag in (IMPORT_TAG, INCLUDE_TAG):
        if line.startswith(tag) and len(line) > len(tag) and line[len(tag)].isspace():
            return tag, line[len(tag) + 1:].strip()
    return None


def scan_source(path, include_resolver, import_resolver, temp_dir=None, encoding="utf-8-sig"):
    """
    Scan one file and return its SourceUnit.

    Args:
        path: File to scan.
        include_resolver: Resolves ``//#include`` targets.
        import_resolver: Resolves ``//#import`` targets.
        temp_dir: Directory for the rewritten copy (system default if None).
        encoding: Text encoding of the source file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ScanError: On an unterminated block comment or an empty directive.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(errno.ENOENT, "File not found", path)

    debug_log(f"Scanning {path}")
    with open(path, "r", encoding=encoding) as f:
        lines = [line.rstrip("\n") for line in f]

    includes = []
    imports = []
    offset = 0
    reader = _LineReader(lines)

    rewrite = False
    current = reader.read_line()
    if current is not None and current.startswith(METADATA_OPEN):
        rewrite = True
        offset += 1
        current = reader.read_line()
        while current is not None and not current.startswith(METADATA_CLOSE):
            offset += 1
            current = reader.read_line()
        if current is not None:
            # The closing marker, then the separator line after it.
            offset += 1
            current = reader.read_line()
            if current is not None:
                offset += 1
                current = reader.read_line()

    while current is not None:
        stripped = current.lstrip()

        if not stripped:
            current = reader.read_line()
            offset += 1
            continue

        if stripped.startswith(BLOCK_COMMENT_OPEN):
            start_line = reader.line_number
            start_column = len(current) - len(stripped)
            end = current.find(BLOCK_COMMENT_CLOSE, start_column + len(BLOCK_COMMENT_OPEN))
            while end < 0:
                current = reader.read_line()
                offset += 1
                if current is None:
                    raise ScanError(
                        "End-of-file found, '*/' expected",
                        path,
                        start_line,
                        start_column + 1,
                        code="CR1035",
                    )
                end = current.find(BLOCK_COMMENT_CLOSE)
            # Carry on with whatever follows the comment on the same line.
            current = current[end + len(BLOCK_COMMENT_CLOSE):]
            continue

        directive = _match_directive(current)
        if directive is not None:
            tag, target = directive
            if not target:
                raise ScanError(
                    f"Directive '{tag}' requires a target",
                    path,
                    reader.line_number,
                    code="CR1037",
                )
            if tag == INCLUDE_TAG:
                includes.append(include_resolver.resolve(target))
            else:
                imports.append(import_resolver.resolve(target))
            current = reader.read_line()
            offset += 1
            continue

        if stripped.startswith(LINE_COMMENT):
            current = reader.read_line()
            offset += 1
            continue

        # First code line
        break

    if not rewrite:
        debug_log(f"{path}: {len(includes)} include(s), {len(imports)} import(s)")
        return SourceUnit(
            source_path=path,
            compile_path=path,
            line_offset=0,
            includes=tuple(includes),
            imports=tuple(imports),
        )

    suffix = os.path.splitext(path)[1]
    fd, temp_path = tempfile.mkstemp(suffix=suffix, prefix="csrun-", dir=temp_dir)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as out:
            if current is not None:
                out.write(current + "\n")
                for line in reader.remaining():
                    out.write(line + "\n")
    except Exception:
        os.remove(temp_path)
        raise

    debug_log(f"{path}: rewritten to {temp_path} (line offset {offset}), "
              f"{len(includes)} include(s), {len(imports)} import(s)")
    return SourceUnit(
        source_path=path,
        compile_path=temp_path,
        line_offset=offset,
        includes=tuple(includes),
        imports=tuple(imports),
    )


class DirectiveScanner:
    """Scans files with resolvers rooted at each file's own directory."""

    def __init__(self, temp_dir=None, encoding="utf-8-sig"):
        self.temp_dir = temp_dir
        self.encoding = encoding

    def scan(self, path):
        return scan_source(
            path,
            IncludeResolver(path),
            ImportResolver(path),
            temp_dir=self.temp_dir,
            encoding=self.encoding,
        )
