"""
Command-line parameters.

Options come first and use the ``-name=value`` form; the first argument
that does not start with ``-`` is the script file and everything after it
belongs to the script, untouched.
"""
import argparse
from typing import List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import UsageError
from .result import Err, Ok

USAGE = """Usage:
csrun -h
\tdisplay help
csrun [options] <script file> <script args>
\t-entry\t\t-entry=<Type>.<Method>
\t-config\t\t-config=<configuration file>
\t-verbose\tdebug output on stderr
Options go before the script file; unknown options are rejected."""


class EntrySpec(NamedTuple):
    """Explicit entry point: type name (may itself contain dots) and method name."""
    type_name: str
    method_name: str

    @classmethod
    def parse(cls, text):
        """Split ``text`` at its last dot. Raises UsageError when either side is empty."""
        type_name, dot, method_name = text.rpartition(".")
        if not dot or not type_name or not method_name:
            raise UsageError("Invalid entry point")
        return cls(type_name, method_name)


class RunParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_file: Optional[str] = None
    entry: Optional[EntrySpec] = None
    script_args: List[str] = Field(default_factory=list)
    verbose: bool = False
    config_path: Optional[str] = None
    show_help: bool = False


class _OptionParser(argparse.ArgumentParser):
    """ArgumentParser that reports problems as UsageError instead of exiting."""

    def error(self, message):
        raise UsageError(message)


def _build_parser():
    parser = _OptionParser(prog="csrun", add_help=False, allow_abbrev=False)
    parser.add_argument("-h", "-help", dest="show_help", action="store_true")
    parser.add_argument("-entry", dest="entry")
    parser.add_argument("-verbose", action="store_true")
    parser.add_argument("-config", dest="config_path")
    return parser


def split_arguments(argv):
    """Split ``argv`` into (options, script file, script args)."""
    for i, arg in enumerate(argv):
        if not arg.startswith("-"):
            return list(argv[:i]), arg, list(argv[i + 1:])
    return list(argv), None, []


def parse_params(argv):
    """
    Parse the command line.

    Returns:
        Ok(RunParams), or Err with the message to print before the usage text.
    """
    options, source_file, script_args = split_arguments(argv)
    try:
        parsed = _build_parser().parse_args(options)
        if parsed.show_help:
            return Ok(RunParams(show_help=True))
        entry = EntrySpec.parse(parsed.entry) if parsed.entry is not None else None
    except UsageError as e:
        return Err(str(e))

    if source_file is None:
        return Err("No script file given")

    return Ok(RunParams(
        source_file=source_file,
        entry=entry,
        script_args=script_args,
        verbose=parsed.verbose,
        config_path=parsed.config_path,
    ))
