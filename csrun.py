"""
csrun - run a script straight from its source files.

    csrun [options] <script file> <script args>

This module is the only place that decides exit codes and the only one
that exits the process.
"""
import sys
import traceback

from compiler import compile_program, set_verbose
from csrun_core.config import load_config
from csrun_core.entry_point import EntryPointLocator
from csrun_core.errors import ConfigError
from csrun_core.introspection import PythonProgramIntrospector
from csrun_core.logger import debug_log
from csrun_core.params import USAGE, parse_params


def print_errors(messages):
    for message in messages:
        print(message, file=sys.stderr)


def print_usage():
    print(USAGE)


def execute(program, params):
    """Locate the entry point and run it. Returns the exit code."""
    try:
        located = EntryPointLocator(PythonProgramIntrospector(program)).locate(params.entry)
        if located.is_err():
            print_errors(located.messages)
            return 1
        located.value.invoke(params.script_args)
    except Exception:
        # Anything raised while loading or running the script.
        print(traceback.format_exc(), file=sys.stderr, end="")
        return 1
    return 0


def run(argv=None):
    """Run csrun with ``argv`` (defaults to ``sys.argv[1:]``) and return the exit code."""
    argv = sys.argv[1:] if argv is None else argv

    parsed = parse_params(argv)
    if parsed.is_err():
        print_errors(parsed.messages)
        print_usage()
        return 1
    params = parsed.value
    if params.show_help:
        print_usage()
        return 0

    set_verbose(params.verbose)
    debug_log(f"Script {params.source_file}, args {params.script_args}")

    try:
        config = load_config(params.config_path)
    except ConfigError as e:
        print_errors([str(e)])
        return 1

    compiled = compile_program(params.source_file, config)
    if compiled.is_err():
        print_errors(compiled.messages)
        return 1

    return execute(compiled.value, params)


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
