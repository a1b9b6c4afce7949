"""
Compilation Orchestrator.

Resolves the include closure of an entry file, hands every unit to the
compiler service and maps diagnostics back to the files the user wrote.
Temporary copies made for files with a metadata block are always deleted
before this returns.
"""
from csrun_core.compiler_service import CompilerService
from csrun_core.config import RunnerConfig
from csrun_core.diagnostics import format_diagnostic
from csrun_core.errors import ScanError
from csrun_core.logger import debug_log, set_verbose
from csrun_core.resolution import DependencyResolver, ResolutionSet
from csrun_core.result import Err, Ok
from csrun_core.scanner import DirectiveScanner

__all__ = ['compile_program', 'collect_references', 'set_verbose']


def collect_references(units, default_references=()):
    """Default references first, then every unit's imports in discovery order."""
    references = list(default_references)
    for unit in units:
        references.extend(unit.imports)
    return references


def compile_program(source_file, config=None, service=None):
    """
    Compile ``source_file`` and everything it includes.

    Args:
        source_file: The entry script.
        config: RunnerConfig (defaults if None).
        service: CompilerService to use (a new one if None).

    Returns:
        Ok(CompiledProgram) or Err(lines for stderr).
    """
    config = config or RunnerConfig()
    units = ResolutionSet()
    resolver = DependencyResolver(DirectiveScanner(config.temp_dir, config.encoding), units)
    try:
        try:
            resolver.resolve(source_file)
        except FileNotFoundError as e:
            return Err(f"File not found: {e.filename or source_file}")
        except ScanError as e:
            return Err(str(e))

        service = service or CompilerService(encoding=config.encoding)
        references = collect_references(units, config.default_references)
        debug_log(f"Compiling {len(units)} file(s) with references {references}")
        result = service.compile([unit.compile_path for unit in units], references)

        if result.has_errors:
            return Err([format_diagnostic(d, list(units)) for d in result.diagnostics])
        return Ok(result.program)
    finally:
        units.release_all()
