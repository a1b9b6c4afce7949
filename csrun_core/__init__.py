# csrun - Core Components
"""
Core modules for the csrun script runner:
- resolvers: Include/import directive target resolution
- scanner: Directive scanning and source rewriting
- resolution: Transitive closure over local includes
- grammar: Lark grammar definition for the script language
- transformer: AST to Python code transformation
- compiler_service: Compiles source units into a runnable program
- introspection: Reflective access to a compiled program
- program: Compiled program, loaded lazily into one namespace
- entry_point: Entry procedure discovery and invocation
- diagnostics: Diagnostic remapping to original files
- params, config: Command line and configuration file
"""

from .errors import CsrunError, ScanError, UsageError, ConfigError
from .scanner import SourceUnit, DirectiveScanner, scan_source
from .resolution import ResolutionSet, DependencyResolver
from .compiler_service import CompilerService, CompileResult
from .entry_point import EntryPointLocator, ENTRY_POINT_NOT_FOUND

__all__ = [
    'CsrunError',
    'ScanError',
    'UsageError',
    'ConfigError',
    'SourceUnit',
    'DirectiveScanner',
    'scan_source',
    'ResolutionSet',
    'DependencyResolver',
    'CompilerService',
    'CompileResult',
    'EntryPointLocator',
    'ENTRY_POINT_NOT_FOUND',
]
