"""
Compiler Service - turns source files and library references into a program.

Every source file is parsed on its own with the script grammar, transformed
into Python class definitions and compiled. Problems never raise: they come
back as ``Diagnostic`` entries against the path that was compiled, which is
the temporary copy for rewritten files. Mapping those back to the files the
user wrote is the caller's business (see ``diagnostics.format_diagnostic``).
"""
import builtins
import importlib
import importlib.util
import os
from typing import List, Optional

from lark import Lark
from lark.exceptions import (
    UnexpectedCharacters,
    UnexpectedEOF,
    UnexpectedInput,
    UnexpectedToken,
    VisitError,
)
from pydantic import BaseModel, ConfigDict, Field

from .diagnostics import Diagnostic
from .grammar import script_grammar
from .logger import debug_log
from .program import CompiledProgram
from .runtime import get_preamble
from .transformer import ScriptTransformer


class CompileResult(BaseModel):
    """Either a program or the diagnostics explaining why there is none."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    program: Optional[CompiledProgram] = None
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.diagnostics)


class CompilerService:
    """
    Compiles script files against a set of library references.

    The parser and the runtime preamble are built once per service, so one
    instance can compile many programs.
    """

    def __init__(self, grammar=script_grammar, preamble=None, encoding="utf-8-sig"):
        # Earley copes with the declaration/expression overlap in statements;
        # the basic lexer keeps keywords from matching identifier prefixes.
        self.parser = Lark(grammar, parser='earley', lexer='basic')
        self.encoding = encoding
        preamble = get_preamble() if preamble is None else preamble
        self.preamble = compile(preamble, "<csrun runtime>", "exec")

        runtime_namespace = {}
        exec(self.preamble, runtime_namespace)
        self.runtime_names = frozenset(runtime_namespace)

    def compile(self, sources, references=()):
        """
        Compile ``sources`` (compile-ready paths) against ``references``.

        Returns:
            CompileResult with a program when no diagnostics were produced.
        """
        diagnostics = []
        decls = []
        for path in sources:
            debug_log(f"Compiling {path}")
            unit_decls, unit_diagnostics = self._compile_file(path)
            decls.extend(unit_decls)
            diagnostics.extend(unit_diagnostics)

        libraries = self._load_references(references, diagnostics)
        ordered = self._order_types(decls, libraries, diagnostics)
        types = self._generate(ordered, diagnostics)

        if diagnostics:
            debug_log(f"Compilation failed with {len(diagnostics)} error(s)")
            return CompileResult(diagnostics=diagnostics)
        return CompileResult(program=CompiledProgram(types, self.preamble, libraries))

    # --- Per file ---

    def _compile_file(self, path):
        try:
            with open(path, "r", encoding=self.encoding) as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            return [], [Diagnostic(
                file=None, line=0, column=0, code="CR2001",
                message=f"Source file '{path}' could not be read: {e}",
            )]

        try:
            tree = self.parser.parse(text)
        except UnexpectedInput as e:
            return [], [_syntax_diagnostic(path, text, e)]

        transformer = ScriptTransformer(source_path=path)
        try:
            decls = transformer.transform_unit(tree)
        except VisitError as e:
            return [], transformer.diagnostics + [Diagnostic(
                file=path, line=1, column=1, code="CR9999",
                message=f"Internal code generation error: {e.orig_exc}",
            )]
        return decls, transformer.diagnostics

    # --- References ---

    def _load_references(self, references, diagnostics):
        libraries = {}
        seen = set()
        for reference in references:
            if reference in seen:
                continue
            seen.add(reference)
            loaded = _load_reference(reference, diagnostics)
            if loaded is not None:
                name, module = loaded
                debug_log(f"Bound library {reference} as '{name}'")
                libraries[name] = module
        return libraries

    # --- Whole program ---

    def _order_types(self, decls, libraries, diagnostics):
        """Drop duplicates, check base classes and order bases before derived types."""
        by_name = {}
        for decl in decls:
            if decl.name in by_name:
                diagnostics.append(_decl_diagnostic(
                    decl, "CR0101", f"The program already contains a definition for '{decl.name}'"))
                continue
            by_name[decl.name] = decl

        known = self.runtime_names | set(libraries) | set(dir(builtins))
        ordered = []
        state = {}

        def visit(decl):
            mark = state.get(decl.name)
            if mark == "done":
                return
            if mark == "visiting":
                diagnostics.append(_decl_diagnostic(
                    decl, "CR0146", f"Circular base class dependency involving '{decl.name}'"))
                return
            state[decl.name] = "visiting"
            if decl.base is not None:
                if decl.base in by_name:
                    visit(by_name[decl.base])
                elif decl.base not in known:
                    diagnostics.append(_decl_diagnostic(
                        decl, "CR0246", f"The type or namespace name '{decl.base}' could not be found"))
            state[decl.name] = "done"
            ordered.append(decl)

        for decl in by_name.values():
            visit(decl)
        return ordered

    def _generate(self, decls, diagnostics):
        types = []
        for decl in decls:
            try:
                code = compile(decl.code, f"<csrun {decl.source_path}:{decl.name}>", "exec")
            except SyntaxError as e:
                diagnostics.append(_decl_diagnostic(
                    decl, "CR9999", f"Internal code generation error: {e.msg}"))
                continue
            types.append((decl, code))
        return types


def _decl_diagnostic(decl, code, message):
    return Diagnostic(file=decl.source_path, line=decl.line, column=decl.column, code=code, message=message)


def _syntax_diagnostic(path, text, error):
    """Turn a Lark parse error into a diagnostic at the offending position."""
    if isinstance(error, UnexpectedCharacters):
        code, message = "CR1002", f"Unexpected character '{error.char}'"
    elif isinstance(error, UnexpectedEOF) or (
            isinstance(error, UnexpectedToken) and error.token.type == "$END"):
        code, message = "CR1003", "Unexpected end of file"
    elif isinstance(error, UnexpectedToken):
        code, message = "CR1001", f"Unexpected '{error.token}'"
    else:
        code, message = "CR1001", "Syntax error"

    line = getattr(error, "line", None)
    column = getattr(error, "column", None)
    if line is None or line < 1:
        # End of input: point just past the last character.
        lines = text.split("\n")
        line = len(lines)
        column = len(lines[-1]) + 1
    return Diagnostic(file=path, line=line, column=column or 1, code=code, message=message)


def _load_reference(reference, diagnostics):
    """
    Load one library reference.

    A path to a Python file is loaded from that file and bound under its
    stem; anything else is imported as a module and bound under the last
    component of its dotted name.
    """
    if os.path.isfile(reference):
        name = os.path.splitext(os.path.basename(reference))[0]
        spec = importlib.util.spec_from_file_location(f"csrun_lib_{name}", reference)
        if spec is None or spec.loader is None:
            diagnostics.append(Diagnostic(
                file=None, line=0, column=0, code="CR0009",
                message=f"Library '{reference}' could not be loaded: not a Python module",
            ))
            return None
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            diagnostics.append(Diagnostic(
                file=None, line=0, column=0, code="CR0009",
                message=f"Library '{reference}' could not be loaded: {e}",
            ))
            return None
        return name, module

    try:
        module = importlib.import_module(reference)
    except (ImportError, ValueError):
        diagnostics.append(Diagnostic(
            file=None, line=0, column=0, code="CR0006",
            message=f"Library '{reference}' could not be found",
        ))
        return None
    return reference.rsplit(".", 1)[-1], module
