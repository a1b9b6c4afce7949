"""
Script AST Transformer - Converts parsed scripts to Python code.

This module contains the ScriptTransformer class that turns the Lark parse
tree of one source file into Python class definitions, one ``TypeDecl`` per
script class. The runtime preamble (``csrun_core.runtime``) supplies the
``_cs_*`` helpers and ``Console``/``Convert``/``Math``/``String`` used by the
generated code.
"""
import keyword
from typing import NamedTuple, Optional

from lark import Transformer, Tree
from pydantic import BaseModel, ConfigDict

from csrun_core.diagnostics import Diagnostic

PRIMITIVE_TYPES = {
    "string": "str",
    "String": "str",
    "char": "str",
    "int": "int",
    "long": "int",
    "short": "int",
    "byte": "int",
    "double": "float",
    "float": "float",
    "decimal": "float",
    "bool": "bool",
    "object": "Any",
    "Object": "Any",
}

DEFAULT_VALUES = {
    "int": "0",
    "long": "0",
    "short": "0",
    "byte": "0",
    "double": "0.0",
    "float": "0.0",
    "decimal": "0.0",
    "bool": "False",
}

UNTYPED = {"var", "void"}

# Bare names that refer to runtime helpers rather than Python objects.
RUNTIME_ALIASES = {"string": "String"}

LENGTH_MEMBERS = {"Length", "Count"}

INDENT = "    "


class TypeDecl(BaseModel):
    """Generated Python source for one script class."""
    model_config = ConfigDict(frozen=True)

    name: str
    python_name: str
    base: Optional[str] = None
    code: str
    source_path: str
    line: int
    column: int


class TypeRef(NamedTuple):
    """A script type: element name plus array rank."""
    name: str
    rank: int = 0

    @property
    def annotation(self):
        """Python annotation for this type, or None for ``var``/``void``."""
        if self.name in UNTYPED and self.rank == 0:
            return None
        base = PRIMITIVE_TYPES.get(self.name, repr(self.name))
        for _ in range(self.rank):
            base = f"List[{base}]"
        return base

    @property
    def default(self):
        """Python expression for the type's default value."""
        if self.rank:
            return "None"
        return DEFAULT_VALUES.get(self.name, "None")


class _MemberRef(str):
    """Generated ``target.member`` code that remembers both halves."""

    def __new__(cls, target, member):
        obj = super().__new__(cls, f"{target}.{member}")
        obj.target = target
        obj.member = member
        return obj


class _Scope:
    """Name resolution context for the member currently being generated."""

    def __init__(self, type_name, static_members, instance_members,
                 is_static=True, locals_=(), in_class_body=False):
        self.type_name = type_name
        self.static_members = static_members
        self.instance_members = instance_members
        self.is_static = is_static
        self.locals = set(locals_)
        self.in_class_body = in_class_body


def py_ident(name):
    """Python-safe identifier for a script name."""
    name = str(name)
    if keyword.iskeyword(name) or name == "self":
        return name + "_"
    return name


def _indent(code):
    """Indent each non-empty line of ``code`` by one level."""
    return "\n".join(INDENT + line if line else line for line in code.split("\n"))


def _is_static(modifiers):
    return any(token.type == "STATIC" for token in modifiers.children)


def _has_continue(code):
    return any(line.strip() == "continue" for line in code.split("\n"))


class ScriptTransformer(Transformer):
    """
    Transforms the parse tree of one script file into Python code.

    Use ``transform_unit`` rather than ``transform``: classes are generated
    member by member so unqualified names can be resolved against the
    enclosing class (``count`` -> ``Program.count`` or ``self.count``).
    Problems are collected in ``diagnostics`` instead of being raised.
    """

    def __init__(self, source_path="<script>"):
        """
        Initialize the transformer.

        Args:
            source_path: Compile-ready path reported in diagnostics.
        """
        super().__init__()
        self.source_path = source_path
        self.diagnostics = []
        self._scope = None
        self._counter = 0

    # --- Public API ---

    def transform_unit(self, tree):
        """Transform a ``start`` tree into a list of TypeDecl, in source order."""
        decls = []
        for child in tree.children:
            if isinstance(child, Tree) and child.data == "type_decl":
                decls.append(self._type_decl(child))
        return decls

    # --- Internal helpers ---

    def _error(self, code, message, token):
        self.diagnostics.append(Diagnostic(
            file=self.source_path,
            line=getattr(token, "line", None) or 0,
            column=getattr(token, "column", None) or 0,
            code=code,
            message=message,
        ))

    def _code(self, node):
        if isinstance(node, Tree):
            return self.transform(node)
        return str(node)

    def _fresh_name(self, prefix):
        self._counter += 1
        return f"{prefix}_{self._counter}"

    def _type_decl(self, tree):
        modifiers, name_token, base_clause, *members = tree.children
        type_name = str(name_token)
        base = str(base_clause.children[0]) if base_clause is not None else None
        static_members, instance_members = self._collect_members(type_name, members)

        methods = []
        static_fields = []
        instance_fields = []
        ctor = None
        for member in members:
            if member.data == "method_decl":
                methods.append(self._method(member, type_name, static_members, instance_members))
            elif member.data == "ctor_decl":
                if ctor is None:
                    ctor = self._ctor(member, type_name, static_members, instance_members)
            elif _is_static(member.children[0]):
                static_fields.append(self._field(member, type_name, static_members, instance_members))
            else:
                instance_fields.append(self._field(member, type_name, static_members, instance_members))
        self._scope = None

        parts = list(methods)
        if ctor is not None or instance_fields:
            parts.append(self._init_method(ctor, instance_fields, base is not None))
        if static_fields:
            parts.append("\n".join(static_fields))
        body = "\n\n".join(parts) if parts else "pass"

        header = f"class {py_ident(type_name)}({py_ident(base)}):" if base else f"class {py_ident(type_name)}:"
        return TypeDecl(
            name=type_name,
            python_name=py_ident(type_name),
            base=base,
            code=header + "\n" + _indent(body) + "\n",
            source_path=self.source_path,
            line=name_token.line,
            column=name_token.column,
        )

    def _collect_members(self, type_name, members):
        static_members = set()
        instance_members = set()
        seen = set()
        for member in members:
            if member.data == "ctor_decl":
                token = member.children[1]
                key, display = "__init__", type_name
            else:
                token = member.children[2]
                key = display = str(token)
            if key in seen:
                self._error("CR0102", f"The type '{type_name}' already contains a definition for '{display}'", token)
            seen.add(key)
            if member.data == "ctor_decl":
                continue
            if _is_static(member.children[0]):
                static_members.add(key)
            else:
                instance_members.add(key)
        return static_members, instance_members

    def _params(self, params_tree):
        if params_tree is None:
            return []
        return [(str(p.children[1]), self.transform(p.children[0])) for p in params_tree.children]

    def _collect_locals(self, member, params):
        names = {name for name, _ in params}
        for decl in member.find_data("declaration"):
            names.add(str(decl.children[1]))
        for loop in member.find_data("foreach_stmt"):
            names.add(str(loop.children[1]))
        for catch in member.find_data("catch_filter"):
            if catch.children[1] is not None:
                names.add(str(catch.children[1]))
        return names

    def _signature(self, params, with_self):
        parts = ["self"] if with_self else []
        for name, type_ref in params:
            annotation = type_ref.annotation
            parts.append(f"{py_ident(name)}: {annotation}" if annotation else py_ident(name))
        return ", ".join(parts)

    def _method(self, member, type_name, static_members, instance_members):
        modifiers, _return_type, name_token, params_tree, body_tree = member.children
        is_static = _is_static(modifiers)
        params = self._params(params_tree)
        self._scope = _Scope(type_name, static_members, instance_members,
                             is_static=is_static, locals_=self._collect_locals(member, params))
        body = self._code(body_tree)
        header = f"def {py_ident(name_token)}({self._signature(params, not is_static)}):"
        if is_static:
            header = "@staticmethod\n" + header
        return header + "\n" + _indent(body)

    def _ctor(self, member, type_name, static_members, instance_members):
        _modifiers, name_token, params_tree, body_tree = member.children
        if str(name_token) != type_name:
            self._error("CR1520", "Method must have a return type", name_token)
        params = self._params(params_tree)
        self._scope = _Scope(type_name, static_members, instance_members,
                             is_static=False, locals_=self._collect_locals(member, params))
        return params, self._code(body_tree)

    def _field(self, member, type_name, static_members, instance_members):
        modifiers, type_tree, name_token, init = member.children
        type_ref = self.transform(type_tree)
        is_static = _is_static(modifiers)
        # Static initializers run inside the class body, instance ones inside __init__.
        self._scope = _Scope(type_name, static_members, instance_members,
                             is_static=is_static, in_class_body=is_static)
        value = self._code(init) if init is not None else type_ref.default
        if is_static:
            return f"{py_ident(name_token)} = {value}"
        return f"self.{py_ident(name_token)} = {value}"

    def _init_method(self, ctor, instance_fields, has_base):
        params, body = ctor if ctor is not None else ([], "pass")
        lines = []
        if has_base:
            lines.append("super().__init__()")
        lines.extend(instance_fields)
        if body != "pass" or not lines:
            lines.append(body)
        return f"def __init__({self._signature(params, True)}):\n" + _indent("\n".join(lines))

    # --- Types ---

    def type_ref(self, args):
        """Transform type reference (element name plus ``[]`` ranks)."""
        return TypeRef(str(args[0]), len(args) - 1)

    # --- Statements ---

    def block(self, args):
        """Transform block; an empty block becomes ``pass``."""
        statements = [s for s in args if s]
        return "\n".join(statements) if statements else "pass"

    def local_decl(self, args):
        return args[0]

    def declaration(self, args):
        """Transform local declaration to assignment, defaulting by type."""
        type_ref, name, value = args
        if value is None:
            value = type_ref.default
        return f"{py_ident(name)} = {value}"

    def assign_stmt(self, args):
        return args[0]

    def assign(self, args):
        return f"{args[0]} = {args[1]}"

    def add_assign(self, args):
        return f"{args[0]} = _cs_add({args[0]}, {args[1]})"

    def sub_assign(self, args):
        return f"{args[0]} -= {args[1]}"

    def mul_assign(self, args):
        return f"{args[0]} *= {args[1]}"

    def div_assign(self, args):
        return f"{args[0]} = _cs_div({args[0]}, {args[1]})"

    def mod_assign(self, args):
        return f"{args[0]} = _cs_mod({args[0]}, {args[1]})"

    def incdec_stmt(self, args):
        return args[0]

    def increment(self, args):
        return f"{args[0]} += 1"

    def decrement(self, args):
        return f"{args[0]} -= 1"

    def if_stmt(self, args):
        """Transform if/else if/else chain."""
        cond, body, else_part = args
        code = f"if {cond}:\n{_indent(body)}"
        if else_part is not None:
            kind, else_code = else_part
            if kind == "elif":
                code += "\nel" + else_code
            else:
                code += f"\nelse:\n{_indent(else_code)}"
        return code

    def else_block(self, args):
        return ("else", args[0])

    def else_if(self, args):
        return ("elif", args[0])

    def while_stmt(self, args):
        cond, body = args
        return f"while {cond}:\n{_indent(body)}"

    def for_stmt(self, args):
        """
        Transform C-style for loop to a while loop.

        When the body uses ``continue`` the step must still run, so the step
        moves to the top of the loop behind a started flag.
        """
        init, cond, step, body = args
        condition = cond if cond is not None else "True"
        lines = [init] if init is not None else []
        if step is None:
            lines.append(f"while {condition}:\n{_indent(body)}")
        elif not _has_continue(body):
            lines.append(f"while {condition}:\n{_indent(body + chr(10) + step)}")
        else:
            flag = self._fresh_name("_for_started")
            loop = "\n".join([
                f"if {flag}:",
                _indent(step),
                f"{flag} = True",
                f"if not {condition}:",
                INDENT + "break",
                body,
            ])
            lines.append(f"{flag} = False")
            lines.append("while True:\n" + _indent(loop))
        return "\n".join(lines)

    def foreach_stmt(self, args):
        _type_ref, name, iterable, body = args
        return f"for {py_ident(name)} in {iterable}:\n{_indent(body)}"

    def return_stmt(self, args):
        return "return" if args[0] is None else f"return {args[0]}"

    def break_stmt(self, args):
        return "break"

    def continue_stmt(self, args):
        return "continue"

    def throw_stmt(self, args):
        return "raise" if args[0] is None else f"raise {args[0]}"

    def try_stmt(self, args):
        """Transform try/catch/finally to try/except/finally."""
        body, *clauses = args
        parts = [f"try:\n{_indent(body)}"]
        for clause in clauses:
            if clause is not None:
                parts.append(clause[1])
        return "\n".join(parts)

    def catch_clause(self, args):
        catch_filter, body = args
        if catch_filter is None:
            header = "except Exception:"
        else:
            type_name, var_name = catch_filter
            header = f"except {py_ident(type_name)}"
            if var_name is not None:
                header += f" as {py_ident(var_name)}"
            header += ":"
        return ("catch", f"{header}\n{_indent(body)}")

    def catch_filter(self, args):
        return (str(args[0]), args[1])

    def finally_clause(self, args):
        return ("finally", f"finally:\n{_indent(args[0])}")

    def expr_stmt(self, args):
        return args[0]

    # --- Expressions ---

    def ternary(self, args):
        cond, when_true, when_false = args
        return f"({when_true} if {cond} else {when_false})"

    def or_op(self, args):
        return f"({args[0]} or {args[1]})"

    def and_op(self, args):
        return f"({args[0]} and {args[1]})"

    def eq(self, args):
        return f"({args[0]} == {args[1]})"

    def ne(self, args):
        return f"({args[0]} != {args[1]})"

    def lt(self, args):
        return f"({args[0]} < {args[1]})"

    def le(self, args):
        return f"({args[0]} <= {args[1]})"

    def gt(self, args):
        return f"({args[0]} > {args[1]})"

    def ge(self, args):
        return f"({args[0]} >= {args[1]})"

    def add(self, args):
        """``+`` concatenates when either side is a string, so it goes through the runtime."""
        return f"_cs_add({args[0]}, {args[1]})"

    def sub(self, args):
        return f"({args[0]} - {args[1]})"

    def mul(self, args):
        return f"({args[0]} * {args[1]})"

    def div(self, args):
        return f"_cs_div({args[0]}, {args[1]})"

    def mod(self, args):
        return f"_cs_mod({args[0]}, {args[1]})"

    def not_op(self, args):
        return f"(not {args[0]})"

    def neg(self, args):
        return f"(-{args[0]})"

    def member(self, args):
        """Transform member access; ``.Length`` and ``.Count`` become ``len()``."""
        target, name = args
        if str(name) in LENGTH_MEMBERS:
            return f"len({target})"
        return _MemberRef(target, py_ident(name))

    def call(self, args):
        callee, arguments = args
        arguments = arguments or []
        if isinstance(callee, _MemberRef) and callee.member == "ToString" and not arguments:
            return f"_cs_str({callee.target})"
        return f"{callee}({', '.join(arguments)})"

    def index(self, args):
        return f"{args[0]}[{args[1]}]"

    def arguments(self, args):
        return list(args)

    def name(self, args):
        """
        Resolve an unqualified name.

        Locals win, then the enclosing class's static members, then its
        instance members, then globals (script types, runtime, libraries).
        """
        token = args[0]
        text = str(token)
        scope = self._scope
        if scope is not None and text not in scope.locals:
            if text in scope.static_members:
                if scope.in_class_body:
                    return py_ident(text)
                return f"{py_ident(scope.type_name)}.{py_ident(text)}"
            if text in scope.instance_members:
                if scope.is_static:
                    self._error(
                        "CR0120",
                        f"An object reference is required for the non-static member '{scope.type_name}.{text}'",
                        token,
                    )
                return f"self.{py_ident(text)}"
        if text in RUNTIME_ALIASES:
            return RUNTIME_ALIASES[text]
        return py_ident(text)

    def number(self, args):
        text = str(args[0])
        # Python rejects leading zeros on integer literals.
        return text if "." in text else str(int(text))

    def string(self, args):
        return str(args[0])

    def char(self, args):
        return str(args[0])

    def true(self, args):
        return "True"

    def false(self, args):
        return "False"

    def null(self, args):
        return "None"

    def this(self, args):
        return "self"

    def new_object(self, args):
        type_name, arguments = args
        return f"{py_ident(type_name)}({', '.join(arguments or [])})"

    def new_array(self, args):
        type_name, size = args
        return f"[{TypeRef(str(type_name)).default}] * ({size})"

    def array_literal(self, args):
        _type_name, _rank, arguments = args
        return f"[{', '.join(arguments or [])}]"
