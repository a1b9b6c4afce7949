"""
Introspection - reflective access to the types of a compiled program.

The entry point locator only talks to ``ProgramIntrospector``, so it does
not care how a program represents its types.
"""
import inspect
from abc import ABC, abstractmethod
from typing import List, NamedTuple

from .transformer import py_ident

# Parameter type of an entry procedure: an array of strings.
STRING_ARRAY = List[str]


class MethodSignature(NamedTuple):
    """Exact positional parameter types a method must declare."""
    parameter_types: tuple


class ProgramIntrospector(ABC):
    """Lists the types of a program and their static methods."""

    @abstractmethod
    def declared_types(self):
        """``(name, type)`` pairs for every type the program declares."""

    @abstractmethod
    def find_type(self, name):
        """The type called ``name``, or None."""

    @abstractmethod
    def own_static_methods(self, declared_type, name, signature):
        """
        Static methods called ``name`` declared directly on ``declared_type``
        (not inherited) whose parameters match ``signature`` exactly.
        """


class PythonProgramIntrospector(ProgramIntrospector):
    """Introspects a ``CompiledProgram`` whose types are Python classes."""

    def __init__(self, program):
        self.program = program

    def declared_types(self):
        return list(self.program.classes.items())

    def find_type(self, name):
        return self.program.classes.get(name)

    def own_static_methods(self, declared_type, name, signature):
        # Script names that are Python keywords were generated with a suffix.
        member = vars(declared_type).get(py_ident(name))
        if not isinstance(member, staticmethod):
            return []
        function = member.__func__
        if not _matches(function, signature):
            return []
        return [function]


def _matches(function, signature):
    try:
        parameters = list(inspect.signature(function).parameters.values())
    except (TypeError, ValueError, NameError):
        return False
    if len(parameters) != len(signature.parameter_types):
        return False
    for parameter, expected in zip(parameters, signature.parameter_types):
        if parameter.kind not in (parameter.POSITIONAL_ONLY, parameter.POSITIONAL_OR_KEYWORD):
            return False
        if parameter.annotation != expected:
            return False
    return True
