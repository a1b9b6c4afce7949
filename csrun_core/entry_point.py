"""
Entry point discovery and invocation.

With an explicit ``Type.Method`` the named type is searched for that static
method; otherwise every type is searched for a static ``Main``. Either way
the method must take exactly one string-array parameter, and exactly one
candidate must match.
"""
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict

from .introspection import MethodSignature, STRING_ARRAY
from .logger import debug_log
from .result import Err, Ok

ENTRY_POINT_NOT_FOUND = "Entry point not found. Use -entry."
ENTRY_METHOD_NAME = "Main"
ENTRY_SIGNATURE = MethodSignature((STRING_ARRAY,))


class EntryCandidate(BaseModel):
    """A method that qualifies as the program's entry procedure."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type_name: str
    method_name: str
    target: Callable[..., Any]

    @property
    def qualified_name(self):
        return f"{self.type_name}.{self.method_name}"

    def invoke(self, args):
        """Call the entry procedure with ``args``; its return value is ignored."""
        debug_log(f"Invoking {self.qualified_name} with {len(args)} argument(s)")
        self.target(list(args))


class EntryPointLocator:
    """Finds the entry procedure through a ``ProgramIntrospector``."""

    def __init__(self, introspector):
        self.introspector = introspector

    def find_candidates(self, entry=None):
        """Every method matching ``entry`` (an EntrySpec) or, if None, every static Main."""
        if entry is not None:
            declared = self.introspector.find_type(entry.type_name)
            if declared is None:
                return []
            return [
                EntryCandidate(type_name=entry.type_name, method_name=entry.method_name, target=method)
                for method in self.introspector.own_static_methods(declared, entry.method_name, ENTRY_SIGNATURE)
            ]

        candidates = []
        for type_name, declared in self.introspector.declared_types():
            for method in self.introspector.own_static_methods(declared, ENTRY_METHOD_NAME, ENTRY_SIGNATURE):
                candidates.append(EntryCandidate(type_name=type_name, method_name=ENTRY_METHOD_NAME, target=method))
        return candidates

    def locate(self, entry=None):
        """
        Returns:
            Ok(EntryCandidate) when exactly one method qualifies, else
            Err(ENTRY_POINT_NOT_FOUND).
        """
        candidates = self.find_candidates(entry)
        debug_log(f"Entry point candidates: {[c.qualified_name for c in candidates]}")
        if len(candidates) != 1:
            return Err(ENTRY_POINT_NOT_FOUND)
        return Ok(candidates[0])
