"""
A compiled program: runtime preamble, bound libraries and script classes.

Nothing is executed until ``load()`` (or the first access to ``classes``),
so static field initializers only run when the program is actually used.
"""
import builtins

from .logger import debug_log


class CompiledProgram:
    """
    Holds code objects produced by the compiler service.

    Args:
        types: ``(TypeDecl, code)`` pairs, bases before derived classes.
        preamble: Code object of the runtime preamble.
        libraries: Binding name -> module for every library reference.
    """

    def __init__(self, types, preamble, libraries=None):
        self.types = list(types)
        self.preamble = preamble
        self.libraries = dict(libraries or {})
        self._namespace = None
        self._classes = None

    def load(self):
        """Execute the program into a fresh namespace (once) and return it."""
        if self._namespace is not None:
            return self._namespace

        namespace = {"__name__": "__csrun__", "__builtins__": builtins}
        exec(self.preamble, namespace)
        namespace.update(self.libraries)

        classes = {}
        for decl, code in self.types:
            exec(code, namespace)
            classes[decl.name] = namespace[decl.python_name]
        debug_log(f"Loaded {len(classes)} type(s)")

        self._namespace = namespace
        self._classes = classes
        return namespace

    @property
    def classes(self):
        """Script type name -> Python class, in declaration order."""
        self.load()
        return dict(self._classes)

    @property
    def type_names(self):
        return [decl.name for decl, _ in self.types]
