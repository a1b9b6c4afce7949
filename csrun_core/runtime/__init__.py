# csrun Runtime Components
"""
Runtime modules that get injected into every compiled program.

These are real Python files that provide IDE support and testability,
but are concatenated into a single preamble string at compile time.
"""

import os

# Order matters - dependencies must come first
RUNTIME_MODULES = [
    'preamble_header.py',  # Imports and globals
    'operators.py',        # _cs_str, _cs_add, _cs_div, _cs_mod, _cs_format
    'console.py',          # Console
    'convert.py',          # Convert, Math, String
]


def get_preamble():
    """
    Read and concatenate all runtime modules into a single preamble string.

    The preamble is executed into a compiled program's namespace before any
    script class, so generated code can rely on it without imports.
    """
    runtime_dir = os.path.dirname(__file__)

    parts = []
    for module in RUNTIME_MODULES:
        path = os.path.join(runtime_dir, module)
        with open(path, 'r', encoding='utf-8') as f:
            parts.append(f.read())

    return '\n\n'.join(parts)
