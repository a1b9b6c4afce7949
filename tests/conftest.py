"""
Shared fixtures for the csrun test suite.
"""
import os
import sys

import pytest

# Make the repository root importable (csrun, compiler, csrun_core)
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def write_file(tmp_path):
    """Write a text file under tmp_path and return its path as a string."""
    def _write(name, content):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
        return str(path)
    return _write


@pytest.fixture
def scratch_dir(tmp_path):
    """Empty directory for temporary (rewritten) source copies."""
    path = tmp_path / 'scratch'
    path.mkdir()
    return str(path)
