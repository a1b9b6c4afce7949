"""
Unit tests for include resolution.
"""
import os

import pytest

from csrun_core.resolution import DependencyResolver, ResolutionSet, canonical_path
from csrun_core.scanner import DirectiveScanner


@pytest.fixture
def resolver(scratch_dir):
    return DependencyResolver(DirectiveScanner(temp_dir=scratch_dir))


def names(units):
    return [os.path.basename(unit.source_path) for unit in units]


class TestDependencyResolver:

    def test_single_file(self, write_file, resolver):
        path = write_file('main.cs', 'class Program { }\n')
        units = resolver.resolve(path)
        assert units.paths() == [canonical_path(path)]

    def test_nested_includes(self, write_file, resolver):
        write_file('base.cs', 'class Base { }\n')
        write_file('lib.cs', '//#include base.cs\nclass Lib { }\n')
        main = write_file('main.cs', '//#include lib.cs\nclass Program { }\n')

        units = resolver.resolve(main)
        assert names(units) == ['main.cs', 'lib.cs', 'base.cs']

    def test_cycle_terminates(self, write_file, resolver):
        a = write_file('a.cs', '//#include b.cs\nclass A { }\n')
        write_file('b.cs', '//#include a.cs\nclass B { }\n')

        units = resolver.resolve(a)
        assert names(units) == ['a.cs', 'b.cs']

    def test_self_include(self, write_file, resolver):
        a = write_file('a.cs', '//#include a.cs\nclass A { }\n')
        assert len(resolver.resolve(a)) == 1

    def test_diamond_scans_shared_file_once(self, write_file, resolver):
        write_file('d.cs', 'class D { }\n')
        write_file('b.cs', '//#include d.cs\nclass B { }\n')
        write_file('c.cs', '//#include d.cs\nclass C { }\n')
        a = write_file('a.cs', '//#include b.cs\n//#include c.cs\nclass A { }\n')

        units = resolver.resolve(a)
        assert names(units) == ['a.cs', 'b.cs', 'c.cs', 'd.cs']

    def test_parent_directory_paths_are_normalised(self, write_file, resolver):
        write_file('a.cs', '//#include sub/x.cs\nclass A { }\n')
        x = write_file('sub/x.cs', '//#include ../a.cs\nclass X { }\n')

        units = resolver.resolve(x)
        assert names(units) == ['x.cs', 'a.cs']

    def test_imports_are_never_opened(self, write_file, resolver):
        main = write_file('main.cs', '//#import does/not/exist.dll\nclass Program { }\n')
        units = resolver.resolve(main)
        assert list(units)[0].imports == ('does/not/exist.dll',)

    def test_missing_include(self, write_file, tmp_path, resolver):
        main = write_file('main.cs', '//#include missing.cs\nclass Program { }\n')
        with pytest.raises(FileNotFoundError) as exc_info:
            resolver.resolve(main)
        assert exc_info.value.filename == str(tmp_path / 'missing.cs')

    def test_failed_pass_releases_its_units(self, write_file, scratch_dir, resolver):
        write_file('meta.cs', '::{\n}::\n\nclass Meta { }\n')
        main = write_file('main.cs', '//#include meta.cs\n//#include missing.cs\nclass Program { }\n')

        with pytest.raises(FileNotFoundError):
            resolver.resolve(main)
        assert os.listdir(scratch_dir) == []
        # Only the entry file made it into the set
        assert names(resolver.units) == ['main.cs']


class TestResolutionSet:

    def test_first_resolution_wins(self, write_file):
        path = write_file('main.cs', 'class P { }\n')
        unit = DirectiveScanner().scan(path)
        units = ResolutionSet()
        units.add(path, unit)
        with pytest.raises(KeyError):
            units.add(path, unit)
        assert units[path] is unit

    def test_release_all(self, write_file, scratch_dir):
        scanner = DirectiveScanner(temp_dir=scratch_dir)
        units = ResolutionSet()
        for name in ('a.cs', 'b.cs'):
            path = write_file(name, '::{\n}::\n\nclass P { }\n')
            units.add(path, scanner.scan(path))
        assert len(os.listdir(scratch_dir)) == 2

        units.release_all()
        assert os.listdir(scratch_dir) == []
