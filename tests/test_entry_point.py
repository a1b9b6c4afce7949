"""
Unit tests for entry point discovery (introspection + locator).
"""
from typing import List

import pytest

from csrun_core.compiler_service import CompilerService
from csrun_core.entry_point import ENTRY_POINT_NOT_FOUND, EntryPointLocator
from csrun_core.introspection import MethodSignature, PythonProgramIntrospector, STRING_ARRAY
from csrun_core.params import EntrySpec


@pytest.fixture(scope='module')
def service():
    return CompilerService()


@pytest.fixture
def locator_for(service, write_file):
    """Compile script source and return an EntryPointLocator over it."""
    def _locator(source):
        path = write_file('script.cs', source)
        result = service.compile([path])
        assert not result.has_errors, result.diagnostics
        return EntryPointLocator(PythonProgramIntrospector(result.program))
    return _locator


class TestAutoDiscovery:

    def test_single_main(self, locator_for):
        located = locator_for('class Program { static void Main(string[] args) { } }').locate()
        assert located.is_ok()
        assert located.value.qualified_name == 'Program.Main'

    def test_two_mains_is_not_found(self, locator_for):
        locator = locator_for('''
        class A { static void Main(string[] args) { } }
        class B { static void Main(string[] args) { } }
        ''')
        located = locator.locate()
        assert located.is_err()
        assert located.messages == [ENTRY_POINT_NOT_FOUND]

    def test_no_main(self, locator_for):
        assert locator_for('class A { static void Run(string[] args) { } }').locate().is_err()

    def test_instance_main_does_not_count(self, locator_for):
        assert locator_for('class A { void Main(string[] args) { } }').locate().is_err()

    def test_wrong_parameters_do_not_count(self, locator_for):
        locator = locator_for('''
        class A { static void Main() { } }
        class B { static void Main(string args) { } }
        class C { static void Main(string[] args, int n) { } }
        class D { static void Main(string[] args) { } }
        ''')
        assert locator.locate().value.type_name == 'D'

    def test_inherited_main_does_not_count(self, locator_for):
        locator = locator_for('''
        class Base { static void Main(string[] args) { } }
        class Derived : Base { }
        ''')
        assert locator.locate().value.type_name == 'Base'

    def test_return_value_is_ignored(self, locator_for):
        located = locator_for('class A { static int Main(string[] args) { return 3; } }').locate()
        assert located.value.invoke([]) is None

    def test_capitalised_string_array(self, locator_for):
        located = locator_for('class P { static void Main(String[] args) { } }').locate()
        assert located.value.qualified_name == 'P.Main'


class TestExplicitEntry:

    def test_method_named_like_python_keyword(self, locator_for):
        locator = locator_for('class P { static void pass(string[] args) { } }')
        located = locator.locate(EntrySpec('P', 'pass'))
        assert located.value.qualified_name == 'P.pass'
        assert locator.locate().is_err()

    def test_named_method(self, locator_for):
        locator = locator_for('''
        class A { static void Main(string[] args) { } }
        class B { static void Main(string[] args) { } static void Start(string[] args) { } }
        ''')
        assert locator.locate(EntrySpec('B', 'Main')).value.qualified_name == 'B.Main'
        assert locator.locate(EntrySpec('B', 'Start')).value.qualified_name == 'B.Start'

    def test_unknown_type_or_method(self, locator_for):
        locator = locator_for('class A { static void Main(string[] args) { } }')
        assert locator.locate(EntrySpec('Nope', 'Main')).is_err()
        assert locator.locate(EntrySpec('A', 'Start')).is_err()

    def test_invoke_passes_arguments(self, locator_for):
        locator = locator_for('''
        class A {
            static string seen = "";
            static void Main(string[] args) { seen = args[0] + args.Length; }
        }
        ''')
        located = locator.locate(EntrySpec('A', 'Main'))
        located.value.invoke(['x', 'y'])
        introspector = locator.introspector
        assert introspector.find_type('A').seen == 'x2'


class TestIntrospector:

    class FakeProgram:
        def __init__(self, classes):
            self.classes = classes

    def test_annotation_must_be_string_list(self):
        class Holder:
            @staticmethod
            def Main(args: List[str]):
                pass

            @staticmethod
            def Other(args: List[int]):
                pass

        introspector = PythonProgramIntrospector(self.FakeProgram({'Holder': Holder}))
        signature = MethodSignature((STRING_ARRAY,))
        assert introspector.own_static_methods(Holder, 'Main', signature) == [Holder.Main]
        assert introspector.own_static_methods(Holder, 'Other', signature) == []
        assert introspector.declared_types() == [('Holder', Holder)]
