"""
Unit tests for csrun_core/transformer.py - ScriptTransformer class.
"""
import pytest
from lark import Lark

from csrun_core.grammar import script_grammar
from csrun_core.runtime import get_preamble
from csrun_core.transformer import ScriptTransformer, TypeRef


@pytest.fixture(scope='module')
def parser():
    return Lark(script_grammar, parser='earley', lexer='basic')


@pytest.fixture
def transform(parser):
    """Transform source into (decls, diagnostics)."""
    def _transform(source):
        transformer = ScriptTransformer(source_path='test.cs')
        decls = transformer.transform_unit(parser.parse(source))
        return decls, transformer.diagnostics
    return _transform


@pytest.fixture
def load(transform):
    """Transform source and exec it after the runtime preamble. Returns the namespace."""
    def _load(source):
        decls, diagnostics = transform(source)
        assert diagnostics == []
        env = {}
        exec(get_preamble(), env)
        for decl in decls:
            exec(decl.code, env)
        return env
    return _load


class TestTypeRef:

    def test_string_array_annotation(self):
        assert TypeRef('string', 1).annotation == 'List[str]'

    def test_capitalised_type_names(self):
        assert TypeRef('String', 1).annotation == 'List[str]'
        assert TypeRef('Object').annotation == 'Any'

    def test_user_type_annotation_is_quoted(self):
        assert TypeRef('Widget').annotation == "'Widget'"

    def test_untyped(self):
        assert TypeRef('var').annotation is None
        assert TypeRef('void').annotation is None

    def test_defaults(self):
        assert TypeRef('int').default == '0'
        assert TypeRef('bool').default == 'False'
        assert TypeRef('string').default == 'None'
        assert TypeRef('int', 1).default == 'None'


class TestClassGeneration:

    def test_type_decl_metadata(self, transform):
        decls, _ = transform('class A { }\n\nclass B : A { }')
        assert [d.name for d in decls] == ['A', 'B']
        assert decls[1].base == 'A'
        assert decls[1].line == 3
        assert decls[0].code.startswith('class A:')
        assert decls[1].code.startswith('class B(A):')

    def test_static_main_signature(self, transform):
        decls, _ = transform('class P { static void Main(string[] args) { } }')
        assert '@staticmethod\n    def Main(args: List[str]):' in decls[0].code

    def test_instance_method_takes_self(self, transform):
        decls, _ = transform('class P { public int Get(int n) { return n; } }')
        assert 'def Get(self, n: int):' in decls[0].code

    def test_python_keyword_names_are_escaped(self, load):
        env = load('class P { static int Run(int lambda) { int pass = lambda; return pass; } }')
        assert env['P'].Run(4) == 4

    def test_static_fields_and_methods(self, load):
        env = load('''
        class Program {
            static int count = 2;
            static int Twice() { return count * 2; }
            static void Bump() { count += 1; }
        }
        ''')
        program = env['Program']
        assert program.count == 2
        program.Bump()
        assert program.Twice() == 6

    def test_constructor_and_instance_fields(self, load):
        env = load('''
        class Counter {
            int value;
            string label = "c";
            public Counter(int start) { value = start; }
            public void Add(int n) { value += n; }
            public string Show() { return label + "=" + value; }
        }
        ''')
        counter = env['Counter'](5)
        counter.Add(2)
        assert counter.Show() == 'c=7'

    def test_this_member_access(self, load):
        env = load('''
        class Greeter {
            string prefix;
            public Greeter(string prefix) { this.prefix = prefix; }
            public string Greet(string name) { return prefix + ", " + name; }
        }
        ''')
        assert env['Greeter']('Hi').Greet('Bo') == 'Hi, Bo'

    def test_derived_class_runs_base_init(self, load):
        # Instance methods of the base are reached through self, not by bare name.
        env = load('''
        class Base { int size = 3; public int Size() { return size; } }
        class Derived : Base { int extra = 1; public int Total() { return this.Size() + extra; } }
        ''')
        assert env['Derived']().Total() == 4


class TestStatementsAndExpressions:

    def test_for_loop(self, load):
        env = load('''
        class P {
            static int Sum(int n) {
                int total = 0;
                for (int i = 1; i <= n; i++) { total += i; }
                return total;
            }
        }
        ''')
        assert env['P'].Sum(4) == 10

    def test_for_loop_with_continue_still_steps(self, load):
        env = load('''
        class P {
            static int SumOdd(int n) {
                int total = 0;
                for (int i = 0; i < n; i++) {
                    if (i % 2 == 0) { continue; }
                    total += i;
                }
                return total;
            }
        }
        ''')
        assert env['P'].SumOdd(6) == 1 + 3 + 5

    def test_foreach_and_arrays(self, load):
        env = load('''
        class P {
            static string Join(string[] args) {
                string result = "";
                foreach (string a in args) { result += a; }
                return result + args.Length;
            }
            static int Third() { int[] xs = new int[] { 1, 2, 3 }; return xs[2]; }
            static int Zeroes() { int[] xs = new int[4]; return xs.Length + xs[0]; }
        }
        ''')
        assert env['P'].Join(['a', 'b']) == 'ab2'
        assert env['P'].Third() == 3
        assert env['P'].Zeroes() == 4

    def test_if_else_chain(self, load):
        env = load('''
        class P {
            static string Sign(int x) {
                if (x > 0) { return "+"; } else if (x < 0) { return "-"; } else { return "0"; }
            }
        }
        ''')
        sign = env['P'].Sign
        assert (sign(3), sign(-3), sign(0)) == ('+', '-', '0')

    def test_while_and_ternary(self, load):
        env = load('''
        class P {
            static int Halvings(int x) {
                int steps = 0;
                while (x > 1) { x /= 2; steps++; }
                return steps > 2 ? steps : -1;
            }
        }
        ''')
        assert env['P'].Halvings(16) == 4
        assert env['P'].Halvings(2) == -1

    def test_integer_division_truncates(self, load):
        env = load('class P { static int Div(int a, int b) { return a / b; } static int Mod(int a, int b) { return a % b; } }')
        assert env['P'].Div(-7, 2) == -3
        assert env['P'].Mod(-7, 2) == -1

    def test_try_catch_finally(self, load):
        env = load('''
        class P {
            static string Safe() {
                string log = "";
                try { throw new Exception("boom"); }
                catch (Exception e) { log += "caught"; }
                finally { log += "+done"; }
                return log;
            }
        }
        ''')
        assert env['P'].Safe() == 'caught+done'

    def test_to_string_and_string_helpers(self, load):
        env = load('''
        class P {
            static string Show(bool b) { return b.ToString() + string.Join(",", new string[] { "a", "b" }); }
        }
        ''')
        assert env['P'].Show(True) == 'Truea,b'

    def test_leading_zero_literal(self, transform):
        decls, _ = transform('class P { static int M() { return 007; } }')
        assert 'return 7' in decls[0].code


class TestDiagnostics:

    def test_duplicate_member(self, transform):
        _, diagnostics = transform('class P { int x; int x; }')
        assert [d.code for d in diagnostics] == ['CR0102']

    def test_constructor_name_mismatch(self, transform):
        _, diagnostics = transform('class P { Q() { } }')
        assert diagnostics[0].code == 'CR1520'
        assert (diagnostics[0].line, diagnostics[0].column) == (1, 11)

    def test_instance_member_from_static_method(self, transform):
        _, diagnostics = transform('class P {\n  int x;\n  static int M() { return x; }\n}')
        assert diagnostics[0].code == 'CR0120'
        assert diagnostics[0].line == 3
        assert diagnostics[0].file == 'test.cs'
