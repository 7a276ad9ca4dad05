import io
import math
import unittest
from unittest import mock

from tlox.diagnostics import Report
from tlox.environment import Environment
from tlox.tree_walker.executive import Session
from tlox.tree_walker import types
from tlox.tree_walker.evaluator import is_truthy, is_equal, stringify
from tlox.tree_walker.runtime import _truncating_div, _remainder
from tlox.tree_walker.values import LoxClass, LoxFunction, LoxInstance

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30)
		self.complain_to_console = mock.Mock()

class Harness:
	""" A session with its output captured and its complaints silenced. """
	def __init__(self, stdin=""):
		self.report = Silence()
		self.out = io.StringIO()
		self.session = Session(self.report, stdout=self.out, stdin=io.StringIO(stdin))

	def run(self, text):
		result = self.session.run(text)
		self.report.assert_no_issues("Should have passed static checks.")
		return result

	def lines(self): return self.out.getvalue().splitlines()

	def raises(self, text):
		""" Run everything but the last statement, then visit that directly to see what escapes. """
		statements = self.session.check(text)
		self.report.assert_no_issues("Should have passed static checks.")
		interpreter = self.session.interpreter
		interpreter.interpret(statements[:-1])
		assert not self.report.crashed(), self.report.intros()
		interpreter.visit(statements[-1])

def _output(text, stdin=""):
	h = Harness(stdin)
	h.run(text)
	assert not h.report.crashed(), h.report.intros()
	return h.lines()

class ValueTests(unittest.TestCase):

	def test_truthiness(self):
		for v in [None, False]: self.assertFalse(is_truthy(v))
		for v in [True, 0.0, "", "false"]: self.assertTrue(is_truthy(v))

	def test_equality_never_crosses_types(self):
		self.assertTrue(is_equal(None, None))
		self.assertTrue(is_equal(1.0, 1.0))
		self.assertFalse(is_equal(True, 1.0))
		self.assertFalse(is_equal(None, False))
		self.assertFalse(is_equal("1", 1.0))
		self.assertFalse(is_equal(math.nan, math.nan))

	def test_stringify(self):
		self.assertEqual("nil", stringify(None))
		self.assertEqual("true", stringify(True))
		self.assertEqual("3", stringify(3.0))
		self.assertEqual("-0.5", stringify(-0.5))
		self.assertEqual("text", stringify("text"))

	def test_numbers_print_as_in_javascript(self):
		self.assertEqual("10000000000000000", stringify(1e16))
		self.assertEqual("100000000000000000000", stringify(1e20))
		self.assertEqual("1e+21", stringify(1e21))
		self.assertEqual("0", stringify(-0.0))
		self.assertEqual("0.000001", stringify(1e-6))
		self.assertEqual("1e-7", stringify(1e-7))
		self.assertEqual("0.1", stringify(0.1))
		self.assertEqual("NaN", stringify(math.nan))
		self.assertEqual("-Infinity", stringify(-math.inf))
		self.assertEqual(["10000000000000000", "0"], _output("print 10000000000000000; print -0;"))

	def test_truncating_division(self):
		self.assertEqual(2.0, _truncating_div(5.0, 2.0))
		self.assertEqual(-2.0, _truncating_div(-5.0, 2.0))
		self.assertEqual(math.inf, _truncating_div(math.inf, 2.0))

	def test_remainder_follows_dividend(self):
		self.assertEqual(-1.0, _remainder(-7.0, 3.0))
		self.assertEqual(1.0, _remainder(7.0, -3.0))
		self.assertTrue(math.isnan(_remainder(math.inf, 3.0)))

class ExpressionTests(unittest.TestCase):

	def test_echo_value(self):
		h = Harness()
		self.assertEqual(7.0, h.run("3 + 4;"))
		self.assertEqual("ab", h.run('"a" + "b";'))
		self.assertIsNone(h.run("print 1;"))

	def test_arithmetic(self):
		self.assertEqual(["2.5", "2", "1", "-2", "true", "false"], _output("""
			print 5 / 2;
			print 5 div 2;
			print 7 % 3;
			print -5 div 2;
			print 1 < 2;
			print 2 <= 1;
		"""))

	def test_logic_returns_an_operand(self):
		self.assertEqual(["nil", "yes", "0", "false"], _output("""
			print nil and 1;
			print nil or "yes";
			print 0 or 1;
			print !0;
		"""))

	def test_short_circuit_skips_the_right(self):
		self.assertEqual(["1"], _output("""
			var hits = 0;
			fun hit() { hits = hits + 1; return true; }
			true or hit();
			false and hit();
			true and hit();
			print hits;
		"""))

	def test_comma_and_ternary(self):
		self.assertEqual(["3", "small", "big"], _output("""
			var n = (1, 2, 3);
			print n;
			print n < 5 ? "small" : "big";
			print n > 5 ? "small" : n > 1 ? "big" : "none";
		"""))

	def test_type_errors(self):
		h = Harness()
		for text in ['1 + "a";', '-"a";', '"a" < "b";', 'true * 2;']:
			with self.subTest(text):
				with self.assertRaises(types.TypeMismatch):
					h.raises(text)

	def test_division_by_zero(self):
		h = Harness()
		for text in ["1 / 0;", "1 div 0;", "1 % 0;"]:
			with self.subTest(text):
				with self.assertRaises(types.DivisionByZero):
					h.raises(text)

	def test_undefined_variable(self):
		with self.assertRaises(types.UndefinedVariable):
			Harness().raises("print nowhere;")
		with self.assertRaises(types.UndefinedVariable):
			Harness().raises("nowhere = 1;")

class CallableTests(unittest.TestCase):

	def test_factorial(self):
		h = Harness()
		h.run("fun fact(n) { if (n <= 1) return 1; return n * fact(n - 1); }")
		self.assertEqual(120.0, h.run("fact(5);"))

	def test_closure_counter(self):
		self.assertEqual(["1", "2", "1"], _output("""
			fun make_counter() {
				var i = 0;
				fun count() { i = i + 1; return i; }
				return count;
			}
			var a = make_counter();
			var b = make_counter();
			print a();
			print a();
			print b();
		"""))

	def test_function_without_return_gives_nil(self):
		self.assertEqual(["nil", "<fn f>", "<native fn>"], _output("fun f() {} print f(); print f; print clock;"))

	def test_call_errors(self):
		with self.assertRaises(types.NotCallable):
			Harness().raises('"not a function"();')
		with self.assertRaises(types.ArityMismatch) as cm:
			Harness().raises("fun f(a, b) {} f(1);")
		self.assertEqual("Expected 2 arguments but got 1.", cm.exception.message)

	def test_natives(self):
		self.assertEqual(["first", "second", "nil", "42.5", "nil", "nil", "true"], _output("""
			print read_line();
			print read_line();
			print read_line();
			print parse_num("42.5 apples");
			print parse_num("apples");
			print parse_num(42);
			var t = clock();
			print clock() >= t;
		""", stdin="first\nsecond\n"))

class LoopTests(unittest.TestCase):

	def test_break_and_continue(self):
		self.assertEqual(["1", "3", "4"], _output("""
			for (var i = 0; i < 10; i = i + 1) {
				if (i == 0 or i == 2) continue;
				if (i == 5) break;
				print i;
			}
		"""))

	def test_break_inside_while_inside_function(self):
		self.assertEqual(["3"], _output("""
			fun f() {
				var n = 0;
				while (true) { n = n + 1; if (n == 3) break; }
				return n;
			}
			print f();
		"""))

	def test_environment_restored_after_escape(self):
		h = Harness()
		h.run("fun f() { { var x = 1; return x; } }")
		self.assertEqual(1.0, h.run("f();"))
		h.run("var y = 0; while (true) { var z = 1; { y = y + z; break; } }")
		self.assertIs(h.session.interpreter.globals, h.session.interpreter.environment)

class ClassTests(unittest.TestCase):

	def test_instances_and_methods(self):
		h = Harness()
		h.run("""
			class Pair {
				init(a, b) { this.a = a; this.b = b; }
				sum() { return this.a + this.b; }
			}
			var p = Pair(1, 2);
		""")
		p = h.session.interpreter.globals.get_at(0, "p")
		self.assertIsInstance(p, LoxInstance)
		self.assertIsInstance(p.klass, LoxClass)
		self.assertEqual({"a": 1.0, "b": 2.0}, p.fields)
		self.assertEqual(3.0, h.run("p.sum();"))
		self.assertEqual("Pair instance", stringify(p))
		self.assertEqual("Pair", stringify(p.klass))

	def test_fields_shadow_methods(self):
		self.assertEqual(["method", "field"], _output("""
			class A { m() { return "method"; } }
			var a = A();
			print a.m();
			a.m = "field";
			print a.m;
		"""))

	def test_bound_method_remembers_this(self):
		self.assertEqual(["Bob"], _output("""
			class Person { init(name) { this.name = name; } say() { return this.name; } }
			var say = Person("Bob").say;
			print say();
		"""))

	def test_initializer_returns_this(self):
		h = Harness()
		h.run("class A { init() { this.n = 1; return; } } var a = A();")
		self.assertEqual(True, h.run("a.init() == a;"))
		init = h.session.interpreter.globals.get_at(0, "A").find_method("init")
		self.assertIsInstance(init, LoxFunction)
		self.assertTrue(init.is_initializer)

	def test_inheritance_and_super(self):
		self.assertEqual(["A", "BA", "BA"], _output("""
			class A { name() { return "A"; } }
			class B < A { name() { return "B" + super.name(); } }
			class C < B {}
			print A().name();
			print B().name();
			print C().name();
		"""))

	def test_inherited_initializer_sets_arity(self):
		self.assertEqual(["2"], _output("""
			class A { init(x, y) { this.x = x; this.y = y; } }
			class B < A {}
			print B(1, 1).x + B(1, 1).y;
		"""))

	def test_class_errors(self):
		with self.assertRaises(types.UndefinedProperty):
			Harness().raises("class A {} A().nothing;")
		with self.assertRaises(types.NotAnInstance):
			Harness().raises('"str".length;')
		with self.assertRaises(types.NotAnInstance):
			Harness().raises("var n = 1; n.x = 2;")
		with self.assertRaises(types.InvalidSuperclass):
			Harness().raises('var S = "x"; class A < S {}')

class PropertyTests(unittest.TestCase):

	def test_ternary_factorial(self):
		h = Harness()
		h.run("fun fact(n) { return n <= 1 ? 1 : n * fact(n - 1); }")
		self.assertEqual(120.0, h.run("fact(5);"))

	def test_equality_and_concatenation(self):
		self.assertEqual(["true", "false", "ab", "false", "true"], _output("""
			print nil == nil;
			print nil == false;
			print "a" + "b";
			print 1 == "1";
			print 2 != 3;
		"""))

	def test_resolved_distances_always_find_their_binding(self):
		text = """
		class A { init(n) { this.n = n; } get() { return this.n; } }
		class B < A { get() { var k = 1; return super.get() + k; } }
		fun adder(x) { fun add(y) { { var z = y; return x + z; } } return add; }
		var total = 0;
		for (var i = 0; i < 3; i = i + 1) { total = total + adder(i)(B(i).get()); }
		print total;
		"""
		h = Harness()
		seen = []
		real_get_at = Environment.get_at
		def spy(env, distance, name):
			value = real_get_at(env, distance, name)
			seen.append(name)
			return value
		with mock.patch.object(Environment, "get_at", spy):
			h.run(text)
		self.assertFalse(h.report.crashed(), h.report.intros())
		self.assertEqual(["9"], h.lines())
		for name in ["this", "super", "x", "y", "z", "i", "k"]:
			self.assertIn(name, seen)

class RuntimeErrorReportTests(unittest.TestCase):

	def test_first_error_stops_the_program(self):
		h = Harness()
		h.run('print "before"; print 1 + nil; print "after";')
		self.assertEqual(["before"], h.lines())
		self.assertTrue(h.report.crashed())
		self.assertFalse(h.report.sick())
		self.assertEqual(["Operands must be two numbers or two strings."], h.report.intros())

	def test_deep_recursion_is_reported(self):
		h = Harness()
		h.run("fun down(n) { return down(n + 1); } down(0);")
		self.assertTrue(h.report.crashed())
		self.assertEqual(["Stack overflow."], h.report.intros())

	def test_recursion_a_thousand_deep(self):
		self.assertEqual(["1500"], _output("""
			fun depth(n) { if (n == 0) return 0; return 1 + depth(n - 1); }
			print depth(1500);
		"""))

	def test_deep_nesting_in_source_is_reported(self):
		h = Harness()
		text = "print " + "(" * 5000 + "1" + ")" * 5000 + ";"
		self.assertIsNone(h.session.run(text))
		self.assertFalse(h.report.sick())
		self.assertTrue(h.report.crashed())
		self.assertEqual(["Stack overflow."], h.report.intros())
		self.assertEqual([], h.lines())

	def test_session_survives_runtime_error(self):
		h = Harness()
		h.run("var a = 1; print a + nil;")
		h.report.reset()
		h.run("print a;")
		self.assertEqual(["1"], h.lines())

if __name__ == '__main__':
	unittest.main()
