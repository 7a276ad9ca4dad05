import unittest

from tlox.environment import Environment
from tlox.ontology import Token
from tlox.tree_walker.types import UndefinedVariable

def _name(text): return Token("IDENTIFIER", text, None, 1)

class EnvironmentTests(unittest.TestCase):

	def setUp(self):
		self.outer = Environment()
		self.outer.define("a", 1.0)
		self.middle = Environment(self.outer)
		self.inner = Environment(self.middle)
		self.inner.define("b", 2.0)

	def test_get_searches_outward(self):
		self.assertEqual(1.0, self.inner.get(_name("a")))
		self.assertEqual(2.0, self.inner.get(_name("b")))
		with self.assertRaises(UndefinedVariable):
			self.middle.get(_name("b"))

	def test_assign_updates_nearest_binding(self):
		self.inner.assign(_name("a"), 3.0)
		self.assertEqual(3.0, self.outer.get(_name("a")))
		with self.assertRaises(UndefinedVariable):
			self.inner.assign(_name("c"), 0.0)
		self.assertNotIn("c", self.inner)

	def test_define_may_shadow_and_redefine(self):
		self.inner.define("a", "shadow")
		self.inner.define("a", "again")
		self.assertEqual("again", self.inner.get(_name("a")))
		self.assertEqual(1.0, self.outer.get(_name("a")))

	def test_nil_is_a_value_not_an_absence(self):
		self.inner.define("n", None)
		self.assertIsNone(self.inner.get(_name("n")))

	def test_fixed_distance_access(self):
		self.assertIs(self.outer, self.inner.ancestor(2))
		self.assertEqual(1.0, self.inner.get_at(2, "a"))
		self.inner.assign_at(2, "a", 9.0)
		self.assertEqual(9.0, self.outer.get_at(0, "a"))

	def test_error_message(self):
		with self.assertRaises(UndefinedVariable) as cm:
			Environment().get(_name("ghost"))
		self.assertEqual("Undefined variable 'ghost'.", cm.exception.message)

if __name__ == '__main__':
	unittest.main()
