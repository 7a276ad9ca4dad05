"""
The canonical list-structured search, one dictionary per scope.

Blocks, calls, and bound methods each make a new Environment atop an existing one.
Closures keep their defining Environment alive just by referring to it,
so a chain may well outlive the block or call that created it.
The chain never cycles: it always bottoms out at the globals.
"""
from typing import Any, Optional
from .ontology import Token
from .tree_walker.types import UndefinedVariable

class Environment:
	_bindings: dict[str, Any]
	enclosing: Optional["Environment"]

	def __init__(self, enclosing:Optional["Environment"]=None):
		self._bindings = {}
		self.enclosing = enclosing

	def __repr__(self):
		depth, env = 0, self.enclosing
		while env is not None: depth, env = depth+1, env.enclosing
		return "<Environment depth=%d %s>" % (depth, sorted(self._bindings))

	def __contains__(self, name:str): return name in self._bindings

	def define(self, name:str, value:Any):
		""" Redefinition is fine here; the resolver polices locals, and globals may be redefined. """
		self._bindings[name] = value

	def get(self, name:Token) -> Any:
		env = self
		while env is not None:
			if name.text in env._bindings: return env._bindings[name.text]
			env = env.enclosing
		raise UndefinedVariable(name)

	def assign(self, name:Token, value:Any):
		env = self
		while env is not None:
			if name.text in env._bindings:
				env._bindings[name.text] = value
				return
			env = env.enclosing
		raise UndefinedVariable(name)

	def ancestor(self, distance:int) -> "Environment":
		env = self
		for _ in range(distance): env = env.enclosing
		return env

	# The resolver guarantees the binding is there at exactly this distance.
	def get_at(self, distance:int, name:str) -> Any:
		return self.ancestor(distance)._bindings[name]

	def assign_at(self, distance:int, name:str, value:Any):
		self.ancestor(distance)._bindings[name] = value
