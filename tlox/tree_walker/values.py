"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but callables and instances need more help.
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional
from .. import syntax
from ..environment import Environment
from ..ontology import Token, THIS, INIT
from .types import ARGS, VALUE, UndefinedProperty
from .evaluator import ReturnSignal

class LoxCallable(ABC):
	""" The one capability the interpreter looks for in a callee. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def call(self, interpreter, args: ARGS) -> VALUE: pass

class NativeFunction(LoxCallable):
	""" Host-provided, fixed arity. The Python function gets the interpreter and then the arguments. """
	def __init__(self, name:str, arity:int, fn:Callable):
		self.name = name
		self._arity = arity
		self._fn = fn

	def __str__(self): return "<native fn>"
	def __repr__(self): return "<native fn %s>" % self.name

	def arity(self) -> int: return self._arity

	def call(self, interpreter, args: ARGS) -> VALUE:
		return self._fn(interpreter, *args)

class LoxFunction(LoxCallable):
	""" The run-time manifestation of a function declaration: tied to its natal environment. """
	def __init__(self, declaration:syntax.Function, closure:Environment, is_initializer:bool):
		self.declaration = declaration
		self.closure = closure
		self.is_initializer = is_initializer

	def __str__(self): return "<fn %s>" % self.declaration.name.text

	def arity(self) -> int: return len(self.declaration.params)

	def bind(self, instance:"LoxInstance") -> "LoxFunction":
		"""
		One more scope, holding only "this", between the method and its closure.
		That is where the resolver expects to find "this".
		"""
		env = Environment(self.closure)
		env.define(THIS, instance)
		return LoxFunction(self.declaration, env, self.is_initializer)

	def call(self, interpreter, args: ARGS) -> VALUE:
		# Lexical scope: the new frame hangs off the closure, not the caller.
		env = Environment(self.closure)
		for param, arg in zip(self.declaration.params, args):
			env.define(param.text, arg)
		try:
			interpreter.execute_block(self.declaration.body, env)
		except ReturnSignal as signal:
			if self.is_initializer: return self.closure.get_at(0, THIS)
			return signal.value
		if self.is_initializer: return self.closure.get_at(0, THIS)
		return None

class LoxClass(LoxCallable):
	def __init__(self, name:str, superclass:Optional["LoxClass"], methods:dict[str, LoxFunction]):
		self.name = name
		self.superclass = superclass
		self.methods = methods

	def __str__(self): return self.name

	def find_method(self, name:str) -> Optional[LoxFunction]:
		klass = self
		while klass is not None:
			if name in klass.methods: return klass.methods[name]
			klass = klass.superclass
		return None

	def arity(self) -> int:
		initializer = self.find_method(INIT)
		return 0 if initializer is None else initializer.arity()

	def call(self, interpreter, args: ARGS) -> "LoxInstance":
		instance = LoxInstance(self)
		initializer = self.find_method(INIT)
		if initializer is not None:
			initializer.bind(instance).call(interpreter, args)
		return instance

class LoxInstance:
	def __init__(self, klass:LoxClass):
		self.klass = klass
		self.fields = {}

	def __str__(self): return "%s instance" % self.klass.name

	def get(self, name:Token) -> VALUE:
		# Fields shadow methods.
		if name.text in self.fields: return self.fields[name.text]
		method = self.klass.find_method(name.text)
		if method is None: raise UndefinedProperty(name)
		return method.bind(self)

	def set(self, name:Token, value:VALUE):
		self.fields[name.text] = value
