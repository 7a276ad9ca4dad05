"""
This module aims to express an interface agreement
between the evaluator and various kinds of data,
and also the ways evaluation can go wrong.
"""

from typing import Union, Sequence
from ..ontology import Token

# nil, boolean, number, and string play themselves as None, bool, float, and str.
# Callables and instances are the classes in .values
NATIVE_DATA = Union[None, bool, float, str]
VALUE = Union[NATIVE_DATA, "LoxCallable", "LoxInstance"]
ARGS = Sequence[VALUE]


class LoxRuntimeError(Exception):
	""" Any of these stops the program. The token says where. """
	def __init__(self, token:Token, message:str):
		super().__init__(message)
		self.token = token
		self.message = message

class TypeMismatch(LoxRuntimeError): pass

class DivisionByZero(LoxRuntimeError):
	def __init__(self, token:Token):
		super().__init__(token, "Division by zero.")

class UndefinedVariable(LoxRuntimeError):
	def __init__(self, name:Token):
		super().__init__(name, "Undefined variable '%s'." % name.text)

class UndefinedProperty(LoxRuntimeError):
	def __init__(self, name:Token):
		super().__init__(name, "Undefined property '%s'." % name.text)

class NotCallable(LoxRuntimeError):
	def __init__(self, token:Token):
		super().__init__(token, "Can only call functions and classes.")

class ArityMismatch(LoxRuntimeError):
	def __init__(self, token:Token, need:int, got:int):
		super().__init__(token, "Expected %d arguments but got %d." % (need, got))
		self.need, self.got = need, got

class NotAnInstance(LoxRuntimeError): pass

class InvalidSuperclass(LoxRuntimeError):
	def __init__(self, token:Token):
		super().__init__(token, "Superclass must be a class.")
