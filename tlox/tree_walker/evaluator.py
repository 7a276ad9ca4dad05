"""
The generic machinery that everything needs,
without the specific methods corresponding to particular syntax.
"""
import math
from decimal import Decimal
from .types import VALUE


class ControlSignal(Exception):
	"""
	Non-local exits. Each kind has exactly one catcher:
	the nearest enclosing loop for break and continue,
	the nearest enclosing call for return.
	The resolver sees to it that the catcher always exists.
	These are deliberately not LoxRuntimeError.
	"""

class BreakSignal(ControlSignal): pass

class ContinueSignal(ControlSignal): pass

class ReturnSignal(ControlSignal):
	def __init__(self, value:VALUE):
		super().__init__()
		self.value = value


def is_truthy(value:VALUE) -> bool:
	""" nil and false are falsy. Everything else, zero and "" included, is truthy. """
	if value is None: return False
	if isinstance(value, bool): return value
	return True

def is_equal(a:VALUE, b:VALUE) -> bool:
	"""
	No cross-type equality: Python would have True == 1.0, but Lox does not.
	Numbers, strings, and booleans compare by value; callables and instances by identity,
	since none of the runtime classes define __eq__.
	"""
	if a is None: return b is None
	if type(a) is not type(b): return False
	return a == b

def is_number(value:VALUE) -> bool:
	return isinstance(value, float)

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if value is True: return "true"
	if value is False: return "false"
	if isinstance(value, float): return _number_text(value)
	return str(value)

def _number_text(value:float) -> str:
	""" Spelled the way a JavaScript engine spells numbers: 1e16 is all digits, -0 is plain 0. """
	if math.isnan(value): return "NaN"
	if math.isinf(value): return "Infinity" if value > 0 else "-Infinity"
	if value == 0: return "0"
	if value.is_integer() and abs(value) < 1e21: return "%d" % value
	text = repr(value)
	if "e" not in text: return text
	mantissa, exponent = text.split("e")
	if -6 <= int(exponent) < 21: return format(Decimal(text), "f")
	return "%se%+d" % (mantissa, int(exponent))
