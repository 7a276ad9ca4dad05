"""
These most-fundamental classes in the syntax class hierarchy
are separate from the rest to avoid various circular-import
scenarios. The scanner makes tokens, the parser makes phrases
out of tokens, and the diagnostics only ever need to know
the leftmost and rightmost token of any phrase.
"""
from typing import Any

class Phrase:
	def left(self) -> int:
		""" Return the index of the leftmost token of this phrase """
		raise NotImplementedError(type(self))
	def right(self) -> int:
		""" Return the index of the rightmost token of this phrase """
		raise NotImplementedError(type(self))
	def span(self) -> tuple[int, int]: return self.left(), self.right()

class Token(Phrase):
	"""
	Representing the occurrence of a lexeme anywhere.
	The kind is the terminal symbol as the parser sees it:
	punctuation plays itself, keywords are upper-cased,
	and the rest are "IDENTIFIER", "NUMBER", "STRING", or "EOF".
	"""
	spot: int  # zero-spot means pre-defined term.
	def __init__(self, kind:str, text:str, literal:Any, line:int, spot:int=None):
		assert isinstance(text, str)
		assert isinstance(spot, int) or spot is None, type(spot)
		self.kind, self.text, self.literal, self.line = kind, text, literal, line
		self.spot = spot or 0
	def __repr__(self): return "<%s %r>" % (self.kind, self.text)
	def key(self): return self.text
	def left(self): return self.spot
	def right(self): return self.spot

class Expr(Phrase):
	"""
	Expressions are keys in the resolution table by identity,
	so no subclass may override __eq__ or __hash__.
	"""
	pass

class Stmt(Phrase): pass

THIS = "this"
SUPER = "super"
INIT = "init"
