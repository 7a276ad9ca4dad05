"""
The set of parse-nodes in simple form.
The parser calls these constructors with subordinate phrases in a top-down recursive descent.
The set is closed: the resolver and the interpreter each have exactly one method per class here.
Class-level type annotations make peace with pycharm.
"""
from typing import Optional, Any, Sequence
from .ontology import Expr, Stmt, Token

###############################################################################
#
#  Expressions
#

class Literal(Expr):
	value: Any
	def __init__(self, value, token:Token):
		self.value, self._token = value, token
	def left(self): return self._token.left()
	def right(self): return self._token.right()
	def __repr__(self): return "<Literal %r>"%self.value

class Variable(Expr):
	name: Token
	def __init__(self, name:Token): self.name = name
	def left(self): return self.name.left()
	def right(self): return self.name.right()
	def __repr__(self): return "<ref:%s>"%self.name.text

class Assign(Expr):
	def __init__(self, name:Token, value:Expr):
		self.name, self.value = name, value
	def left(self): return self.name.left()
	def right(self): return self.value.right()

class Grouping(Expr):
	def __init__(self, _open:Token, expr:Expr, _close:Token):
		self._open, self.expr, self._close = _open, expr, _close
	def left(self): return self._open.left()
	def right(self): return self._close.right()

class Unary(Expr):
	def __init__(self, op:Token, arg:Expr):
		self.op, self.arg = op, arg
	def left(self): return self.op.left()
	def right(self): return self.arg.right()

class _Infix(Expr):
	lhs: Expr
	op: Token
	rhs: Expr
	def __init__(self, lhs:Expr, op:Token, rhs:Expr):
		self.lhs, self.op, self.rhs = lhs, op, rhs
	def left(self): return self.lhs.left()
	def right(self): return self.rhs.right()

class Binary(_Infix): pass

class Logical(_Infix):
	""" Short-circuit "and" / "or" """

class Comma(_Infix):
	""" Evaluate both; the value is the right-hand side. """

class Ternary(Expr):
	def __init__(self, cond:Expr, then_part:Expr, else_part:Expr):
		self.cond, self.then_part, self.else_part = cond, then_part, else_part
	def left(self): return self.cond.left()
	def right(self): return self.else_part.right()

class Call(Expr):
	def __init__(self, callee:Expr, paren:Token, args:Sequence[Expr]):
		self.callee, self.paren, self.args = callee, paren, args
	def left(self): return self.callee.left()
	def right(self): return self.paren.right()

class Get(Expr):
	def __init__(self, obj:Expr, name:Token):
		self.obj, self.name = obj, name
	def left(self): return self.obj.left()
	def right(self): return self.name.right()

class Set(Expr):
	def __init__(self, obj:Expr, name:Token, value:Expr):
		self.obj, self.name, self.value = obj, name, value
	def left(self): return self.obj.left()
	def right(self): return self.value.right()

class This(Expr):
	def __init__(self, keyword:Token): self.keyword = keyword
	def left(self): return self.keyword.left()
	def right(self): return self.keyword.right()

class Super(Expr):
	def __init__(self, keyword:Token, method:Token):
		self.keyword, self.method = keyword, method
	def left(self): return self.keyword.left()
	def right(self): return self.method.right()

###############################################################################
#
#  Statements
#

class Expression(Stmt):
	def __init__(self, expr:Expr): self.expr = expr
	def left(self): return self.expr.left()
	def right(self): return self.expr.right()

class Print(Stmt):
	def __init__(self, keyword:Token, expr:Expr):
		self.keyword, self.expr = keyword, expr
	def left(self): return self.keyword.left()
	def right(self): return self.expr.right()

class Var(Stmt):
	""" The grammar insists on an initializer; there are no declared-but-unset variables. """
	def __init__(self, name:Token, initializer:Expr):
		self.name, self.initializer = name, initializer
	def left(self): return self.name.left()
	def right(self): return self.initializer.right()

class Block(Stmt):
	def __init__(self, _open:Token, statements:Sequence[Stmt], _close:Token):
		self._open, self.statements, self._close = _open, statements, _close
	def left(self): return self._open.left()
	def right(self): return self._close.right()

class If(Stmt):
	def __init__(self, keyword:Token, cond:Expr, then_branch:Stmt, else_branch:Optional[Stmt]):
		self.keyword, self.cond = keyword, cond
		self.then_branch, self.else_branch = then_branch, else_branch
	def left(self): return self.keyword.left()
	def right(self): return (self.else_branch or self.then_branch).right()

class While(Stmt):
	"""
	A "for" loop becomes one of these inside a block holding its initializer.
	The increment stays separate from the body so that "continue" does not skip it.
	"""
	increment: Optional[Expr]
	def __init__(self, keyword:Token, cond:Expr, body:Stmt, increment:Optional[Expr]=None):
		self.keyword, self.cond, self.body, self.increment = keyword, cond, body, increment
	def left(self): return self.keyword.left()
	def right(self): return self.body.right()

class _Jump(Stmt):
	def __init__(self, keyword:Token): self.keyword = keyword
	def left(self): return self.keyword.left()
	def right(self): return self.keyword.right()

class Break(_Jump): pass

class Continue(_Jump): pass

class Return(Stmt):
	def __init__(self, keyword:Token, value:Optional[Expr]):
		self.keyword, self.value = keyword, value
	def left(self): return self.keyword.left()
	def right(self): return (self.value or self.keyword).right()

class Function(Stmt):
	""" Both free-standing functions and methods. """
	def __init__(self, name:Token, params:Sequence[Token], body:Sequence[Stmt]):
		self.name, self.params, self.body = name, params, body
	def left(self): return self.name.left()
	def right(self): return self.name.right()
	def __repr__(self): return "<fn %s>"%self.name.text

class Class(Stmt):
	superclass: Optional[Variable]
	methods: Sequence[Function]
	def __init__(self, name:Token, superclass:Optional[Variable], methods:Sequence[Function]):
		self.name, self.superclass, self.methods = name, superclass, methods
	def left(self): return self.name.left()
	def right(self): return (self.superclass or self.name).right()
	def __repr__(self): return "<class %s>"%self.name.text
