"""
All the scope resolution stuff goes here.
By the time this pass is finished, every local variable reference
knows how many scopes out to find its binding, and every reference
that does not is a global. The interpreter trusts those distances.

The pass also polices the static rules: no duplicate locals,
no reading a local in its own initializer, return/this/super/break/continue
only where they make sense. It reports what it finds and keeps going.
"""
from enum import Enum
from typing import Iterable
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Report
from .ontology import Expr, Stmt, Token, THIS, SUPER, INIT

class Binding(Enum):
	DECLARED = "declared"  # Name is in scope, but its initializer is still running.
	DEFINED = "defined"

class FunctionKind(Enum):
	NONE = 0
	FUNCTION = 1
	INITIALIZER = 2
	METHOD = 3

class ClassKind(Enum):
	NONE = 0
	CLASS = 1
	SUBCLASS = 2

class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	"""

	def tour(self, items:Iterable):
		for i in items:
			self.visit(i)

	def visit_Literal(self, expr:syntax.Literal): pass

	def visit_Grouping(self, expr:syntax.Grouping):
		self.visit(expr.expr)

	def visit_Unary(self, expr:syntax.Unary):
		self.visit(expr.arg)

	def _visit_infix(self, expr:syntax._Infix):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	visit_Binary = visit_Logical = visit_Comma = _visit_infix

	def visit_Ternary(self, expr:syntax.Ternary):
		self.visit(expr.cond)
		self.visit(expr.then_part)
		self.visit(expr.else_part)

	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		self.tour(expr.args)

	def visit_Get(self, expr:syntax.Get):
		# Property names are dynamic; only the object gets resolved.
		self.visit(expr.obj)

	def visit_Set(self, expr:syntax.Set):
		self.visit(expr.value)
		self.visit(expr.obj)

	def visit_Expression(self, stmt:syntax.Expression):
		self.visit(stmt.expr)

	def visit_Print(self, stmt:syntax.Print):
		self.visit(stmt.expr)

	def visit_If(self, stmt:syntax.If):
		self.visit(stmt.cond)
		self.visit(stmt.then_branch)
		if stmt.else_branch is not None: self.visit(stmt.else_branch)

class Resolver(TopDown):
	"""
	One resolver per interpreter is fine: each call to `resolve` starts from
	the global level, and the distances accumulate in the same table, which
	is what the prompt wants as it feeds in one line at a time.
	"""
	distances: dict[Expr, int]
	_scopes: list[dict[str, Binding]]

	def __init__(self, report:Report):
		self.report = report
		self.distances = {}
		self._scopes = []
		self._function = FunctionKind.NONE
		self._class = ClassKind.NONE
		self._loop_depth = 0

	def resolve(self, statements:Iterable[Stmt]) -> dict[Expr, int]:
		# A previous pass may have been cut short by TooManyIssues.
		self._scopes.clear()
		self._function, self._class, self._loop_depth = FunctionKind.NONE, ClassKind.NONE, 0
		self.tour(statements)
		return self.distances

	# Scope bookkeeping

	def _begin_scope(self):
		self._scopes.append({})

	def _end_scope(self):
		self._scopes.pop()

	def _declare(self, name:Token):
		# The global scope is not on the stack: globals may be redeclared.
		if not self._scopes: return
		scope = self._scopes[-1]
		if name.text in scope: self.report.redefined(name)
		scope[name.text] = Binding.DECLARED

	def _define(self, name:Token):
		if not self._scopes: return
		self._scopes[-1][name.text] = Binding.DEFINED

	def _resolve_local(self, expr:Expr, name:str):
		for depth, scope in enumerate(reversed(self._scopes)):
			if name in scope:
				self.distances[expr] = depth
				return
		# Not found anywhere local, so it's a global. No entry means exactly that.

	def _resolve_function(self, fn:syntax.Function, kind:FunctionKind):
		enclosing_function, enclosing_loops = self._function, self._loop_depth
		self._function, self._loop_depth = kind, 0
		self._begin_scope()
		for param in fn.params:
			self._declare(param)
			self._define(param)
		self.tour(fn.body)
		self._end_scope()
		self._function, self._loop_depth = enclosing_function, enclosing_loops

	# Statements

	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.tour(stmt.statements)
		self._end_scope()

	def visit_Var(self, stmt:syntax.Var):
		self._declare(stmt.name)
		self.visit(stmt.initializer)
		self._define(stmt.name)

	def visit_Function(self, stmt:syntax.Function):
		# Defined before the body, so the function may call itself.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FunctionKind.FUNCTION)

	def visit_Class(self, stmt:syntax.Class):
		enclosing_class = self._class
		self._class = ClassKind.CLASS
		self._declare(stmt.name)
		self._define(stmt.name)

		if stmt.superclass is not None:
			if stmt.superclass.name.text == stmt.name.text:
				self.report.inherits_from_itself(stmt.superclass.name)
			self._class = ClassKind.SUBCLASS
			self.visit(stmt.superclass)
			self._begin_scope()
			self._scopes[-1][SUPER] = Binding.DEFINED

		self._begin_scope()
		self._scopes[-1][THIS] = Binding.DEFINED
		for method in stmt.methods:
			kind = FunctionKind.INITIALIZER if method.name.text == INIT else FunctionKind.METHOD
			self._resolve_function(method, kind)
		self._end_scope()

		if stmt.superclass is not None: self._end_scope()
		self._class = enclosing_class

	def visit_Return(self, stmt:syntax.Return):
		if self._function is FunctionKind.NONE:
			self.report.return_from_top_level(stmt.keyword)
		if stmt.value is not None:
			if self._function is FunctionKind.INITIALIZER:
				self.report.return_value_from_initializer(stmt.keyword)
			self.visit(stmt.value)

	def visit_While(self, stmt:syntax.While):
		self.visit(stmt.cond)
		self._loop_depth += 1
		self.visit(stmt.body)
		self._loop_depth -= 1
		if stmt.increment is not None: self.visit(stmt.increment)

	def _visit_jump(self, stmt:syntax._Jump):
		if not self._loop_depth: self.report.jump_outside_loop(stmt.keyword)

	visit_Break = visit_Continue = _visit_jump

	# Expressions

	def visit_Variable(self, expr:syntax.Variable):
		if self._scopes and self._scopes[-1].get(expr.name.text) is Binding.DECLARED:
			self.report.read_in_own_initializer(expr.name)
		self._resolve_local(expr, expr.name.text)

	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name.text)

	def visit_This(self, expr:syntax.This):
		if self._class is ClassKind.NONE:
			self.report.this_outside_class(expr.keyword)
			return
		self._resolve_local(expr, THIS)

	def visit_Super(self, expr:syntax.Super):
		if self._class is ClassKind.NONE:
			self.report.super_outside_class(expr.keyword)
		elif self._class is not ClassKind.SUBCLASS:
			self.report.super_without_superclass(expr.keyword)
		self._resolve_local(expr, SUPER)
