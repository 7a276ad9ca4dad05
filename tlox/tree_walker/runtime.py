"""
The specific evaluation and execution rule for each kind of syntax.

Expressions evaluate to values; statements execute for effect.
The live environment chain belongs to the interpreter: blocks and calls
swap in a new innermost scope and always put the old one back.
"""
import sys
import math
import operator
from typing import Optional, Sequence, TextIO
from boozetools.support.foundation import Visitor
from .. import syntax, primitive
from ..diagnostics import Report
from ..environment import Environment
from ..ontology import Expr, Stmt, Token, THIS, SUPER, INIT
from .types import (
	VALUE, LoxRuntimeError, TypeMismatch, DivisionByZero, UndefinedProperty,
	NotCallable, ArityMismatch, NotAnInstance, InvalidSuperclass,
)
from .evaluator import BreakSignal, ContinueSignal, ReturnSignal, is_truthy, is_equal, is_number, stringify
from .values import LoxCallable, LoxFunction, LoxClass, LoxInstance

def _truncating_div(a:float, b:float) -> float:
	q = a / b
	return float(math.trunc(q)) if math.isfinite(q) else q

def _remainder(a:float, b:float) -> float:
	# Sign follows the dividend, as in C. Python's own % would follow the divisor.
	if math.isinf(a): return math.nan
	return math.fmod(a, b)

NUMERIC_BINARY = {
	"-"  : operator.sub,
	"*"  : operator.mul,
	">"  : operator.gt,
	">=" : operator.ge,
	"<"  : operator.lt,
	"<=" : operator.le,
}
DIVISION = {
	"/"   : operator.truediv,
	"DIV" : _truncating_div,
	"%"   : _remainder,
}
SHORTCUT = {
	"AND":False,
	"OR":True,
}

# Each Lox call costs about eight Python frames.
RECURSION_LIMIT = 20000

class Interpreter(Visitor):
	globals: Environment
	environment: Environment
	locals: dict[Expr, int]

	def __init__(self, report:Report, *, stdout:Optional[TextIO]=None, stdin:Optional[TextIO]=None):
		self.report = report
		self.stdout = sys.stdout if stdout is None else stdout
		self.stdin = sys.stdin if stdin is None else stdin
		self.globals = Environment()
		self.environment = self.globals
		self.locals = {}
		primitive.install_natives(self.globals)
		if sys.getrecursionlimit() < RECURSION_LIMIT: sys.setrecursionlimit(RECURSION_LIMIT)

	def resolve(self, distances:dict[Expr, int]):
		""" Take on board what the resolver worked out. """
		self.locals.update(distances)

	def interpret(self, statements:Sequence[Stmt]) -> VALUE:
		"""
		Run a program (or one line at the prompt) to completion or to the first runtime error.
		The result is the value of the last statement, if that is an expression-statement.
		"""
		result = None
		try:
			for stmt in statements:
				result = self.visit(stmt)
		except LoxRuntimeError as ex:
			self.report.runtime_error(ex.token, ex.message)
			return None
		except RecursionError:
			self.report.stack_exhausted(None)
			return None
		return result

	def execute_block(self, statements:Sequence[Stmt], env:Environment):
		previous = self.environment
		try:
			self.environment = env
			for stmt in statements:
				self.visit(stmt)
		finally:
			self.environment = previous

	def _look_up(self, name:Token, expr:Expr) -> VALUE:
		distance = self.locals.get(expr)
		if distance is None: return self.globals.get(name)
		return self.environment.get_at(distance, name.text)

	###########################################################################
	#
	#  Statements
	#

	def visit_Expression(self, stmt:syntax.Expression):
		return self.visit(stmt.expr)

	def visit_Print(self, stmt:syntax.Print):
		self.stdout.write(stringify(self.visit(stmt.expr)) + "\n")

	def visit_Var(self, stmt:syntax.Var):
		self.environment.define(stmt.name.text, self.visit(stmt.initializer))

	def visit_Block(self, stmt:syntax.Block):
		self.execute_block(stmt.statements, Environment(self.environment))

	def visit_If(self, stmt:syntax.If):
		if is_truthy(self.visit(stmt.cond)): self.visit(stmt.then_branch)
		elif stmt.else_branch is not None: self.visit(stmt.else_branch)

	def visit_While(self, stmt:syntax.While):
		while is_truthy(self.visit(stmt.cond)):
			try: self.visit(stmt.body)
			except BreakSignal: break
			except ContinueSignal: pass
			if stmt.increment is not None: self.visit(stmt.increment)

	def visit_Break(self, stmt:syntax.Break):
		raise BreakSignal()

	def visit_Continue(self, stmt:syntax.Continue):
		raise ContinueSignal()

	def visit_Return(self, stmt:syntax.Return):
		value = None if stmt.value is None else self.visit(stmt.value)
		raise ReturnSignal(value)

	def visit_Function(self, stmt:syntax.Function):
		self.environment.define(stmt.name.text, LoxFunction(stmt, self.environment, False))

	def visit_Class(self, stmt:syntax.Class):
		superclass = None
		if stmt.superclass is not None:
			superclass = self.visit(stmt.superclass)
			if not isinstance(superclass, LoxClass):
				raise InvalidSuperclass(stmt.superclass.name)

		# Bound early, so that methods can refer to their own class.
		self.environment.define(stmt.name.text, None)
		outer = self.environment
		if superclass is not None:
			self.environment = Environment(outer)
			self.environment.define(SUPER, superclass)

		methods = {
			method.name.text: LoxFunction(method, self.environment, method.name.text == INIT)
			for method in stmt.methods
		}
		klass = LoxClass(stmt.name.text, superclass, methods)

		self.environment = outer
		self.environment.assign(stmt.name, klass)

	###########################################################################
	#
	#  Expressions
	#

	def visit_Literal(self, expr:syntax.Literal):
		return expr.value

	def visit_Grouping(self, expr:syntax.Grouping):
		return self.visit(expr.expr)

	def visit_Variable(self, expr:syntax.Variable):
		return self._look_up(expr.name, expr)

	def visit_Assign(self, expr:syntax.Assign):
		value = self.visit(expr.value)
		distance = self.locals.get(expr)
		if distance is None: self.globals.assign(expr.name, value)
		else: self.environment.assign_at(distance, expr.name.text, value)
		return value

	def visit_Unary(self, expr:syntax.Unary):
		arg = self.visit(expr.arg)
		if expr.op.kind == "!": return not is_truthy(arg)
		if not is_number(arg): raise TypeMismatch(expr.op, "Operand must be a number.")
		return -arg

	def visit_Binary(self, expr:syntax.Binary):
		a = self.visit(expr.lhs)
		b = self.visit(expr.rhs)
		glyph = expr.op.kind
		if glyph == "==": return is_equal(a, b)
		if glyph == "!=": return not is_equal(a, b)
		if glyph == "+":
			if is_number(a) and is_number(b): return a + b
			if isinstance(a, str) and isinstance(b, str): return a + b
			raise TypeMismatch(expr.op, "Operands must be two numbers or two strings.")
		if not (is_number(a) and is_number(b)):
			raise TypeMismatch(expr.op, "Operands must be numbers.")
		if glyph in DIVISION:
			if b == 0: raise DivisionByZero(expr.op)
			return DIVISION[glyph](a, b)
		return NUMERIC_BINARY[glyph](a, b)

	def visit_Logical(self, expr:syntax.Logical):
		lhs = self.visit(expr.lhs)
		if is_truthy(lhs) == SHORTCUT[expr.op.kind]: return lhs
		return self.visit(expr.rhs)

	def visit_Comma(self, expr:syntax.Comma):
		self.visit(expr.lhs)
		return self.visit(expr.rhs)

	def visit_Ternary(self, expr:syntax.Ternary):
		if is_truthy(self.visit(expr.cond)): return self.visit(expr.then_part)
		return self.visit(expr.else_part)

	def visit_Call(self, expr:syntax.Call):
		callee = self.visit(expr.callee)
		args = [self.visit(a) for a in expr.args]
		if not isinstance(callee, LoxCallable): raise NotCallable(expr.paren)
		if len(args) != callee.arity(): raise ArityMismatch(expr.paren, callee.arity(), len(args))
		return callee.call(self, args)

	def visit_Get(self, expr:syntax.Get):
		obj = self.visit(expr.obj)
		if not isinstance(obj, LoxInstance): raise NotAnInstance(expr.name, "Only instances have properties.")
		return obj.get(expr.name)

	def visit_Set(self, expr:syntax.Set):
		obj = self.visit(expr.obj)
		if not isinstance(obj, LoxInstance): raise NotAnInstance(expr.name, "Only instances have fields.")
		value = self.visit(expr.value)
		obj.set(expr.name, value)
		return value

	def visit_This(self, expr:syntax.This):
		return self._look_up(expr.keyword, expr)

	def visit_Super(self, expr:syntax.Super):
		# "this" is always exactly one scope inside "super"; see LoxFunction.bind
		distance = self.locals[expr]
		superclass = self.environment.get_at(distance, SUPER)
		instance = self.environment.get_at(distance - 1, THIS)
		method = superclass.find_method(expr.method.text)
		if method is None: raise UndefinedProperty(expr.method)
		return method.bind(instance)
