"""
Recursive-descent parsing from tokens to the statement list.

Precedence, loosest first:

	comma       a , b
	assignment  x = v     obj.f = v     (right-associative)
	ternary     c ? a : b               (right-associative)
	or / and
	equality    == !=
	comparison  < <= > >=
	term        + -
	factor      * / % div
	unary       ! -
	call        f(...)  obj.name

Argument lists parse at assignment level, so there the comma separates arguments.
"""
from pathlib import Path
from typing import Optional, Sequence
from boozetools.parsing.interface import ParseError
from . import syntax
from .diagnostics import Report
from .ontology import Token, Expr, Stmt
from .scanner import scan

MAX_ARGS = 255

class LoxParseError(ParseError):
	""" Unwinds to the nearest declaration, which then resynchronizes. """
	pass

# A statement boundary is likely just before one of these:
_RESYNC = frozenset(["CLASS", "FUN", "VAR", "FOR", "IF", "WHILE", "PRINT", "RETURN"])

class LoxParser:
	def __init__(self, tokens:Sequence[Token], report:Report):
		self._tokens = tokens
		self._current = 0
		self._report = report

	def parse(self) -> list[Stmt]:
		statements = []
		while not self._at_end():
			stmt = self.declaration()
			if stmt is not None: statements.append(stmt)
		return statements

	# Token-stream plumbing

	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]
	def _at_end(self): return self._peek().kind == "EOF"

	def _check(self, kind:str) -> bool:
		return not self._at_end() and self._peek().kind == kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _match(self, *kinds:str) -> bool:
		for kind in kinds:
			if self._check(kind):
				self._advance()
				return True
		return False

	def _consume(self, kind:str, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)

	def _error(self, token:Token, message:str) -> LoxParseError:
		self._report.parse_error(token, message)
		return LoxParseError(token, message)

	def _synchronize(self):
		self._advance()
		while not self._at_end():
			if self._previous().kind == ";": return
			if self._peek().kind in _RESYNC: return
			self._advance()

	# Declarations and statements

	def declaration(self) -> Optional[Stmt]:
		try:
			if self._match("CLASS"): return self.class_declaration()
			if self._match("FUN"): return self.function("function")
			if self._match("VAR"): return self.var_declaration()
			return self.statement()
		except LoxParseError:
			self._synchronize()
			return None

	def class_declaration(self) -> syntax.Class:
		name = self._consume("IDENTIFIER", "Expect class name.")
		superclass = None
		if self._match("<"):
			superclass = syntax.Variable(self._consume("IDENTIFIER", "Expect superclass name."))
		self._consume("{", "Expect '{' before class body.")
		methods = []
		while not self._check("}") and not self._at_end():
			methods.append(self.function("method"))
		self._consume("}", "Expect '}' after class body.")
		return syntax.Class(name, superclass, methods)

	def function(self, kind:str) -> syntax.Function:
		name = self._consume("IDENTIFIER", "Expect %s name." % kind)
		self._consume("(", "Expect '(' after %s name." % kind)
		params = []
		if not self._check(")"):
			while True:
				if len(params) >= MAX_ARGS:
					self._report.parse_error(self._peek(), "Can't have more than %d parameters." % MAX_ARGS)
				params.append(self._consume("IDENTIFIER", "Expect parameter name."))
				if not self._match(","): break
		self._consume(")", "Expect ')' after parameters.")
		self._consume("{", "Expect '{' before %s body." % kind)
		return syntax.Function(name, params, self.block_body())

	def var_declaration(self) -> syntax.Var:
		name = self._consume("IDENTIFIER", "Expect variable name.")
		if not self._match("="):
			raise self._error(self._peek(), "Expect initializer for variable '%s'." % name.text)
		initializer = self.expression()
		self._consume(";", "Expect ';' after variable declaration.")
		return syntax.Var(name, initializer)

	def statement(self) -> Stmt:
		if self._match("FOR"): return self.for_statement()
		if self._match("IF"): return self.if_statement()
		if self._match("PRINT"): return self.print_statement()
		if self._match("RETURN"): return self.return_statement()
		if self._match("WHILE"): return self.while_statement()
		if self._match("BREAK"): return syntax.Break(self._jump())
		if self._match("CONTINUE"): return syntax.Continue(self._jump())
		if self._match("{"):
			_open = self._previous()
			body = self.block_body()
			return syntax.Block(_open, body, self._previous())
		return self.expression_statement()

	def _jump(self) -> Token:
		keyword = self._previous()
		self._consume(";", "Expect ';' after '%s'." % keyword.text)
		return keyword

	def for_statement(self) -> Stmt:
		"""
		Desugar into an initializer and a while-loop, in a block of their own.
		The increment rides along on the While node instead of in the body,
		so that a "continue" in the body still runs the increment.
		"""
		keyword = self._previous()
		self._consume("(", "Expect '(' after 'for'.")
		if self._match(";"): initializer = None
		elif self._match("VAR"): initializer = self.var_declaration()
		else: initializer = self.expression_statement()

		if self._check(";"): cond = syntax.Literal(True, keyword)
		else: cond = self.expression()
		self._consume(";", "Expect ';' after loop condition.")

		increment = None if self._check(")") else self.expression()
		close = self._consume(")", "Expect ')' after for clauses.")

		body = self.statement()
		loop = syntax.While(keyword, cond, body, increment)
		if initializer is None: return loop
		return syntax.Block(keyword, [initializer, loop], close)

	def if_statement(self) -> syntax.If:
		keyword = self._previous()
		self._consume("(", "Expect '(' after 'if'.")
		cond = self.expression()
		self._consume(")", "Expect ')' after if condition.")
		then_branch = self.statement()
		else_branch = self.statement() if self._match("ELSE") else None
		return syntax.If(keyword, cond, then_branch, else_branch)

	def print_statement(self) -> syntax.Print:
		keyword = self._previous()
		value = self.expression()
		self._consume(";", "Expect ';' after value.")
		return syntax.Print(keyword, value)

	def return_statement(self) -> syntax.Return:
		keyword = self._previous()
		value = None if self._check(";") else self.expression()
		self._consume(";", "Expect ';' after return value.")
		return syntax.Return(keyword, value)

	def while_statement(self) -> syntax.While:
		keyword = self._previous()
		self._consume("(", "Expect '(' after 'while'.")
		cond = self.expression()
		self._consume(")", "Expect ')' after condition.")
		return syntax.While(keyword, cond, self.statement())

	def expression_statement(self) -> syntax.Expression:
		expr = self.expression()
		self._consume(";", "Expect ';' after expression.")
		return syntax.Expression(expr)

	def block_body(self) -> list[Stmt]:
		statements = []
		while not self._check("}") and not self._at_end():
			stmt = self.declaration()
			if stmt is not None: statements.append(stmt)
		self._consume("}", "Expect '}' after block.")
		return statements

	# Expressions

	def expression(self) -> Expr:
		return self.comma()

	def comma(self) -> Expr:
		expr = self.assignment()
		while self._match(","):
			op = self._previous()
			expr = syntax.Comma(expr, op, self.assignment())
		return expr

	def assignment(self) -> Expr:
		expr = self.ternary()
		if self._match("="):
			equals = self._previous()
			value = self.assignment()
			if isinstance(expr, syntax.Variable):
				return syntax.Assign(expr.name, value)
			if isinstance(expr, syntax.Get):
				return syntax.Set(expr.obj, expr.name, value)
			# Not worth a resynchronization; the parser is not confused.
			self._report.parse_error(equals, "Invalid assignment target.")
		return expr

	def ternary(self) -> Expr:
		cond = self.logic_or()
		if self._match("?"):
			then_part = self.expression()
			self._consume(":", "Expect ':' in conditional expression.")
			return syntax.Ternary(cond, then_part, self.ternary())
		return cond

	def _left_assoc(self, node_type, operand, *kinds:str) -> Expr:
		expr = operand()
		while self._match(*kinds):
			op = self._previous()
			expr = node_type(expr, op, operand())
		return expr

	def logic_or(self) -> Expr: return self._left_assoc(syntax.Logical, self.logic_and, "OR")
	def logic_and(self) -> Expr: return self._left_assoc(syntax.Logical, self.equality, "AND")
	def equality(self) -> Expr: return self._left_assoc(syntax.Binary, self.comparison, "!=", "==")
	def comparison(self) -> Expr: return self._left_assoc(syntax.Binary, self.term, ">", ">=", "<", "<=")
	def term(self) -> Expr: return self._left_assoc(syntax.Binary, self.factor, "-", "+")
	def factor(self) -> Expr: return self._left_assoc(syntax.Binary, self.unary, "/", "*", "%", "DIV")

	def unary(self) -> Expr:
		if self._match("!", "-"):
			op = self._previous()
			return syntax.Unary(op, self.unary())
		return self.call()

	def call(self) -> Expr:
		expr = self.primary()
		while True:
			if self._match("("):
				expr = self._finish_call(expr)
			elif self._match("."):
				name = self._consume("IDENTIFIER", "Expect property name after '.'.")
				expr = syntax.Get(expr, name)
			else:
				return expr

	def _finish_call(self, callee:Expr) -> syntax.Call:
		args = []
		if not self._check(")"):
			while True:
				if len(args) >= MAX_ARGS:
					self._report.parse_error(self._peek(), "Can't have more than %d arguments." % MAX_ARGS)
				args.append(self.assignment())
				if not self._match(","): break
		paren = self._consume(")", "Expect ')' after arguments.")
		return syntax.Call(callee, paren, args)

	def primary(self) -> Expr:
		token = self._peek()
		if self._match("FALSE"): return syntax.Literal(False, token)
		if self._match("TRUE"): return syntax.Literal(True, token)
		if self._match("NIL"): return syntax.Literal(None, token)
		if self._match("NUMBER", "STRING"): return syntax.Literal(token.literal, token)
		if self._match("SUPER"):
			self._consume(".", "Expect '.' after 'super'.")
			method = self._consume("IDENTIFIER", "Expect superclass method name.")
			return syntax.Super(token, method)
		if self._match("THIS"): return syntax.This(token)
		if self._match("IDENTIFIER"): return syntax.Variable(token)
		if self._match("("):
			expr = self.expression()
			close = self._consume(")", "Expect ')' after expression.")
			return syntax.Grouping(token, expr, close)
		raise self._error(token, "Expect expression.")

def parse_text(text:str, report:Report, path:Optional[Path]=None) -> list[Stmt]:
	""" Submit text to scanner and parser; the caller must check the report before going further. """
	assert path is None or isinstance(path, Path)
	tokens = scan(text, report, path)
	return LoxParser(tokens, report).parse()
