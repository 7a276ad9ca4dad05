"""
I decided to factor out the run-time from the executive.
This is the overall control: scan, parse, resolve, and then maybe run.
"""
from pathlib import Path
from typing import Optional, Sequence, TextIO
from .. import syntax
from ..diagnostics import Report
from ..front_end import parse_text
from ..ontology import Stmt
from ..resolution import Resolver
from .evaluator import stringify
from .runtime import Interpreter
from .types import VALUE

class Session:
	"""
	One interpreter and its resolver, fed either one whole program or a series of prompt lines.
	Globals persist from one call to the next, and so do resolution distances.
	"""
	def __init__(self, report:Report, *, stdout:Optional[TextIO]=None, stdin:Optional[TextIO]=None):
		self.report = report
		self.interpreter = Interpreter(report, stdout=stdout, stdin=stdin)
		self.resolver = Resolver(report)

	def check(self, text:str, path:Optional[Path]=None) -> Optional[Sequence[Stmt]]:
		""" Everything short of running. None means the report has something to say. """
		try:
			statements = parse_text(text, self.report, path)
			if self.report.sick(): return None
			self.report.info("Parsed %d top-level statement(s)." % len(statements))
			distances = self.resolver.resolve(statements)
		except RecursionError:
			# Nesting too deep for the recursive-descent parser or the resolver.
			self.report.stack_exhausted(None)
			return None
		if self.report.sick(): return None
		self.report.info("Resolved %d local reference(s) so far." % len(distances))
		self.interpreter.resolve(distances)
		return statements

	def run(self, text:str, path:Optional[Path]=None) -> VALUE:
		statements = self.check(text, path)
		if statements is None: return None
		return self.interpreter.interpret(statements)

	def run_line(self, text:str) -> Optional[str]:
		""" For the prompt: Run the line, and say what to echo, if anything. """
		statements = self.check(text)
		if not statements: return None
		result = self.interpreter.interpret(statements)
		if isinstance(statements[-1], syntax.Expression) and not self.report.crashed():
			return stringify(result)

def run_program(path:Path, report:Report, **streams) -> VALUE:
	text = path.read_text(encoding="utf-8")
	return Session(report, **streams).run(text, path)
