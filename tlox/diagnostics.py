import sys, random
from typing import Optional
from boozetools.support.failureprone import illustration

from .location import lookup_span
from .ontology import Phrase, Token

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]

	minced_oaths = [
		'Ack', 'Blargh', 'Confound it', 'Crud', 'Curses', 'Drat',
		'Fiddlesticks', 'Good Grief', 'Great Scott', 'Heavens',
		'Jeepers', 'Nuts', 'Rats', 'Shucks',
	]

	resignations = [
		'I cannot continue.',
		'Something is amiss.',
		'This program will not run as written.',
		'Please have a look.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

def _where(token:Token) -> str:
	if token.kind == "EOF": return " at end"
	return " at '%s'"%token.text

class Report:
	"""
	Collects the issues found by the scanner, parser, and resolver,
	and also the one runtime error that may stop a running program.
	Static issues block execution; the runtime error only explains why it stopped.
	"""
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=10):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._failure = None
		self._max_issues = max_issues

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)
	def crashed(self): return self._failure is not None

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def intros(self) -> list[str]:
		""" Mainly for the test suite: The headline of each issue so far. """
		pics = list(self._issues)
		if self._failure is not None: pics.append(self._failure)
		return [p.intro for p in pics]

	def reset(self):
		""" The prompt does this after each line, so one typo doesn't poison the session. """
		self._issues.clear()
		self._failure = None

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		if self._failure is None: _bemoan(self._issues)
		else: _bemoan(self._issues + [self._failure])

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	def _at(self, token:Token, message:str, caption:str=""):
		intro = "[line %d] Error%s: %s" % (token.line, _where(token), message)
		self.issue(Pic(intro, [Annotation(token, caption)]))

	# Methods the scanner calls:
	def unexpected_character(self, token:Token):
		intro = "[line %d] Error: Unexpected character %r." % (token.line, token.text)
		self.issue(Pic(intro, [Annotation(token)]))

	def unterminated_string(self, token:Token):
		intro = "[line %d] Error: Unterminated string." % token.line
		self.issue(Pic(intro, [Annotation(token, "This string never ends.")]))

	# Methods the parser calls:
	def parse_error(self, token:Token, message:str):
		self._at(token, message, "got confused here")

	# Methods the resolver calls:
	def redefined(self, token:Token):
		self._at(token, "Already a variable with this name in this scope.")

	def read_in_own_initializer(self, token:Token):
		self._at(token, "Can't read local variable in its own initializer.")

	def inherits_from_itself(self, token:Token):
		self._at(token, "A class can't inherit from itself.")

	def return_from_top_level(self, keyword:Token):
		self._at(keyword, "Can't return from top-level code.")

	def return_value_from_initializer(self, keyword:Token):
		self._at(keyword, "Can't return a value from an initializer.")

	def this_outside_class(self, keyword:Token):
		self._at(keyword, "Can't use 'this' outside of a class.")

	def super_outside_class(self, keyword:Token):
		self._at(keyword, "Can't use 'super' outside of a class.")

	def super_without_superclass(self, keyword:Token):
		self._at(keyword, "Can't use 'super' in a class with no superclass.")

	def jump_outside_loop(self, keyword:Token):
		self._at(keyword, "Can't use '%s' outside of a loop." % keyword.text)

	# Methods the interpreter's top level calls:
	def runtime_error(self, token:Token, message:str):
		"""
		Only the first runtime error matters, since it stops the program.
		It's kept apart from the static issues so that the driver can tell them apart.
		"""
		if self._failure is None:
			problem = [Annotation(token, "while evaluating this")]
			self._failure = Pic(message, problem, ["[line %d]" % token.line])

	def stack_exhausted(self, where:Optional[Phrase]):
		if self._failure is None:
			problem = [Annotation(where)] if where is not None else []
			self._failure = Pic("Stack overflow.", problem, ["The program recursed too deeply."])

class Annotation:
	caption: str
	def __init__(self, node:Phrase, caption:str=""):
		span = lookup_span(*node.span())
		self.path = span.path
		self.source = span.source
		self.slice = span.slice
		self.caption = caption
	def illustrate(self):
		row, col = self.source.find_row_col(self.slice.start)
		single_line = self.source.line_of_text(row)
		width = self.slice.stop - self.slice.start
		return illustration(single_line, col, width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self.intro, self._anns, self._footer = intro, anns, footer
	def as_text(self):
		lines = [self.intro, ""]
		path = None
		for ann in self._anns:
			if ann.path != path:
				path = ann.path
				if path is not None: lines.append(str(path))
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
