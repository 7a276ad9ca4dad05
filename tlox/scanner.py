"""
Source text in, tokens out.

The lexical rules are a booze-tools miniscan definition, built once per process.
Block comments get a scan-condition of their own, and nest by pushing it again.

Every token gets registered with the location index as it is made,
so that any later pass can point back at the exact text of a phrase.
Scanning problems go to the report, and the scanner carries on regardless:
the parser may yet find more to complain about in the same run.
"""
import sys
from pathlib import Path
from typing import Optional
from boozetools.scanning import miniscan
from boozetools.scanning.engine import IterableScanner
from boozetools.scanning.interface import INITIAL
from . import location
from .diagnostics import Report
from .ontology import Token

RESERVED = frozenset("""
	and class else false for fun if nil or print return
	super this true var while break continue div
""".split())

LEX = miniscan.Definition("Lox")
_main = LEX.condition(INITIAL)
_comment = LEX.condition("comment")

class LoxScanner(IterableScanner):
	"""
	The scan-actions below receive one of these as `yy`.
	It knows the current line, and how to turn the current match into a Token.
	"""
	def __init__(self, text:str, report:Report, path:Optional[Path]=None):
		super().__init__(text, LEX.get_dfa(), LEX)
		self.text = text
		self.report = report
		self.line = 1
		location.start_segment(path, text)

	def make(self, kind:str, literal=None, line:int=None, at:slice=None) -> Token:
		at = self.slice() if at is None else at
		spot = location.insert_token(at)
		return Token(kind, self.text[at], literal, line or self.line, spot)

	def emit(self, kind:str, literal=None, line:int=None):
		self.token(kind, self.make(kind, literal, line))

	def scan_tokens(self) -> list[Token]:
		tokens = [token for kind, token in self]
		end = len(self.text)
		tokens.append(self.make("EOF", at=slice(end, end)))
		return tokens

_main.ignore(r"[\ \t\r]+")

@_main.on(r"\n")
def scan_newline(yy:LoxScanner): yy.line += 1

_main.ignore(r"\/\/[^\n]*")

@_main.on(r"[\(\)\{\}\,\.\-\+\;\*\%\?\:\/]|[\!\=\<\>]\=?")
def scan_punctuation(yy:LoxScanner):
	yy.emit(sys.intern(yy.match()))

@_main.on(r"\d+(\.\d+)?")
def scan_number(yy:LoxScanner): yy.emit("NUMBER", float(yy.match()))

@_main.on(r"[\l_]\w*")
def scan_word(yy:LoxScanner):
	word = sys.intern(yy.match())
	yy.emit(word.upper() if word in RESERVED else "IDENTIFIER")

@_main.on(r'"[^"]*"')
def scan_string(yy:LoxScanner):
	text = yy.match()
	yy.emit("STRING", text[1:-1])
	yy.line += text.count("\n")

@_main.on(r'"[^"]*')
def scan_unterminated_string(yy:LoxScanner):
	""" Only wins when there is no closing quote anywhere after. """
	yy.report.unterminated_string(yy.make("ERROR"))
	yy.line += yy.match().count("\n")

@_main.on(r"{ANY}")
def scan_stray(yy:LoxScanner):
	yy.report.unexpected_character(yy.make("ERROR"))

# Block comments nest: each opener pushes the comment condition once more.

@_main.on(r"\/\*")
def scan_open_comment(yy:LoxScanner): yy.push("comment")

@_comment.on(r"\/\*")
def scan_nested_comment(yy:LoxScanner): yy.push("comment")

@_comment.on(r"\*\/")
def scan_close_comment(yy:LoxScanner): yy.pop()

@_comment.on(r"\n")
def scan_comment_newline(yy:LoxScanner): yy.line += 1

_comment.ignore(r"{ANY}")

def scan(text:str, report:Report, path:Optional[Path]=None) -> list[Token]:
	return LoxScanner(text, report, path).scan_tokens()
