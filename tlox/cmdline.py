"""
This is an interpreter for the Lox scripting language.

{0}

For example:

    tlox program.lox

will run program.lox if possible, or else try to explain why not.

    tlox

with no program starts an interactive prompt. End it with Ctrl-D.

    tlox -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

# Exit codes in the manner of BSD sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

parser = argparse.ArgumentParser(
	prog="tlox",
	description="Tree-walking interpreter for the Lox scripting language.",
)
parser.add_argument("program", nargs="?", help="Script to run. Leave it off for the interactive prompt.")
parser.add_argument('-c', "--check", action="count", help="Check the program (more c's for more chatter) but do not actually execute it.")
parser.add_argument('-m', "--max-issues", type=int, default=10, help="Give up after this many static errors.")

def run(args) -> int:
	from .diagnostics import Report, TooManyIssues
	from .tree_walker.executive import Session
	report = Report(verbose=args.check, max_issues=args.max_issues)
	session = Session(report)
	if args.program is None:
		return prompt(session)
	path = Path.cwd() / args.program
	try: text = path.read_text(encoding="utf-8")
	except OSError as ex:
		print("Cannot read %s: %s" % (path, ex.strerror), file=sys.stderr)
		return EX_NOINPUT
	try:
		if args.check:
			session.check(text, path)
		else:
			session.run(text, path)
	except TooManyIssues:
		report.complain_to_console()
		print(" *"*35, file=sys.stderr)
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return EX_DATAERR
	if report.sick():
		report.complain_to_console()
		return EX_DATAERR
	if report.crashed():
		report.complain_to_console()
		return EX_SOFTWARE
	if args.check:
		print("Looks plausible to me.", file=sys.stderr)
	return EX_OK

def prompt(session) -> int:
	""" Each line is a little program. Static errors in one line do not spoil the next. """
	from .diagnostics import TooManyIssues
	report = session.report
	while True:
		try: line = input("> ")
		except EOFError:
			print()
			return EX_OK
		try:
			echo = session.run_line(line)
		except TooManyIssues:
			echo = None
		if echo is not None:
			print(echo)
		report.complain_to_console()
		report.reset()

def main():
	args = parser.parse_args()
	if args.check and args.program is None:
		print(__doc__.strip().format(parser.format_usage()))
		exit(EX_USAGE)
	exit(run(args))
