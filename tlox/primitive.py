"""
Build the primitive namespace:
the handful of native functions every program finds already defined in its globals.
Each gets the interpreter first, for access to its input stream, then the script's arguments.
"""
import re
import time
from .environment import Environment
from .tree_walker.values import NativeFunction

# Like JavaScript's parseFloat: take the longest numeric prefix and ignore the rest.
_NUMERIC_PREFIX = re.compile(r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")

def clock(interpreter) -> float:
	""" Whole microseconds on a monotonic clock. """
	return float(time.perf_counter_ns() // 1000)

def read_line(interpreter):
	line = interpreter.stdin.readline()
	if not line: return None
	return line.rstrip("\r\n")

def parse_num(interpreter, text):
	if not isinstance(text, str): return None
	match = _NUMERIC_PREFIX.match(text)
	if match is None: return None
	return float(match.group(1))

NATIVES = [
	NativeFunction("clock", 0, clock),
	NativeFunction("read_line", 0, read_line),
	NativeFunction("parse_num", 1, parse_num),
]

def install_natives(env:Environment):
	for native in NATIVES:
		env.define(native.name, native)
