"""
A tree-walking interpreter for Lox: closures, classes, single inheritance.
"""
