# Plume language package
# This package provides a lexer, parser and tree-walking interpreter for the Plume language.
__version__ = '0.1.0'

from .errors import PlumeError, LexError, ParseError
from .interpreter import run_program, Interpreter, make_global_env

__all__ = [
    'run_program',
    'make_global_env',
    'Interpreter',
    'PlumeError',
    'LexError',
    'ParseError',
]
