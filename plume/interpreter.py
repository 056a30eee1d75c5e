"""Tree-walking interpreter for the Plume language.

The interpreter executes the `Program` produced by `plume.parser` against
an `Environment`. Statements are run with `Interpreter.execute` and
expressions are computed with `Interpreter.evaluate`; both dispatch on
the node class. Runtime failures are raised as `PlumeError` carrying a
`TypeError`, `NameError` or `RuntimeError` description and are never
caught here: they abort the current program (or REPL input) and surface
in the driver.
"""

from __future__ import annotations

import math
from typing import Any, List, Optional, Sequence, TextIO

from . import __version__
from .ast import (
    Program, ExprStmt, Assign, PrintStmt, Block, IfStmt,
    Literal, Variable, BinaryOp, UnaryOp, Grouping, Node,
)
from .environment import Environment
from .errors import ErrorVal, PlumeError
from .parser import parse_program
from .types import NilVal, is_number, to_repr, to_string, type_name


# Longest string a single repetition may produce.
MAX_STRING_LENGTH = 100_000_000


def make_global_env(argv: Sequence[str] = (), version: str = __version__) -> Environment:
    """Create the global scope seeded with ``VERSION`` and ``ARG_0``, ``ARG_1``, ..."""
    env = Environment()
    env.define('VERSION', version)
    for index, arg in enumerate(argv):
        env.define(f'ARG_{index}', str(arg))
    return env


class Interpreter:
    """Core interpreter that executes Plume AST."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt', out: Optional[TextIO] = None):
        self.global_env = make_global_env()
        self.out = out
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Execute every top-level statement in order.

        Returns the value of the last statement when it is an expression
        statement (this is what the REPL echoes), otherwise ``None``.
        """
        if env is None:
            env = self.global_env
        self.debug(f"run program with {len(program.body)} statements")
        result = None
        for stmt in program.body:
            if self.debug_level >= 1:
                self.debug(f"line {stmt.line}: {type(stmt).__name__}")
            try:
                result = self.execute(stmt, env)
            except RecursionError:
                raise PlumeError(ErrorVal('RuntimeError', 'expression nested too deeply', stmt.line)) from None
        self.debug("program finished")
        return result

    def run_source(self, source: str, env: Optional[Environment] = None) -> Any:
        """Lex, parse and run `source`; shared by script execution and the REPL."""
        program = parse_program(source)
        return self.run(program, env)

    def execute_block(self, statements: List[Node], env: Environment):
        for stmt in statements:
            self.execute(stmt, env)

    def execute(self, node: Node, env: Environment) -> Any:
        if isinstance(node, PrintStmt):
            value = self.evaluate(node.expr, env)
            text = to_string(value)
            if self.debug_level >= 2:
                self.debug(f"print {to_repr(value)}")
            print(text, file=self.out)
            return None
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name}: {type_name(value)} = {to_repr(value)}")
            return None
        if isinstance(node, Block):
            if self.debug_level >= 3:
                self.debug(f"enter scope at line {node.line}")
            with env.scope() as block_env:
                self.execute_block(node.statements, block_env)
            if self.debug_level >= 3:
                self.debug(f"leave scope at line {node.line}")
            return None
        if isinstance(node, IfStmt):
            cond = self.evaluate(node.condition, env)
            truthy = self.is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_repr(cond)} -> {truthy}")
            if truthy:
                self.execute(node.then_branch, env)
            elif node.else_branch is not None:
                self.execute(node.else_branch, env)
            return None
        if isinstance(node, ExprStmt):
            return self.evaluate(node.expr, env)
        # catch any other nodes
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Variable):
            return env.get(node.name, node.line)
        if isinstance(node, Grouping):
            return self.evaluate(node.expr, env)
        if isinstance(node, UnaryOp):
            operand = self.evaluate(node.operand, env)
            return self.apply_unary_op(node.op, operand, node.line)
        if isinstance(node, BinaryOp):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.op, left, right, node.line)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def is_truthy(self, value: Any) -> bool:
        # Only nil and false are falsy; 0 and "" count as true.
        if isinstance(value, bool):
            return value
        if isinstance(value, NilVal):
            return False
        return True

    def equal_values(self, a: Any, b: Any) -> bool:
        # Values of different kinds are never equal (so 1 == true is false).
        if type_name(a) != type_name(b):
            return False
        if isinstance(a, NilVal):
            return True
        return a == b

    def apply_unary_op(self, op: str, operand: Any, line: int) -> Any:
        if op == '!':
            return not self.is_truthy(operand)
        if op in ('-', '+'):
            if not is_number(operand):
                raise PlumeError(ErrorVal('TypeError', f'unary {op} requires a Number, got {type_name(operand)}', line))
            return -operand if op == '-' else operand
        raise PlumeError(ErrorVal('TypeError', f'unknown unary operator {op}', line))

    def apply_binary_op(self, op: str, a: Any, b: Any, line: int) -> Any:
        if op == '+':
            # If either operand is a string, perform concatenation
            if isinstance(a, str) or isinstance(b, str):
                return to_string(a) + to_string(b)
            if is_number(a) and is_number(b):
                return a + b
            raise PlumeError(ErrorVal('TypeError', f'unsupported + for {type_name(a)} and {type_name(b)}', line))
        if op == '*':
            if isinstance(a, str) and is_number(b):
                return self.repeat_string(a, b, line)
            if is_number(a) and isinstance(b, str):
                return self.repeat_string(b, a, line)
            if is_number(a) and is_number(b):
                return a * b
            raise PlumeError(ErrorVal('TypeError', f'unsupported * for {type_name(a)} and {type_name(b)}', line))
        if op == '-':
            if is_number(a) and is_number(b):
                return a - b
            raise PlumeError(ErrorVal('TypeError', f'unsupported - for {type_name(a)} and {type_name(b)}', line))
        if op == '/':
            if is_number(a) and is_number(b):
                if b == 0.0:
                    raise PlumeError(ErrorVal('RuntimeError', 'division by zero', line))
                return a / b
            raise PlumeError(ErrorVal('TypeError', f'unsupported / for {type_name(a)} and {type_name(b)}', line))
        if op in ('==', '!='):
            eq = self.equal_values(a, b)
            return eq if op == '==' else not eq
        if op in ('<', '>', '<=', '>='):
            if is_number(a) and is_number(b):
                if op == '<': return a < b
                if op == '>': return a > b
                if op == '<=': return a <= b
                return a >= b
            raise PlumeError(ErrorVal('TypeError', f'comparison {op} not supported for {type_name(a)} and {type_name(b)}', line))
        raise PlumeError(ErrorVal('TypeError', f'unknown operator {op}', line))

    def repeat_string(self, text: str, count: float, line: int) -> str:
        # fractional counts truncate toward zero; non-positive counts give ""
        if math.isnan(count) or count <= 0:
            return ''
        if not text:
            return ''
        if math.isinf(count) or len(text) * count > MAX_STRING_LENGTH:
            raise PlumeError(ErrorVal('RuntimeError', f'string repetition longer than {MAX_STRING_LENGTH} characters', line))
        return text * int(count)


def run_program(source: str, argv: Sequence[str] = (), debug_level: int = 0) -> Any:
    """Convenience function to parse and run a Plume program from source string."""
    interpreter = Interpreter(debug_level=debug_level)
    env = make_global_env(argv)
    try:
        return interpreter.run_source(source, env)
    finally:
        interpreter.close()
