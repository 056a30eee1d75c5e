"""Abstract Syntax Tree (AST) definitions for the Plume language.

The AST classes defined in this module represent the syntactic structure
of parsed Plume programs. Nodes are frozen once the parser builds them,
and each one records the source line it started on so that runtime
errors can point back at the program text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    line: int = field(default=0, kw_only=True, compare=False)


@dataclass(frozen=True)
class Program(Node):
    body: List[Node]


# Statements

@dataclass(frozen=True)
class ExprStmt(Node):
    expr: Node


@dataclass(frozen=True)
class Assign(Node):
    name: str
    value: Node


@dataclass(frozen=True)
class PrintStmt(Node):
    expr: Node


@dataclass(frozen=True)
class Block(Node):
    statements: List[Node]


@dataclass(frozen=True)
class IfStmt(Node):
    condition: Node
    then_branch: Node  # a single statement; may itself be a Block or an IfStmt
    else_branch: Optional[Node]


# Expressions

@dataclass(frozen=True)
class Literal(Node):
    value: Any  # float, str, bool or NIL


@dataclass(frozen=True)
class Variable(Node):
    name: str


@dataclass(frozen=True)
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass(frozen=True)
class Grouping(Node):
    expr: Node
