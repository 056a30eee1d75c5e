"""JSON serialization/deserialization for Plume AST.

This module converts between Plume AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It backs the
``--emit-ast`` and ``--ast`` command-line modes and supports a full
round-trip for every node type, including the `nil` literal.
"""

from __future__ import annotations

from typing import Any

from .ast import (
    Program,
    ExprStmt,
    Assign,
    PrintStmt,
    Block,
    IfStmt,
    Literal,
    Variable,
    BinaryOp,
    UnaryOp,
    Grouping,
)
from .types import NIL, NilVal


def value_to_obj(value: Any) -> Any:
    if isinstance(value, NilVal):
        return {"__type__": "Nil"}
    return value


def value_from_obj(obj: Any) -> Any:
    if isinstance(obj, dict) and obj.get("__type__") == "Nil":
        return NIL
    if isinstance(obj, int) and not isinstance(obj, bool):
        # numbers are always floats at runtime
        return float(obj)
    return obj


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None
    if isinstance(node, Program):
        return {"type": "Program", "body": [ast_to_obj(n) for n in node.body]}
    if isinstance(node, ExprStmt):
        return {"type": "ExprStmt", "line": node.line, "expr": ast_to_obj(node.expr)}
    if isinstance(node, Assign):
        return {"type": "Assign", "line": node.line, "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, PrintStmt):
        return {"type": "PrintStmt", "line": node.line, "expr": ast_to_obj(node.expr)}
    if isinstance(node, Block):
        return {"type": "Block", "line": node.line, "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, IfStmt):
        return {
            "type": "IfStmt",
            "line": node.line,
            "condition": ast_to_obj(node.condition),
            "then_branch": ast_to_obj(node.then_branch),
            "else_branch": ast_to_obj(node.else_branch),
        }
    if isinstance(node, Literal):
        return {"type": "Literal", "line": node.line, "value": value_to_obj(node.value)}
    if isinstance(node, Variable):
        return {"type": "Variable", "line": node.line, "name": node.name}
    if isinstance(node, BinaryOp):
        return {
            "type": "BinaryOp",
            "line": node.line,
            "op": node.op,
            "left": ast_to_obj(node.left),
            "right": ast_to_obj(node.right),
        }
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "line": node.line, "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, Grouping):
        return {"type": "Grouping", "line": node.line, "expr": ast_to_obj(node.expr)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    line = obj.get("line", 0)
    if t == "Program":
        return Program(body=[ast_from_obj(n) for n in obj["body"]], line=1)
    if t == "ExprStmt":
        return ExprStmt(expr=ast_from_obj(obj["expr"]), line=line)
    if t == "Assign":
        return Assign(name=obj["name"], value=ast_from_obj(obj["value"]), line=line)
    if t == "PrintStmt":
        return PrintStmt(expr=ast_from_obj(obj["expr"]), line=line)
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]], line=line)
    if t == "IfStmt":
        return IfStmt(
            condition=ast_from_obj(obj["condition"]),
            then_branch=ast_from_obj(obj["then_branch"]),
            else_branch=ast_from_obj(obj.get("else_branch")),
            line=line,
        )
    if t == "Literal":
        return Literal(value=value_from_obj(obj["value"]), line=line)
    if t == "Variable":
        return Variable(name=obj["name"], line=line)
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]), line=line)
    if t == "UnaryOp":
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]), line=line)
    if t == "Grouping":
        return Grouping(expr=ast_from_obj(obj["expr"]), line=line)

    raise ValueError(f"Unknown AST node type: {t}")
