"""Recursive-descent parser for the Plume language.

The parser consumes the token stream produced by `plume.lexer.tokenize`
and builds a `Program` AST. Each precedence level has its own method and
descends into the next-tighter level for its operands:

    statement -> expression -> equality -> comparison -> term
              -> factor -> unary -> primary

Assignment is only recognised at statement level (``name = expr;``), so
it is never nested inside an expression. The first structural error
raises `ParseError`; there is no error recovery.
"""

from __future__ import annotations

from typing import Iterable, List, Union

from .ast import (
    Program, ExprStmt, Assign, PrintStmt, Block, IfStmt,
    Literal, Variable, BinaryOp, UnaryOp, Grouping, Node,
)
from .errors import ParseError
from .lexer import Token, tokenize
from .types import NIL


# Spelling of each fixed token, used in error messages.
TOKEN_TEXT = {
    'EQEQ': '==', 'BANGEQ': '!=', 'LTEQ': '<=', 'GTEQ': '>=',
    'PLUS': '+', 'MINUS': '-', 'STAR': '*', 'SLASH': '/',
    'EQ': '=', 'LT': '<', 'GT': '>', 'BANG': '!',
    'LBRACE': '{', 'RBRACE': '}', 'LPAR': '(', 'RPAR': ')', 'SEMI': ';',
    'IF': 'if', 'ELSE': 'else', 'PRINT': 'print',
    'NIL': 'nil', 'TRUE': 'true', 'FALSE': 'false',
    'NAME': 'identifier', 'NUMBER': 'number', 'STRING': 'string',
    'EOF': 'end of input',
}


def describe(token: Token) -> str:
    if token.type == 'EOF':
        return 'end of input'
    if token.type == 'STRING':
        return f'"{token.value}"'
    if token.type == 'NUMBER':
        return f"number {token.value!r}"
    return f"'{token.value}'"


class Parser:
    def __init__(self, tokens: Iterable[Token]):
        self.tokens: List[Token] = list(tokens)
        if not self.tokens or self.tokens[-1].type != 'EOF':
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token('EOF', None, line, 0))
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.peek()
        if token.type != 'EOF':
            self.pos += 1
        return token

    def match(self, expected: Union[str, List[str]]) -> bool:
        token = self.peek()
        if isinstance(expected, list):
            return token.type in expected
        return token.type == expected

    def consume(self, expected: str, context: str = '') -> Token:
        token = self.peek()
        if token.type != expected:
            where = f" {context}" if context else ''
            raise ParseError(
                f"expected '{TOKEN_TEXT.get(expected, expected)}'{where}, found {describe(token)}",
                token.line,
            )
        return self.advance()

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while not self.match('EOF'):
            if self.match('SEMI'):
                self.advance()
                continue
            line = self.peek().line
            try:
                statements.append(self.parse_statement())
            except RecursionError:
                raise ParseError('expression nested too deeply', line) from None
        return Program(statements, line=1)

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.type == 'PRINT':
            return self.parse_print_stmt()
        if token.type == 'IF':
            return self.parse_if_stmt()
        if token.type == 'LBRACE':
            return self.parse_block()
        if token.type == 'NAME' and self.peek(1).type == 'EQ':
            return self.parse_assignment()
        if token.type == 'EOF':
            raise ParseError('expected a statement, found end of input', token.line)
        expr = self.parse_expression()
        self.consume('SEMI', 'after expression')
        return ExprStmt(expr, line=token.line)

    def parse_print_stmt(self) -> PrintStmt:
        keyword = self.consume('PRINT')
        expr = self.parse_expression()
        self.consume('SEMI', 'after print value')
        return PrintStmt(expr, line=keyword.line)

    def parse_assignment(self) -> Assign:
        name_token = self.consume('NAME')
        self.consume('EQ')
        value = self.parse_expression()
        self.consume('SEMI', 'after assignment')
        return Assign(name_token.value, value, line=name_token.line)

    def parse_block(self) -> Block:
        brace = self.consume('LBRACE')
        statements: List[Node] = []
        while not self.match(['RBRACE', 'EOF']):
            if self.match('SEMI'):
                self.advance()
                continue
            statements.append(self.parse_statement())
        self.consume('RBRACE', 'to close block')
        return Block(statements, line=brace.line)

    def parse_if_stmt(self) -> IfStmt:
        keyword = self.consume('IF')
        condition = self.parse_expression()
        then_branch = self.parse_statement()
        else_branch = None
        if self.match('ELSE'):
            self.advance()
            else_branch = self.parse_statement()
        return IfStmt(condition, then_branch, else_branch, line=keyword.line)

    # Expression parsing, one method per precedence level

    def parse_expression(self) -> Node:
        return self.parse_equality()

    def parse_equality(self) -> Node:
        node = self.parse_comparison()
        while self.match(['EQEQ', 'BANGEQ']):
            op_token = self.advance()
            right = self.parse_comparison()
            node = BinaryOp(op_token.value, node, right, line=op_token.line)
        return node

    def parse_comparison(self) -> Node:
        node = self.parse_term()
        while self.match(['LT', 'GT', 'LTEQ', 'GTEQ']):
            op_token = self.advance()
            right = self.parse_term()
            node = BinaryOp(op_token.value, node, right, line=op_token.line)
        return node

    def parse_term(self) -> Node:
        node = self.parse_factor()
        while self.match(['PLUS', 'MINUS']):
            op_token = self.advance()
            right = self.parse_factor()
            node = BinaryOp(op_token.value, node, right, line=op_token.line)
        return node

    def parse_factor(self) -> Node:
        node = self.parse_unary()
        while self.match(['STAR', 'SLASH']):
            op_token = self.advance()
            right = self.parse_unary()
            node = BinaryOp(op_token.value, node, right, line=op_token.line)
        return node

    def parse_unary(self) -> Node:
        if self.match(['BANG', 'MINUS', 'PLUS']):
            op_token = self.advance()
            operand = self.parse_unary()
            return UnaryOp(op_token.value, operand, line=op_token.line)
        return self.parse_primary()

    def parse_primary(self) -> Node:
        token = self.peek()
        if token.type == 'NUMBER' or token.type == 'STRING':
            self.advance()
            return Literal(token.value, line=token.line)
        if token.type == 'TRUE':
            self.advance()
            return Literal(True, line=token.line)
        if token.type == 'FALSE':
            self.advance()
            return Literal(False, line=token.line)
        if token.type == 'NIL':
            self.advance()
            return Literal(NIL, line=token.line)
        if token.type == 'NAME':
            self.advance()
            return Variable(token.value, line=token.line)
        if token.type == 'LPAR':
            self.advance()
            expr = self.parse_expression()
            self.consume('RPAR', 'after expression')
            return Grouping(expr, line=token.line)
        raise ParseError(f"expected an expression, found {describe(token)}", token.line)


def parse_program(source: str) -> Program:
    """Parse the given source code into a Program AST."""
    parser = Parser(tokenize(source))
    return parser.parse_program()
