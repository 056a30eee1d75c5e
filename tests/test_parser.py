import pytest

from plume.ast import (
    Assign, BinaryOp, Block, ExprStmt, Grouping, IfStmt, Literal, PrintStmt, UnaryOp, Variable,
)
from plume.errors import ParseError
from plume.parser import parse_program
from plume.types import NIL


def parse_expr(source):
    program = parse_program(source + ';')
    assert isinstance(program.body[0], ExprStmt)
    return program.body[0].expr


def test_literals():
    assert parse_expr('true') == Literal(True)
    assert parse_expr('nil') == Literal(NIL)
    assert parse_expr('"hi"') == Literal('hi')
    assert parse_expr('4.5') == Literal(4.5)


def test_grouping():
    assert parse_expr('(true)') == Grouping(Literal(True))


def test_not_negative_number():
    assert parse_expr('!-99') == UnaryOp('!', UnaryOp('-', Literal(99.0)))


def test_precedence():
    expr = parse_expr('123 * 2 - 456 < 42 + 99')
    assert expr == BinaryOp(
        '<',
        BinaryOp('-', BinaryOp('*', Literal(123.0), Literal(2.0)), Literal(456.0)),
        BinaryOp('+', Literal(42.0), Literal(99.0)),
    )


def test_left_associative():
    assert parse_expr('1 - 2 - 3') == BinaryOp('-', BinaryOp('-', Literal(1.0), Literal(2.0)), Literal(3.0))
    assert parse_expr('a == b != c') == BinaryOp('!=', BinaryOp('==', Variable('a'), Variable('b')), Variable('c'))


def test_statements():
    program = parse_program('x = 1; print x; { y = 2; }')
    assert program.body == [
        Assign('x', Literal(1.0)),
        PrintStmt(Variable('x')),
        Block([Assign('y', Literal(2.0))]),
    ]


def test_dangling_if_chain():
    program = parse_program('if a if b print "x"; else print "y";')
    outer = program.body[0]
    assert isinstance(outer, IfStmt)
    assert outer.else_branch is None
    inner = outer.then_branch
    assert isinstance(inner, IfStmt)
    # else binds to the nearest if
    assert inner.else_branch == PrintStmt(Literal('y'))


def test_if_with_parenthesised_condition_and_block():
    program = parse_program('if (a > 1) { print a; } else { print 0; }')
    stmt = program.body[0]
    assert stmt.condition == Grouping(BinaryOp('>', Variable('a'), Literal(1.0)))
    assert isinstance(stmt.then_branch, Block)
    assert isinstance(stmt.else_branch, Block)


def test_nodes_record_lines():
    program = parse_program('x = 1;\n\nprint\n  x;')
    assert program.body[0].line == 1
    assert program.body[1].line == 3
    assert program.body[1].expr.line == 4


def test_missing_semicolon():
    with pytest.raises(ParseError) as excinfo:
        parse_program('print 1\nprint 2;')
    assert excinfo.value.line == 2
    assert "expected ';'" in str(excinfo.value)
    assert "'print'" in str(excinfo.value)


def test_assignment_is_not_an_expression():
    with pytest.raises(ParseError):
        parse_program('a = b = 1;')
    with pytest.raises(ParseError):
        parse_program('print (a = 1);')


def test_unclosed_block():
    with pytest.raises(ParseError) as excinfo:
        parse_program('{ print 1;')
    assert 'end of input' in str(excinfo.value)


def test_missing_expression():
    with pytest.raises(ParseError) as excinfo:
        parse_program('print ;')
    assert 'expected an expression' in str(excinfo.value)


def test_empty_statements_are_skipped():
    assert parse_program(';; print 1;;').body == [PrintStmt(Literal(1.0))]
    assert parse_program('').body == []


def test_deeply_nested_expression():
    source = 'x = 1;\nprint ' + '(' * 3000 + '1' + ')' * 3000 + ';'
    with pytest.raises(ParseError) as excinfo:
        parse_program(source)
    assert excinfo.value.line == 2
    assert 'nested too deeply' in str(excinfo.value)
