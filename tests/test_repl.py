import io

from plume.interpreter import Interpreter, make_global_env
from plume.repl import Repl, count_braces_delta


def run_repl_with_input(inp):
    env = make_global_env(['plume'])
    repl = Repl(Interpreter(), env, stdin=io.StringIO(inp))
    repl.use_rawinput = False
    repl.cmdloop(intro='')
    return env


def test_echoes_expression_value(capsys):
    run_repl_with_input('1 + 2;\n')
    assert '3' in capsys.readouterr().out


def test_persistent_state(capsys):
    run_repl_with_input('x = 2;\nx + 5;\n')
    assert '7' in capsys.readouterr().out


def test_error_does_not_end_session(capsys):
    env = run_repl_with_input('x = 1;\nprint missing;\nprint x + 1;\n')
    captured = capsys.readouterr()
    assert 'NameError' in captured.err
    assert '2\n' in captured.out
    assert env.get('x') == 1.0


def test_multi_line_block(capsys):
    run_repl_with_input('if true {\n  print "inside";\n}\n')
    captured = capsys.readouterr()
    assert 'inside' in captured.out
    assert '...> ' in captured.out


def test_exit_and_vars(capsys):
    env = run_repl_with_input('answer = 42;\nvars\nexit\nprint "never";\n')
    out = capsys.readouterr().out
    assert 'answer = 42' in out
    assert 'ARG_0 = "plume"' in out
    assert 'never' not in out
    assert env.get('answer') == 42.0


def test_parse_error_is_reported(capsys):
    run_repl_with_input('print 1\n')
    assert 'ParseError' in capsys.readouterr().err


def test_count_braces_delta():
    assert count_braces_delta('{ {') == (2, False)
    assert count_braces_delta('print "{";') == (0, False)
    assert count_braces_delta('} // {') == (-1, False)
    assert count_braces_delta('print "a {') == (0, True)
    assert count_braces_delta('b } c";  {', in_string=True) == (1, False)


def test_string_spanning_lines(capsys):
    run_repl_with_input('print "a\n{b";\nprint "done";\n')
    captured = capsys.readouterr()
    assert captured.err == ''
    assert 'a\n{b\n' in captured.out
    assert 'done' in captured.out


def test_oversized_repetition_does_not_end_session(capsys):
    env = run_repl_with_input('x = 1;\n"a" * 1' + '0' * 20 + ';\nprint x;\n')
    captured = capsys.readouterr()
    assert 'RuntimeError' in captured.err
    assert '1\n' in captured.out
    assert env.get('x') == 1.0


def test_deep_nesting_does_not_end_session(capsys):
    run_repl_with_input('print ' + '(' * 3000 + '1' + ')' * 3000 + ';\nprint "after";\n')
    captured = capsys.readouterr()
    assert 'ParseError' in captured.err
    assert 'after' in captured.out
