"""Interactive mode for the Plume interpreter. Uses cmd as backend."""

import cmd
import sys
from typing import Tuple

from . import __version__
from .environment import Environment
from .errors import PlumeError
from .interpreter import Interpreter
from .types import to_repr


def count_braces_delta(line: str, in_string: bool = False) -> Tuple[int, bool]:
    # Minimal brace balancer for multi-line input.
    # Ignores braces inside "..." strings and after a // comment.
    # in_string carries an open string across lines.
    delta = 0
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == '"':
            in_string = not in_string
        elif not in_string:
            if ch == '/' and line[i + 1:i + 2] == '/':
                break
            if ch == '{':
                delta += 1
            elif ch == '}':
                delta -= 1
        i += 1
    return delta, in_string


class Repl(cmd.Cmd):
    """Plume read-eval-print loop.

    Each complete input (braces balanced) goes through the full
    lex/parse/evaluate pipeline against one persistent global
    environment. Errors are reported on stderr and only abort the
    current input.
    """
    intro = f"Plume {__version__}\nType 'exit' or press Ctrl-D to quit, 'vars' to list bindings."
    prompt = "plume> "
    secondary_prompt = "...> "  # used while a block is still open
    _tmp_prompt = "plume> "
    commands = ('exit', 'vars', 'help')

    def __init__(self, interpreter: Interpreter, env: Environment, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter
        self.env = env
        self._pending = []
        self._depth = 0
        self._in_string = False

    def onecmd(self, line):
        # Shell commands are only recognised on their own line; everything else is Plume source.
        if line == 'EOF':
            return self.do_EOF('')
        if not self._pending and line.strip() in self.commands:
            return super().onecmd(line.strip())
        return self.default(line)

    def default(self, line):
        """Buffers the line and runs the input once every block is closed."""
        if not self._pending and not line.strip():
            return False
        self._pending.append(line)
        delta, self._in_string = count_braces_delta(line, self._in_string)
        self._depth += delta
        if self._depth > 0 or self._in_string:
            self.prompt = self.secondary_prompt
            return False
        source = "\n".join(self._pending) + "\n"
        self._pending = []
        self._depth = 0
        self._in_string = False
        self.prompt = self._tmp_prompt
        self.execute(source)
        return False

    def execute(self, source: str):
        try:
            result = self.interpreter.run_source(source, self.env)
        except PlumeError as e:
            print(str(e), file=sys.stderr)
            return
        if result is not None:
            print(to_repr(result), file=self.stdout)

    def do_vars(self, arg):
        """Lists every visible binding."""
        for name, value in sorted(self.env.names().items()):
            print(f"{name} = {to_repr(value)}", file=self.stdout)

    def do_help(self, arg):
        """Prints a short summary of the language."""
        print("Statements: print <expr>;  <name> = <expr>;  if <expr> <stmt> [else <stmt>]  { <stmt>* }\n"
              "Operators: + - * / == != < > <= >= and unary - !\n"
              "Literals: numbers, \"strings\", true, false, nil. Comments start with //.\n"
              "A bare expression such as '1 + 2;' echoes its value.", file=self.stdout)

    def do_EOF(self, arg):
        """Exits interpreter."""
        if self._pending:
            source = "\n".join(self._pending) + "\n"
            self._pending = []
            self._depth = 0
            self._in_string = False
            self.execute(source)
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
