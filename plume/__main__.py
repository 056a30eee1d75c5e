"""CLI entry point for the Plume interpreter.

Usage:
    python -m plume [-v|-vv|-vvv] [program_file [args ...]]
    python -m plume [-v...] --emit-ast <program_file>
    python -m plume [-v...] --ast <ast_json_file> [args ...]

Options:
  -v            Increase debug verbosity (can be repeated)
  --debug-file  Where debug information is written (default: debug.txt)
  --emit-ast    Parse the given .plume file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file the interactive REPL is started. The program is
run against a global environment holding ``VERSION`` and one ``ARG_<n>``
binding per argument, ``ARG_0`` being the program path itself. Any lex,
parse or runtime error is reported on stderr and exits with status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .errors import PlumeError
from .interpreter import Interpreter, make_global_env
from .parser import parse_program
from .repl import Repl


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='plume', description="Plume language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file receiving debug output when -v is given')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PLUME_FILE', help='emit AST JSON for the given .plume file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Plume program file (.plume) to execute; omit to start the REPL')
    parser.add_argument('args', nargs=argparse.REMAINDER, help='arguments bound to ARG_1, ARG_2, ...')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        if args.program:
            parser.error('--emit-ast does not take a program argument')
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        try:
            ast_program = parse_program(source)
        except PlumeError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    interpreter = Interpreter(debug_level=args.v, debug_file=args.debug_file)
    try:
        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            try:
                ast_program = ast_from_obj(json.loads(read_source(ast_path)))
                if not isinstance(ast_program, Program):
                    raise TypeError("top-level node is not a Program")
            except (ValueError, KeyError, TypeError, RecursionError) as e:
                print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
                sys.exit(1)
            script_args = ([args.program] if args.program else []) + args.args
            env = make_global_env([str(ast_path)] + script_args)
            try:
                interpreter.run(ast_program, env)
            except PlumeError as e:
                print(str(e), file=sys.stderr)
                sys.exit(1)
            except NotImplementedError as e:
                print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
                sys.exit(1)
            return

        # No program: interactive mode
        if not args.program:
            env = make_global_env([parser.prog])
            Repl(interpreter, env).cmdloop()
            return

        # Default: execute source file
        program_file = Path(args.program)
        source = read_source(program_file)
        env = make_global_env([args.program] + args.args)
        try:
            interpreter.run_source(source, env)
        except PlumeError as e:
            print(str(e), file=sys.stderr)
            sys.exit(1)
    finally:
        interpreter.close()


if __name__ == '__main__':
    main()
