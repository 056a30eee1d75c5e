from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional
import re

from plume.errors import ErrorVal, PlumeError
from plume.types import NIL


ARG_NAME = re.compile(r'ARG_[0-9]+')


class Environment:
    """A scope frame mapping identifiers to values, linked to its enclosing scope.

    The root frame (no parent) is the global scope. Block scopes are
    children of the frame they are entered from and are only reachable
    through `scope()`, so they disappear once the block finishes.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        self.values[name] = value

    def get(self, name: str, line: Optional[int] = None) -> Any:
        env = self
        while env is not None:
            if name in env.values:
                return env.values[name]
            env = env.parent
        # arguments the driver did not supply read as nil
        if ARG_NAME.fullmatch(name):
            return NIL
        raise PlumeError(ErrorVal('NameError', f'undefined variable {name}', line))

    def owner(self, name: str) -> Optional['Environment']:
        env = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def assign(self, name: str, value: Any):
        # Mutate the nearest scope that already binds the name, otherwise bind it here.
        target = self.owner(name)
        if target is None:
            target = self
        target.values[name] = value

    @contextmanager
    def scope(self) -> Iterator['Environment']:
        child = Environment(parent=self)
        try:
            yield child
        finally:
            child.values.clear()

    def names(self) -> Dict[str, Any]:
        """Return every visible binding, inner scopes shadowing outer ones."""
        chain = []
        env = self
        while env is not None:
            chain.append(env)
            env = env.parent
        visible: Dict[str, Any] = {}
        for env in reversed(chain):
            visible.update(env.values)
        return visible
