"""Lexical scopes. Environments form chains through their enclosing links; a chain can be shared by any number of
child scopes and closures, and assignments through it are visible to all of them.
"""

from lox.lang.error import LoxRuntimeError


class Environment:
    """Maps names to values, deferring to enclosing for names it doesn't hold."""

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this scope only. Shadows, never overwrites, bindings in enclosing scopes."""
        self.values[name] = value

    def get(self, name):
        """Returns the value bound to the name of token name in the nearest scope that holds it."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name, value):
        """Rebinds the name of token name in the nearest scope that holds it. Never creates a binding."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing

        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def __repr__(self):
        return f"Environment(values={self.values!r}, enclosing={self.enclosing!r})"
