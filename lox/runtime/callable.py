"""Callable Lox values: functions declared in Lox source and functions provided by the host."""

import time
from abc import ABC, abstractmethod

from lox.runtime.environment import Environment


class LoxCallable(ABC):
    """Anything a Lox call expression can invoke."""

    @abstractmethod
    def arity(self):
        """Exact number of arguments this callable must be called with."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes this callable. arguments has already been checked against arity."""


class NativeFunction(LoxCallable):
    """Host function exposed to Lox under name."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __str__(self):
        return "<native fn>"

    def __repr__(self):
        return f"NativeFunction('{self.name}')"


class UserFunction(LoxCallable):
    """Function declared in Lox source, closing over the environment it was declared in."""

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        """Runs the body in a fresh scope parented to the closure (not to the caller's scope), with each parameter
        bound to its argument. Returns the returned value, or nil if the body completes normally.
        """
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        outcome = interpreter.execute_block(self.declaration.body, environment)
        return None if outcome is None else outcome.value

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"

    def __repr__(self):
        return f"UserFunction('{self.declaration.name.lexeme}')"


def clock():
    """Seconds since the epoch, as a float."""
    return time.time()


NATIVES = [
    NativeFunction("clock", 0, clock),
]
