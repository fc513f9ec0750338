"""Tree-walking interpreter for Lox.

Values are represented by Python objects: nil is None, booleans are bool, numbers are always float, strings are str
and callables are LoxCallable. Statement execution returns an outcome: None when the statement completed normally, or
a Returned carrying the value of a "return" that is unwinding to its call boundary. Runtime errors are
LoxRuntimeErrors, which are never confused with returns.
"""

import math
import sys
from dataclasses import dataclass

from lox.lang.error import LoxRuntimeError
from lox.runtime.callable import NATIVES, LoxCallable, UserFunction
from lox.runtime.environment import Environment
from lox.syntax.ast import (
    Assign, Binary, Block, Call, Expression, Function, Grouping, If, Literal, Logical, Print, Return, Unary, Var,
    Variable, While
)
from lox.syntax.printer import stringify
from lox.syntax.tokens import TokenType


@dataclass(frozen=True)
class Returned:
    """Outcome of a statement that executed a "return"."""
    value: object = None


def is_truthy(value):
    """nil and false are falsy, everything else (0 and "" included) is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Equality without coercion: values of different types are never equal."""
    if left is None or right is None:
        return left is right
    return type(left) is type(right) and left == right


def divide(left, right):
    """IEEE-754 division, where dividing by zero gives an infinity (or NaN) instead of raising."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class Interpreter:
    """Executes statements against a chain of environments rooted at globals. Globals persist between calls to
    interpret, so a single Interpreter can run a whole interactive session.
    """
    RECURSION_LIMIT = 10000  # host frames; each Lox call takes about six

    ARITHMETIC = {
        TokenType.MINUS: lambda left, right: left - right,
        TokenType.STAR: lambda left, right: left * right,
        TokenType.SLASH: divide,
        TokenType.GREATER: lambda left, right: left > right,
        TokenType.GREATER_EQUAL: lambda left, right: left >= right,
        TokenType.LESS: lambda left, right: left < right,
        TokenType.LESS_EQUAL: lambda left, right: left <= right,
    }

    def __init__(self, output=print, reporter=None):
        """output is called with the text of every printed value. reporter, if given, is called with the
        LoxRuntimeError that halts interpret.
        """
        self.output = output
        self.reporter = reporter
        self.runtime_error = None

        if sys.getrecursionlimit() < Interpreter.RECURSION_LIMIT:
            sys.setrecursionlimit(Interpreter.RECURSION_LIMIT)

        self.globals = Environment()
        for native in NATIVES:
            self.globals.define(native.name, native)
        self.environment = self.globals

    def interpret(self, statements):
        """Executes statements in order. Returns False if a runtime error halted execution, True otherwise."""
        self.runtime_error = None
        try:
            for statement in statements:
                self.execute(statement)
        except LoxRuntimeError as error:
            self.runtime_error = error
            if self.reporter is not None:
                self.reporter(error)
            return False
        return True

    # ---------------------------------------------------------------------------------------------------------------
    # statements

    def execute(self, stmt):
        """Executes stmt. Returns a Returned if a return statement was executed, None otherwise."""
        match stmt:
            case Expression(expression):
                self.evaluate(expression)
            case Print(expression):
                self.output(stringify(self.evaluate(expression)))
            case Var(name, initializer):
                value = None if initializer is None else self.evaluate(initializer)
                self.environment.define(name.lexeme, value)
            case Block(statements):
                return self.execute_block(statements, Environment(self.environment))
            case If(condition, then_branch, else_branch):
                if is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                elif else_branch is not None:
                    return self.execute(else_branch)
            case While(condition, body):
                while is_truthy(self.evaluate(condition)):
                    outcome = self.execute(body)
                    if outcome is not None:
                        return outcome
            case Function(name):
                self.environment.define(name.lexeme, UserFunction(stmt, self.environment))
            case Return(_, value):
                return Returned(None if value is None else self.evaluate(value))
            case _:
                raise TypeError(f"cannot execute {type(stmt).__name__}")
        return None

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current environment afterwards whatever happens."""
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                outcome = self.execute(statement)
                if outcome is not None:
                    return outcome
        finally:
            self.environment = previous
        return None

    # ---------------------------------------------------------------------------------------------------------------
    # expressions

    def evaluate(self, expr):
        match expr:
            case Literal(value):
                return value
            case Grouping(expression):
                return self.evaluate(expression)
            case Unary(operator, right):
                return self._unary(operator, self.evaluate(right))
            case Binary(left, operator, right):
                left = self.evaluate(left)
                return self._binary(left, operator, self.evaluate(right))
            case Logical(left, operator, right):
                left = self.evaluate(left)
                if operator.type is TokenType.OR:
                    if is_truthy(left):
                        return left
                elif not is_truthy(left):
                    return left
                return self.evaluate(right)
            case Variable(name):
                return self.environment.get(name)
            case Assign(name, value):
                value = self.evaluate(value)
                self.environment.assign(name, value)
                return value
            case Call(callee, paren, arguments):
                callee = self.evaluate(callee)
                return self._call(callee, paren, [self.evaluate(argument) for argument in arguments])
        raise TypeError(f"cannot evaluate {type(expr).__name__}")

    @staticmethod
    def _unary(operator, right):
        if operator.type is TokenType.BANG:
            return not is_truthy(right)

        Interpreter._check_number(operator, right)
        return -right

    @staticmethod
    def _binary(left, operator, right):
        if operator.type is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.type is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if operator.type is TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        Interpreter._check_numbers(operator, left, right)
        return Interpreter.ARITHMETIC[operator.type](left, right)

    def _call(self, callee, paren, arguments):
        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(paren, "Stack overflow.") from None

    @staticmethod
    def _check_number(operator, operand):
        if not isinstance(operand, float):
            raise LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def _check_numbers(operator, left, right):
        if not (isinstance(left, float) and isinstance(right, float)):
            raise LoxRuntimeError(operator, "Operands must be numbers.")
