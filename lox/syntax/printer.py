"""Textual forms of Lox values and syntax trees.

stringify gives the canonical text of a runtime value (what "print" writes). AstPrinter renders trees as fully
parenthesized prefix forms, e.g. `(* (- 123) (group 45.67))`, for debugging and tests.
"""

import math
from decimal import Decimal

from lox.syntax.ast import (
    Assign, Binary, Block, Call, Expression, Function, Grouping, If, Literal, Logical, Print, Return, Unary, Var,
    Variable, While
)


def stringify(value):
    """Returns the canonical text of a Lox value."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return format_number(value)
    return str(value)


def format_number(value):
    """Formats a finite float with the fewest digits that read back as the same value. Magnitudes from 1e-6 up to
    1e21 are written positionally, everything else as d.ddde+x with an unpadded exponent (1e-7, 1.5e+300).
    """
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    digits = "".join(map(str, digits))
    point = len(digits) + exponent  # position of the decimal point, counted from the first digit

    if 0 < point <= 21:
        text = digits[:point] + "." + digits[point:]
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        text = f"{mantissa}e{point - 1:+d}"
    return "-" + text if sign else text


class AstPrinter:
    """Renders expressions and statements in prefix form. Statements are rendered with the same conventions:

    ```
    (var NAME INITIALIZER?)   (print EXPR)   (; EXPR)   (block STMT*)
    (if COND THEN ELSE?)   (while COND BODY)   (fun NAME (PARAM*) STMT*)   (return EXPR?)
    ```
    """

    def print(self, node):
        match node:
            case Literal(value):
                return stringify(value)
            case Grouping(expression):
                return self.parenthesize("group", expression)
            case Unary(operator, right):
                return self.parenthesize(operator.lexeme, right)
            case Binary(left, operator, right) | Logical(left, operator, right):
                return self.parenthesize(operator.lexeme, left, right)
            case Variable(name):
                return name.lexeme
            case Assign(name, value):
                return self.parenthesize("=", name.lexeme, value)
            case Call(callee, _, arguments):
                return self.parenthesize("call", callee, *arguments)

            case Expression(expression):
                return self.parenthesize(";", expression)
            case Print(expression):
                return self.parenthesize("print", expression)
            case Var(name, initializer):
                if initializer is None:
                    return self.parenthesize("var", name.lexeme)
                return self.parenthesize("var", name.lexeme, initializer)
            case Block(statements):
                return self.parenthesize("block", *statements)
            case If(condition, then_branch, else_branch):
                if else_branch is None:
                    return self.parenthesize("if", condition, then_branch)
                return self.parenthesize("if", condition, then_branch, else_branch)
            case While(condition, body):
                return self.parenthesize("while", condition, body)
            case Function(name, params, body):
                params = "(" + " ".join(param.lexeme for param in params) + ")"
                return self.parenthesize("fun", name.lexeme, params, *body)
            case Return(_, value):
                if value is None:
                    return "(return)"
                return self.parenthesize("return", value)

        raise TypeError(f"cannot print {type(node).__name__}")

    def parenthesize(self, name, *parts):
        """Parts are nodes (printed recursively) or already-rendered strings."""
        result = "(" + name
        for part in parts:
            result += " " + (part if isinstance(part, str) else self.print(part))
        return result + ")"
