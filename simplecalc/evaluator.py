"""Expression evaluator — tokenize → policy check → parse → arithmetic.

Three input shapes are understood:
    5          a bare number (Literal)
    sqrt 9     operator + operand (Unary)
    2 + 2      operand + operator + operand (Binary)

Every failure comes back as an Evaluation carrying an ErrorKind; nothing in
here raises for bad input, and Settings are only read.
"""

from __future__ import annotations

import math
import re
from typing import Callable, Optional, Union

from simplecalc.models import (
    BINARY_ALIASES,
    BINARY_OPERATORS,
    UNARY_OPERATORS,
    Binary,
    ErrorKind,
    Evaluation,
    EvaluationError,
    Expression,
    Literal,
    Operator,
    Settings,
    Unary,
)

# Sign, integer part (plain or comma-grouped in threes) with optional fraction,
# or a bare fraction, then an optional exponent.
# Rejects inf/nan spellings and underscores that float() would accept.
_NUMBER_RE = re.compile(
    r"[+-]?(?:(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII
)

NOT_RECOGNIZED = "Expression not recognized. Use 'a op b' or 'sqrt a'"


def tokenize(text: str) -> list[str]:
    """Split on any run of whitespace, dropping empty tokens."""
    return text.split()


def parse_number(token: str) -> Optional[float]:
    """Parse a finite numeric literal, or None if the token is not one."""
    if not _NUMBER_RE.fullmatch(token):
        return None
    value = float(token.replace(",", ""))
    # exponent overflow, e.g. 1e400
    if math.isinf(value):
        return None
    return value


def _malformed(token: str) -> EvaluationError:
    return EvaluationError(
        kind=ErrorKind.MALFORMED_EXPRESSION,
        message=f"Cannot parse number: {token}",
        token=token,
    )


def operator_token(tokens: list[str]) -> Optional[str]:
    """The operator token for a unary or binary shape, None otherwise.

    Unary operators are lower-cased; binary operators are returned as typed.
    """
    if len(tokens) == 2:
        return tokens[0].lower()
    if len(tokens) == 3:
        return tokens[1]
    return None


def parse(tokens: list[str]) -> Union[Expression, EvaluationError]:
    """Turn a token list into an Expression.

    Only the shape and the numeric operands are checked here; whether the
    operator is allowed or implemented is decided by evaluate().
    """
    if len(tokens) == 1:
        value = parse_number(tokens[0])
        if value is None:
            return _malformed(tokens[0])
        return Literal(value)

    if len(tokens) == 2:
        operand = parse_number(tokens[1])
        if operand is None:
            return _malformed(tokens[1])
        return Unary(op=tokens[0].lower(), operand=operand)

    if len(tokens) == 3:
        left = parse_number(tokens[0])
        if left is None:
            return _malformed(tokens[0])
        right = parse_number(tokens[2])
        if right is None:
            return _malformed(tokens[2])
        return Binary(left=left, op=tokens[1], right=right)

    return EvaluationError(kind=ErrorKind.MALFORMED_EXPRESSION, message=NOT_RECOGNIZED)


def check_policy(op: str, settings: Settings) -> Optional[EvaluationError]:
    """Reject operators missing from settings.allowed_operations."""
    if settings.allows(op):
        return None
    return EvaluationError(
        kind=ErrorKind.OPERATION_NOT_ALLOWED,
        message=f"Operation '{op}' not allowed by settings.",
        token=op,
    )


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

def _is_odd_integer(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x) and math.fmod(x, 2.0) != 0.0


def _power(base: float, exponent: float) -> float:
    """IEEE-754 pow: math.pow raises in cases where IEEE returns inf or nan."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0:
            # zero raised to a negative power; -0 keeps its sign for odd exponents
            if math.copysign(1.0, base) < 0 and _is_odd_integer(exponent):
                return -math.inf
            return math.inf
        # negative base, non-integer exponent
        return math.nan


def _sqrt(a: float) -> Evaluation:
    if a < 0:
        return Evaluation.failure(
            ErrorKind.DOMAIN_ERROR, "Cannot take square root of negative number"
        )
    return Evaluation.success(math.sqrt(a))


def _divide(a: float, b: float) -> Evaluation:
    if b == 0:
        return Evaluation.failure(ErrorKind.DIVISION_BY_ZERO, "Attempted to divide by zero.")
    return Evaluation.success(a / b)


_UNARY: dict[Operator, Callable[[float], Evaluation]] = {
    Operator.SQRT: _sqrt,
}

_BINARY: dict[Operator, Callable[[float, float], Evaluation]] = {
    Operator.ADD: lambda a, b: Evaluation.success(a + b),
    Operator.SUBTRACT: lambda a, b: Evaluation.success(a - b),
    Operator.MULTIPLY: lambda a, b: Evaluation.success(a * b),
    Operator.DIVIDE: _divide,
    Operator.POWER: lambda a, b: Evaluation.success(_power(a, b)),
}


def resolve_unary(op: str) -> Optional[Operator]:
    """Map a (lower-cased) unary token to an Operator, or None."""
    try:
        operator = Operator(op)
    except ValueError:
        return None
    return operator if operator in UNARY_OPERATORS else None


def resolve_binary(op: str) -> Optional[Operator]:
    """Map a binary token to an Operator, case-sensitively, or None."""
    if op in BINARY_ALIASES:
        return BINARY_ALIASES[op]
    try:
        operator = Operator(op)
    except ValueError:
        return None
    return operator if operator in BINARY_OPERATORS else None


def apply(expr: Expression) -> Evaluation:
    """Compute an already-parsed, already-permitted expression."""
    if isinstance(expr, Literal):
        return Evaluation.success(expr.value)

    if isinstance(expr, Unary):
        operator = resolve_unary(expr.op)
        if operator is None:
            return Evaluation.failure(
                ErrorKind.UNKNOWN_OPERATOR, f"Unknown unary operator: {expr.op}", expr.op
            )
        return _UNARY[operator](expr.operand)

    operator = resolve_binary(expr.op)
    if operator is None:
        return Evaluation.failure(
            ErrorKind.UNKNOWN_OPERATOR, f"Unknown binary operator: {expr.op}", expr.op
        )
    return _BINARY[operator](expr.left, expr.right)


def evaluate(text: str, settings: Settings) -> Evaluation:
    """Evaluate one line of input under the given settings.

    Order of checks:
    1. Token count must be 1, 2 or 3
    2. The operator (if any) must be allowed by settings
    3. Operands must be numbers
    4. The operator must be implemented, and the arithmetic defined
    """
    tokens = tokenize(text)
    if not 1 <= len(tokens) <= 3:
        return Evaluation.failure(ErrorKind.MALFORMED_EXPRESSION, NOT_RECOGNIZED)

    op = operator_token(tokens)
    if op is not None:
        denied = check_policy(op, settings)
        if denied:
            return Evaluation(error=denied)

    expr = parse(tokens)
    if isinstance(expr, EvaluationError):
        return Evaluation(error=expr)
    return apply(expr)
