"""Data models for the simplecalc calculator.

Settings, Operator enum, the three expression shapes, and the tagged
Evaluation result — all the typed structures that flow through
evaluator → display → REPL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

DEFAULT_DISPLAY_NAME = "User"
DEFAULT_PRECISION = 2
DEFAULT_OPERATIONS = ["+", "-", "*", "/", "^", "sqrt"]


class Operator(str, Enum):
    """Operators the evaluator implements."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    POWER = "^"
    SQRT = "sqrt"


UNARY_OPERATORS = {Operator.SQRT}
BINARY_OPERATORS = {
    Operator.ADD,
    Operator.SUBTRACT,
    Operator.MULTIPLY,
    Operator.DIVIDE,
    Operator.POWER,
}

# Informal spellings accepted in binary position
BINARY_ALIASES = {"x": Operator.MULTIPLY}


@dataclass
class Settings:
    """User preferences for a calculator session."""

    display_name: str = DEFAULT_DISPLAY_NAME
    precision: int = DEFAULT_PRECISION
    allowed_operations: list[str] = field(default_factory=lambda: list(DEFAULT_OPERATIONS))

    def allows(self, token: str) -> bool:
        """Case-insensitive membership test against allowed_operations."""
        wanted = token.casefold()
        return any(op.casefold() == wanted for op in self.allowed_operations)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "display_name": self.display_name,
            "precision": self.precision,
            "allowed_operations": list(self.allowed_operations),
        }

    @classmethod
    def from_dict(cls, d: dict) -> Settings:
        """Deserialize from a JSON dict, falling back to defaults per field."""
        name = d.get("display_name")
        if not isinstance(name, str) or not name.strip():
            name = DEFAULT_DISPLAY_NAME

        precision = d.get("precision")
        # bool is an int subclass; `true` in the file is not a precision
        if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0:
            precision = DEFAULT_PRECISION

        ops = d.get("allowed_operations")
        if isinstance(ops, list):
            ops = [op.strip() for op in ops if isinstance(op, str) and op.strip()]
        else:
            ops = list(DEFAULT_OPERATIONS)

        return cls(display_name=name.strip(), precision=precision, allowed_operations=ops)


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Literal:
    """A bare number."""

    value: float


@dataclass(frozen=True)
class Unary:
    """`op operand`, e.g. `sqrt 9`. op is lower-cased."""

    op: str
    operand: float


@dataclass(frozen=True)
class Binary:
    """`left op right`, e.g. `2 + 2`. op is kept exactly as typed."""

    left: float
    op: str
    right: float


Expression = Union[Literal, Unary, Binary]


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class ErrorKind(str, Enum):
    """Classification of evaluation failures."""

    MALFORMED_EXPRESSION = "MalformedExpression"
    OPERATION_NOT_ALLOWED = "OperationNotAllowed"
    UNKNOWN_OPERATOR = "UnknownOperator"
    DOMAIN_ERROR = "DomainError"
    DIVISION_BY_ZERO = "DivisionByZero"


@dataclass(frozen=True)
class EvaluationError:
    """A classified failure plus the message shown to the user."""

    kind: ErrorKind
    message: str
    token: Optional[str] = None


@dataclass(frozen=True)
class Evaluation:
    """Either a numeric value or an EvaluationError, never both."""

    value: Optional[float] = None
    error: Optional[EvaluationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: float) -> Evaluation:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, token: Optional[str] = None) -> Evaluation:
        return cls(error=EvaluationError(kind=kind, message=message, token=token))
