# Evaluation errors
"""Structured errors produced by the expression evaluator"""
from enum import Enum
from typing import Any, Dict, Optional


class EvalErrorCode(str, Enum):
    """Evaluation error categories"""
    SYNTAX_ERROR = "SyntaxError"
    UNKNOWN_FUNCTION = "UnknownFunction"
    DIVISION_BY_ZERO = "DivisionByZero"
    MISSING_CLOSE_PAREN = "MissingCloseParen"
    UNEXPECTED_END_OF_INPUT = "UnexpectedEndOfInput"
    DOMAIN_ERROR = "DomainError"


class EvalError(Exception):
    """Base exception for evaluation errors"""

    code: EvalErrorCode = EvalErrorCode.SYNTAX_ERROR

    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.position is not None:
            data["position"] = self.position
        return data


class ExpressionSyntaxError(EvalError):
    """Unexpected character, misplaced token or malformed number"""
    code = EvalErrorCode.SYNTAX_ERROR


class UnknownFunctionError(EvalError):
    """Function name is not in the function table"""
    code = EvalErrorCode.UNKNOWN_FUNCTION


class DivisionByZeroError(EvalError):
    """Right operand of '/' is zero"""
    code = EvalErrorCode.DIVISION_BY_ZERO


class MissingCloseParenError(EvalError):
    """Input ended inside a parenthesized sub-expression"""
    code = EvalErrorCode.MISSING_CLOSE_PAREN


class UnexpectedEndOfInputError(EvalError):
    """Input ended where an operand was expected"""
    code = EvalErrorCode.UNEXPECTED_END_OF_INPUT


class DomainError(EvalError):
    """Argument outside a function's domain, or a non-finite result"""
    code = EvalErrorCode.DOMAIN_ERROR
