# Expression evaluator
"""Arithmetic expression evaluator run by worker agents"""
from .errors import (
    EvalErrorCode,
    EvalError,
    ExpressionSyntaxError,
    UnknownFunctionError,
    DivisionByZeroError,
    MissingCloseParenError,
    UnexpectedEndOfInputError,
    DomainError,
)
from .functions import FUNCTIONS, apply_function, list_functions
from .parser import MAX_NESTING_DEPTH, ExpressionParser, EvaluationResult, evaluate

__all__ = [
    # Errors
    "EvalErrorCode",
    "EvalError",
    "ExpressionSyntaxError",
    "UnknownFunctionError",
    "DivisionByZeroError",
    "MissingCloseParenError",
    "UnexpectedEndOfInputError",
    "DomainError",
    # Functions
    "FUNCTIONS",
    "apply_function",
    "list_functions",
    # Parser
    "MAX_NESTING_DEPTH",
    "ExpressionParser",
    "EvaluationResult",
    "evaluate",
]
