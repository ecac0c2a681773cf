# Unary function table
"""Functions callable from expressions (trigonometry in radians)"""
import math
from typing import Callable, Dict, List, Optional

from evaluator.errors import DomainError, UnknownFunctionError


def _sqrt(value: float) -> float:
    if value < 0:
        raise DomainError(f"sqrt of negative number: {value}")
    return math.sqrt(value)


def _log(value: float) -> float:
    if value <= 0:
        raise DomainError(f"log of non-positive number: {value}")
    return math.log(value)


FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "sqrt": _sqrt,
    "sin": math.sin,
    "cos": math.cos,
    "log": _log,
}


def list_functions() -> List[str]:
    """List supported function names"""
    return sorted(FUNCTIONS)


def apply_function(name: str, argument: float, position: Optional[int] = None) -> float:
    """
    Apply a named unary function

    Args:
        name: Function name as written in the expression
        argument: Evaluated argument
        position: Offset of the name in the input, for error reporting

    Returns:
        Function value

    Raises:
        UnknownFunctionError: If name is not supported
        DomainError: If argument is outside the function's domain
    """
    func = FUNCTIONS.get(name)
    if func is None:
        raise UnknownFunctionError(f"unknown function: {name}", position=position)
    try:
        return func(argument)
    except DomainError as e:
        e.position = position
        raise
    except (ValueError, OverflowError) as e:
        raise DomainError(f"{name}({argument}): {e}", position=position) from e
