# Recursive-descent expression parser
"""
Arithmetic expression parser and evaluator

Grammar (left-to-right, standard precedence):

    expr    := term (('+'|'-') term)*
    term    := factor (('*'|'/') factor)*
    factor  := number | '(' expr ')' | name '(' expr ')'

Each nesting level keeps an operand stack and an operator stack. An operator
is applied as soon as a newly scanned operator has lower or equal precedence,
which gives left associativity without building a tree. Parentheses and
function arguments recurse over the same cursor, up to MAX_NESTING_DEPTH
levels.
"""
import math
import string
from dataclasses import dataclass
from typing import List, Optional, Tuple

from evaluator.errors import (
    DivisionByZeroError,
    DomainError,
    EvalError,
    ExpressionSyntaxError,
    MissingCloseParenError,
    UnexpectedEndOfInputError,
    UnknownFunctionError,
)
from evaluator.functions import FUNCTIONS, apply_function

PRECEDENCE = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
}

# must stay well below sys.getrecursionlimit(); each level costs up to two frames
MAX_NESTING_DEPTH = 100

_DIGITS = frozenset(string.digits)
_LETTERS = frozenset(string.ascii_letters)


@dataclass(frozen=True)
class EvaluationResult:
    """Outcome of evaluating one expression"""
    value: Optional[float] = None
    error: Optional[EvalError] = None

    @property
    def success(self) -> bool:
        return self.error is None


class ExpressionParser:
    """Single-use parser over one whitespace-stripped expression"""

    def __init__(self, text: str):
        self._text = "".join(text.split())
        self._pos = 0

    @property
    def text(self) -> str:
        return self._text

    def parse(self) -> float:
        """
        Evaluate the whole input

        Returns:
            Numeric value of the expression

        Raises:
            EvalError: On any syntax or arithmetic failure
        """
        return self._parse_expression(depth=0)

    def _parse_expression(self, depth: int) -> float:
        if depth > MAX_NESTING_DEPTH:
            raise ExpressionSyntaxError(
                f"expression nested too deeply (limit {MAX_NESTING_DEPTH})",
                position=self._pos,
            )
        nested = depth > 0
        values: List[float] = []
        ops: List[Tuple[str, int]] = []
        expect_operand = True
        closed = False

        while self._pos < len(self._text):
            char = self._text[self._pos]
            start = self._pos

            if char in _DIGITS or char == ".":
                self._check_operand_allowed(expect_operand, start)
                values.append(self._parse_number())
                expect_operand = False

            elif char in _LETTERS:
                self._check_operand_allowed(expect_operand, start)
                values.append(self._parse_function(depth))
                expect_operand = False

            elif char == "(":
                self._check_operand_allowed(expect_operand, start)
                self._pos += 1
                values.append(self._parse_expression(depth + 1))
                expect_operand = False

            elif char == ")":
                if not nested:
                    raise ExpressionSyntaxError("unexpected ')'", position=start)
                if expect_operand:
                    raise ExpressionSyntaxError(
                        "expected operand before ')'", position=start
                    )
                self._pos += 1
                closed = True
                break

            elif char in PRECEDENCE:
                if expect_operand:
                    raise ExpressionSyntaxError(
                        f"unexpected operator '{char}'", position=start
                    )
                while ops and PRECEDENCE[ops[-1][0]] >= PRECEDENCE[char]:
                    self._apply_operator(values, *ops.pop())
                ops.append((char, start))
                self._pos += 1
                expect_operand = True

            else:
                raise ExpressionSyntaxError(
                    f"unexpected character '{char}'", position=start
                )

        if nested and not closed:
            raise MissingCloseParenError("missing closing parenthesis", position=self._pos)
        if expect_operand:
            raise UnexpectedEndOfInputError("unexpected end of expression", position=self._pos)

        while ops:
            self._apply_operator(values, *ops.pop())

        if len(values) != 1:
            raise ExpressionSyntaxError("invalid expression", position=self._pos)
        return values[0]

    def _check_operand_allowed(self, expect_operand: bool, position: int):
        if not expect_operand:
            raise ExpressionSyntaxError(
                f"unexpected token '{self._text[position]}'", position=position
            )

    def _parse_number(self) -> float:
        start = self._pos
        while self._pos < len(self._text) and (
            self._text[self._pos] in _DIGITS or self._text[self._pos] == "."
        ):
            self._pos += 1

        literal = self._text[start:self._pos]
        if literal.count(".") > 1 or literal == ".":
            raise ExpressionSyntaxError(
                f"invalid number format: '{literal}'", position=start
            )
        return float(literal)

    def _parse_function(self, depth: int) -> float:
        start = self._pos
        while self._pos < len(self._text) and self._text[self._pos] in _LETTERS:
            self._pos += 1
        name = self._text[start:self._pos]

        if self._pos >= len(self._text) or self._text[self._pos] != "(":
            raise ExpressionSyntaxError(
                f"expected '(' after function name '{name}'", position=self._pos
            )
        if name not in FUNCTIONS:
            raise UnknownFunctionError(f"unknown function: {name}", position=start)

        self._pos += 1
        argument = self._parse_expression(depth + 1)
        return apply_function(name, argument, position=start)

    @staticmethod
    def _apply_operator(values: List[float], op: str, position: int):
        if len(values) < 2:
            raise ExpressionSyntaxError(
                f"operator '{op}' is missing an operand", position=position
            )
        right = values.pop()
        left = values.pop()

        if op == "+":
            result = left + right
        elif op == "-":
            result = left - right
        elif op == "*":
            result = left * right
        else:
            if right == 0:
                raise DivisionByZeroError("division by zero", position=position)
            result = left / right
        values.append(result)


def evaluate(expression: str) -> EvaluationResult:
    """
    Evaluate an arithmetic expression

    Errors are returned in the result rather than raised.

    Args:
        expression: Expression text, whitespace is ignored

    Returns:
        EvaluationResult with either a value or an EvalError
    """
    try:
        value = ExpressionParser(expression).parse()
    except EvalError as e:
        return EvaluationResult(error=e)

    if not math.isfinite(value):
        return EvaluationResult(error=DomainError(f"result is not finite: {value}"))
    return EvaluationResult(value=value)
