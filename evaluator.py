"""
Expression Evaluator for PocketCalc
Sanitizes, parses and evaluates flat four-operator arithmetic without eval()
"""
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

_DISALLOWED = re.compile(r"[^0-9+\-*/().]")


class EvalError(ValueError):
    """Raised when an expression has no finite numeric value"""


class TokenType(Enum):
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"


@dataclass
class Token:
    type: TokenType
    value: Union[str, float]
    position: int


class UnaryOp(Enum):
    SQRT = "sqrt"
    SQUARE = "square"
    PERCENTAGE = "percentage"


NOTATIONS = {
    UnaryOp.SQRT: "√({expr}) = {result}",
    UnaryOp.SQUARE: "({expr})² = {result}",
    UnaryOp.PERCENTAGE: "({expr})% = {result}",
}


def sanitize(expression: str) -> str:
    """Strip every character outside the arithmetic character set"""
    return _DISALLOWED.sub("", expression)


def format_number(value: float) -> str:
    """Shortest round-trip digits, laid out the way JavaScript prints numbers.

    Fixed-point text for 1e-7 < |value| < 1e21 (so a chained result never
    carries an exponent), exponent form like "1e-7" or "1.5e+21" outside it.
    """
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    text = repr(abs(value))
    mantissa, _, exponent = text.partition("e")
    int_part = mantissa.split(".")[0]
    digits = mantissa.replace(".", "")
    # value == 0.<digits> * 10**point
    point = len(int_part) + int(exponent or 0)

    stripped = digits.lstrip("0")
    point -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")
    count = len(digits)

    if count <= point <= 21:
        return sign + digits + "0" * (point - count)
    if 0 < point <= 21:
        return sign + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return sign + "0." + "0" * -point + digits

    power = point - 1
    exp_text = f"e{'+' if power >= 0 else '-'}{abs(power)}"
    if count == 1:
        return sign + digits + exp_text
    return sign + digits[0] + "." + digits[1:] + exp_text


class ExpressionParser:
    """Recursive descent parser: + - below * /, unary sign, parentheses"""

    def tokenize(self, expression: str) -> list[Token]:
        tokens = []
        i = 0

        while i < len(expression):
            ch = expression[i]
            if ch.isdigit() or (ch == "." and i + 1 < len(expression) and expression[i + 1].isdigit()):
                j = i
                has_dot = False
                while j < len(expression):
                    if expression[j].isdigit():
                        j += 1
                    elif expression[j] == "." and not has_dot:
                        has_dot = True
                        j += 1
                    else:
                        break
                tokens.append(Token(TokenType.NUMBER, float(expression[i:j]), i))
                i = j
            elif ch in "+-*/":
                tokens.append(Token(TokenType.OPERATOR, ch, i))
                i += 1
            elif ch == "(":
                tokens.append(Token(TokenType.LPAREN, ch, i))
                i += 1
            elif ch == ")":
                tokens.append(Token(TokenType.RPAREN, ch, i))
                i += 1
            else:
                raise EvalError(f"Unexpected character at position {i}: {ch}")

        return tokens

    def parse(self, expression: str) -> float:
        """Parse and evaluate an already-sanitized expression"""
        self.tokens = self.tokenize(expression)
        self.pos = 0
        if not self.tokens:
            raise EvalError("Empty expression")

        result = self._parse_expression()

        if self.pos < len(self.tokens):
            raise EvalError(f"Unexpected token at position {self.tokens[self.pos].position}")
        if not math.isfinite(result):
            raise EvalError("Result is not a finite number")

        return result

    def _current_token(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _consume_token(self) -> Optional[Token]:
        token = self._current_token()
        if token:
            self.pos += 1
        return token

    def _at_operator(self, symbols: str) -> bool:
        token = self._current_token()
        return token is not None and token.type == TokenType.OPERATOR and token.value in symbols

    def _parse_expression(self) -> float:
        left = self._parse_term()

        while self._at_operator("+-"):
            op = self._consume_token().value
            right = self._parse_term()
            left = left + right if op == "+" else left - right

        return left

    def _parse_term(self) -> float:
        left = self._parse_factor()

        while self._at_operator("*/"):
            op = self._consume_token().value
            right = self._parse_factor()
            if op == "*":
                left = left * right
            else:
                if right == 0:
                    raise EvalError("Division by zero")
                left = left / right

        return left

    def _parse_factor(self) -> float:
        token = self._current_token()

        if not token:
            raise EvalError("Unexpected end of expression")

        if self._at_operator("-"):
            self._consume_token()
            return -self._parse_factor()

        if self._at_operator("+"):
            self._consume_token()
            return self._parse_factor()

        if token.type == TokenType.NUMBER:
            self._consume_token()
            return token.value

        if token.type == TokenType.LPAREN:
            self._consume_token()
            value = self._parse_expression()
            closing = self._consume_token()
            if not closing or closing.type != TokenType.RPAREN:
                raise EvalError("Missing closing parenthesis")
            return value

        raise EvalError(f"Unexpected token at position {token.position}")


def evaluate_value(expression: str) -> float:
    return ExpressionParser().parse(sanitize(expression))


def evaluate_standard(expression: str) -> str:
    """Evaluate an expression and return the result as display text.

    Raises EvalError for empty or malformed input, division by zero and
    non-finite results.
    """
    return format_number(evaluate_value(expression))


def evaluate_unary(expression: str, op) -> tuple[str, str]:
    """Evaluate an expression, apply a unary transform to it.

    Returns (result, history notation), e.g. ("3", "√(9) = 3").
    """
    op = UnaryOp(op)
    value = evaluate_value(expression)

    if op is UnaryOp.SQRT:
        if value < 0:
            raise EvalError("Square root of a negative number")
        transformed = math.sqrt(value)
    elif op is UnaryOp.SQUARE:
        transformed = value * value
    else:
        transformed = value / 100

    if not math.isfinite(transformed):
        raise EvalError("Result is not a finite number")

    result = format_number(transformed)
    return result, NOTATIONS[op].format(expr=expression, result=result)
