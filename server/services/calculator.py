"""
Scientific calculator evaluator (no eval()).

Pipeline: normalize symbols -> resolve fn(number) calls -> tokenize ->
shunting-yard to RPN -> stack evaluation.

Token alphabet: numbers, + - * / ^ ( ) and "u-" (unary minus).
"""

import math
import re
from typing import Callable, Dict, List

UNARY_MINUS = "u-"

PRECEDENCE = {UNARY_MINUS: 4, "^": 3, "*": 2, "/": 2, "+": 1, "-": 1}
RIGHT_ASSOC = frozenset({UNARY_MINUS, "^"})

_OPERATOR_CHARS = "+-*/()^"
_NUMBER_CHARS = "0123456789."
# A "-" after one of these (or at the start) is a sign, not subtraction
_UNARY_CONTEXT = frozenset({"+", "-", "*", "/", "(", "^", UNARY_MINUS})

_SYMBOLS = (
    ("×", "*"),
    ("÷", "/"),
    ("−", "-"),
    ("%", "*0.01"),
    ("π", repr(math.pi)),
)

RESULT_DECIMALS = 10


class CalculatorError(ValueError):
    """Malformed expression."""


def normalize_expression(expr: str) -> str:
    for symbol, replacement in _SYMBOLS:
        expr = expr.replace(symbol, replacement)
    return expr


def _functions(degrees: bool) -> Dict[str, Callable[[float], float]]:
    to_rad = math.radians if degrees else (lambda x: x)
    return {
        "sqrt": math.sqrt,
        "square": lambda x: x * x,
        "inv": lambda x: 1 / x,
        "sin": lambda x: math.sin(to_rad(x)),
        "cos": lambda x: math.cos(to_rad(x)),
        "tan": lambda x: math.tan(to_rad(x)),
        "log": math.log10,
        "ln": math.log,
    }


def _format_number(value: float) -> str:
    """Plain decimal text the tokenizer accepts (no exponent, no inf/nan)."""
    if not math.isfinite(value):
        raise CalculatorError("Math error")
    text = f"{value:.15f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def resolve_functions(expr: str, *, degrees: bool = True) -> str:
    """Replace fn(number) with its value, repeatedly, so nested calls collapse."""
    functions = _functions(degrees)

    def _apply(fn: Callable[[float], float], m: re.Match) -> str:
        try:
            return _format_number(fn(float(m.group(1))))
        except (ValueError, ZeroDivisionError, OverflowError):
            raise CalculatorError("Math error")

    prev = None
    while expr != prev:
        prev = expr
        for name, fn in functions.items():
            pattern = re.compile(rf"\b{name}\((-?\d+(?:\.\d+)?)\)")
            expr = pattern.sub(lambda m, fn=fn: _apply(fn, m), expr)
    return expr


def tokenize(expr: str) -> List[str]:
    s = re.sub(r"\s+", "", expr)
    tokens: List[str] = []
    num = ""
    for c in s:
        if c in _NUMBER_CHARS:
            num += c
            continue
        if num:
            tokens.append(num)
            num = ""
        if c == "-" and (not tokens or tokens[-1] in _UNARY_CONTEXT):
            tokens.append(UNARY_MINUS)
        elif c in _OPERATOR_CHARS:
            tokens.append(c)
        else:
            raise CalculatorError("Invalid character")
    if num:
        tokens.append(num)
    return tokens


def to_rpn(tokens: List[str]) -> List[str]:
    """Shunting-yard."""
    out: List[str] = []
    ops: List[str] = []
    for t in tokens:
        if t in PRECEDENCE:
            while ops and ops[-1] in PRECEDENCE:
                top = ops[-1]
                if t in RIGHT_ASSOC:
                    should_pop = PRECEDENCE[t] < PRECEDENCE[top]
                else:
                    should_pop = PRECEDENCE[t] <= PRECEDENCE[top]
                if not should_pop:
                    break
                out.append(ops.pop())
            ops.append(t)
        elif t == "(":
            ops.append(t)
        elif t == ")":
            while ops and ops[-1] != "(":
                out.append(ops.pop())
            if not ops:
                raise CalculatorError("Mismatched parentheses")
            ops.pop()
        else:
            out.append(t)

    while ops:
        op = ops.pop()
        if op in ("(", ")"):
            raise CalculatorError("Mismatched parentheses")
        out.append(op)
    return out


def _binary(op: str, a: float, b: float) -> float:
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op == "*":
        return a * b
    if op == "/":
        if b == 0:
            return math.nan if a == 0 or math.isnan(a) else math.copysign(math.inf, a)
        return a / b
    try:
        return math.pow(a, b)
    except OverflowError:
        return math.inf
    except ValueError:
        return math.nan


def eval_rpn(rpn: List[str]) -> float:
    stack: List[float] = []
    for t in rpn:
        if t == UNARY_MINUS:
            if not stack:
                raise CalculatorError("Bad expression")
            stack.append(-stack.pop())
        elif t in PRECEDENCE:
            if len(stack) < 2:
                raise CalculatorError("Bad expression")
            b = stack.pop()
            a = stack.pop()
            stack.append(_binary(t, a, b))
        else:
            try:
                stack.append(float(t))
            except ValueError:
                raise CalculatorError(f"Invalid number: {t}")
    if len(stack) != 1:
        raise CalculatorError("Bad expression")
    return stack[0]


def compute(expression: str, *, degrees: bool = True) -> float:
    """Evaluate a calculator expression; finite results rounded to 10 places."""
    if not expression or not expression.strip():
        raise CalculatorError("Empty expression")
    expr = resolve_functions(normalize_expression(expression), degrees=degrees)
    result = eval_rpn(to_rpn(tokenize(expr)))
    if math.isfinite(result):
        return round(result, RESULT_DECIMALS)
    return result
