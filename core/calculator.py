# core/calculator.py

"""Inline arithmetic for queries like '=2+2' or '3*4'."""
import ast
import math
import operator

from core.data_structures import CalcResult

OPERATOR_CHARS = set('+-*/%^')

CONSTANTS = {
    'pi': math.pi,
    'e': math.e,
}

MAX_EXPRESSION_LEN = 1000

class CalcError(ValueError):
    """Raised for expressions the calculator cannot evaluate."""
    pass

def is_calc_query(query: str) -> bool:
    q = query.strip()
    if q.startswith('='):
        return True
    if len(q) < 2:
        return False
    has_digit = any('0' <= c <= '9' for c in q)
    has_op = any(c in OPERATOR_CHARS for c in q)
    return has_digit and has_op

def _divide(left: float, right: float) -> float:
    if right == 0:
        raise CalcError("division by zero")
    return left / right

def _modulo(left: float, right: float) -> float:
    # Integer remainder, sign follows the dividend
    if int(right) == 0:
        raise CalcError("modulo by zero")
    return float(int(math.fmod(int(left), int(right))))

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: _divide,
    ast.Mod: _modulo,
    ast.Pow: math.pow,
}

def _eval_node(node) -> float:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)

    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise CalcError(f"unsupported literal: {node.value!r}")
        return float(node.value)

    if isinstance(node, ast.UnaryOp):
        value = _eval_node(node.operand)
        if isinstance(node.op, ast.USub):
            return -value
        if isinstance(node.op, ast.UAdd):
            return value
        raise CalcError("unsupported unary operator")

    if isinstance(node, ast.BinOp):
        op = _BINARY_OPS.get(type(node.op))
        if op is None:
            raise CalcError("unsupported operator")
        return op(_eval_node(node.left), _eval_node(node.right))

    if isinstance(node, ast.Name):
        value = CONSTANTS.get(node.id.lower())
        if value is None:
            raise CalcError(f"unknown identifier: {node.id}")
        return value

    raise CalcError("unsupported expression")

def eval_expr(expr: str) -> float:
    """Evaluate an arithmetic expression; '^' means exponentiation."""
    expr = expr.replace('**', '^').replace('^', '**')
    try:
        tree = ast.parse(expr, mode='eval')
    except (SyntaxError, ValueError, RecursionError, MemoryError) as e:
        raise CalcError(str(e))
    try:
        value = _eval_node(tree)
    except (OverflowError, ValueError, RecursionError) as e:
        raise CalcError(str(e))
    if not math.isfinite(value):
        raise CalcError("result is not finite")
    return value

def format_number(value: float) -> str:
    if value == int(value):
        return str(int(value))
    text = f"{value:.10f}".rstrip('0').rstrip('.')
    return text if text not in ('', '-0') else '0'

def evaluate(query: str) -> CalcResult:
    expr = query.strip()
    if expr.startswith('='):
        expr = expr[1:].strip()
    if not expr or len(expr) > MAX_EXPRESSION_LEN:
        return CalcResult()

    try:
        value = eval_expr(expr)
    except CalcError:
        return CalcResult()

    return CalcResult(expression=expr, result=format_number(value), valid=True)
