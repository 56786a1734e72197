"""
Formula compiler.

Formulas are parsed with Python's own expression grammar (ast.parse in
'eval' mode) and then checked against a narrow whitelist while being
lowered to postfix Instructions. Nothing is ever passed to eval().

Accepted:
    - int and float literals (all values are float64)
    - bare identifiers present in the SymbolTable
    - binary + - * / and unary + -
    - parentheses
    - math.Name(x) and math.Name(x, y) for whitelisted Name

Rejected with CompileError of the matching kind:
    - malformed text                         -> syntax
    - names missing from the SymbolTable     -> unknown-identifier
    - math.Name with Name not whitelisted    -> unknown-function
    - calls not qualified with math.         -> wrong-namespace
    - everything else (strings, booleans, comparisons, subscripts,
      ** % // and bitwise operators, attribute access, keyword
      arguments, lambdas, ...)               -> unsupported-construct
"""

from __future__ import annotations

import ast
import io
import math
import tokenize

from benchls.core.exceptions import CompileError, CompileErrorKind
from benchls.expr.functions import (
    BINARY_FUNCTIONS,
    NAMESPACE,
    UNARY_FUNCTIONS,
    qualified_name,
)
from benchls.expr.program import Instruction, Opcode, Program
from benchls.expr.symbols import SymbolTable

_BINARY_OPS: dict[type[ast.operator], Opcode] = {
    ast.Add: Opcode.ADD,
    ast.Sub: Opcode.SUB,
    ast.Mult: Opcode.MUL,
    ast.Div: Opcode.DIV,
}

_UNARY_OPS: dict[type[ast.unaryop], Opcode] = {
    ast.UAdd: Opcode.POS,
    ast.USub: Opcode.NEG,
}

_OPERATOR_SYMBOLS: dict[type[ast.AST], str] = {
    ast.Pow: "**",
    ast.Mod: "%",
    ast.FloorDiv: "//",
    ast.MatMult: "@",
    ast.LShift: "<<",
    ast.RShift: ">>",
    ast.BitOr: "|",
    ast.BitXor: "^",
    ast.BitAnd: "&",
    ast.Invert: "~",
    ast.Not: "not",
}


def compile_expr(formula: str, symbols: SymbolTable) -> Program:
    """
    Compile a single formula into a Program.

    Args:
        formula: Expression text, e.g. "math.Log(N) * N"
        symbols: Names the formula may reference

    Returns:
        Program whose source is the stripped formula text

    Raises:
        CompileError: If the formula is malformed or uses anything outside
            the whitelist

    Example:
        >>> p = compile_expr("N*N", SymbolTable.from_names(["N"]))
        >>> p.postfix()
        'N N *'
        >>> p.evaluate({"N": 3.0})
        9.0
    """
    text = formula.strip()
    try:
        tree = ast.parse(text, mode='eval')
    except (SyntaxError, ValueError) as e:
        raise CompileError(
            f"cannot parse {text!r}: {e}",
            kind=CompileErrorKind.SYNTAX,
            formula=text,
        ) from e
    except (RecursionError, MemoryError) as e:
        raise _too_deep(text) from e

    emitter = _Emitter(text, symbols)
    try:
        emitter.emit(tree.body)
    except RecursionError as e:
        raise _too_deep(text) from e
    return Program(source=text, instructions=tuple(emitter.output))


def compile_list(formula_list: str, symbols: SymbolTable) -> tuple[Program, ...]:
    """
    Compile a comma-separated list of formulas, one Program per element.

    Commas nested inside calls or parentheses do not split. A single
    trailing comma is allowed. Each Program keeps the source text of its
    own element.

    Raises:
        CompileError: If the list is empty or any element fails to compile
    """
    pieces = _split_top_level(formula_list)
    if pieces and not pieces[-1].strip() and len(pieces) > 1:
        pieces = pieces[:-1]
    if not any(p.strip() for p in pieces):
        raise CompileError(
            "no expressions in formula list",
            kind=CompileErrorKind.SYNTAX,
            formula=formula_list,
        )
    return tuple(compile_expr(p, symbols) for p in pieces)


def _too_deep(text: str) -> CompileError:
    return CompileError(
        f"expression nested too deeply: {text[:40]!r}...",
        kind=CompileErrorKind.SYNTAX,
        formula=text,
    )


def _split_top_level(text: str) -> list[str]:
    """Split text at commas that are not nested inside brackets."""
    line_starts = [0]
    for line in io.StringIO(text):
        line_starts.append(line_starts[-1] + len(line))

    cuts: list[int] = []
    depth = 0
    try:
        for tok in tokenize.generate_tokens(io.StringIO(text).readline):
            if tok.type != tokenize.OP:
                continue
            if tok.string in "([{":
                depth += 1
            elif tok.string in ")]}":
                depth -= 1
            elif tok.string == "," and depth == 0:
                row, col = tok.start
                cuts.append(line_starts[row - 1] + col)
    except (tokenize.TokenError, SyntaxError) as e:
        raise CompileError(
            f"cannot parse {text!r}: {e}",
            kind=CompileErrorKind.SYNTAX,
            formula=text,
        ) from e

    pieces = []
    start = 0
    for cut in cuts:
        pieces.append(text[start:cut])
        start = cut + 1
    pieces.append(text[start:])
    return pieces


class _Emitter:
    """Walks a parsed expression and appends postfix Instructions."""

    def __init__(self, source: str, symbols: SymbolTable):
        self.source = source
        self.symbols = symbols
        self.output: list[Instruction] = []

    def fail(self, kind: CompileErrorKind, message: str, detail: str | None = None) -> CompileError:
        return CompileError(
            f"{message} in {self.source!r}",
            kind=kind,
            formula=self.source,
            detail=detail,
        )

    def emit(self, node: ast.expr) -> None:
        if isinstance(node, ast.Constant):
            self._emit_constant(node)
        elif isinstance(node, ast.Name):
            if node.id not in self.symbols:
                raise self.fail(
                    CompileErrorKind.UNKNOWN_IDENTIFIER,
                    f"unknown variable: {node.id}",
                    node.id,
                )
            self.output.append(Instruction.var(node.id))
        elif isinstance(node, ast.UnaryOp):
            opcode = _UNARY_OPS.get(type(node.op))
            if opcode is None:
                raise self._unsupported_operator(node.op, "unary")
            self.emit(node.operand)
            self.output.append(Instruction.operator(opcode))
        elif isinstance(node, ast.BinOp):
            opcode = _BINARY_OPS.get(type(node.op))
            if opcode is None:
                raise self._unsupported_operator(node.op, "binary")
            self.emit(node.left)
            self.emit(node.right)
            self.output.append(Instruction.operator(opcode))
        elif isinstance(node, ast.Call):
            self._emit_call(node)
        else:
            raise self.fail(
                CompileErrorKind.UNSUPPORTED_CONSTRUCT,
                f"unsupported expression: {type(node).__name__}",
                type(node).__name__,
            )

    def _emit_constant(self, node: ast.Constant) -> None:
        value = node.value
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise self.fail(
                CompileErrorKind.UNSUPPORTED_CONSTRUCT,
                f"unsupported literal: {value!r}",
                repr(value),
            )
        text = ast.get_source_segment(self.source, node) or repr(value)
        try:
            as_float = float(value)
        except OverflowError:
            as_float = math.inf
        if not math.isfinite(as_float):
            raise self.fail(
                CompileErrorKind.SYNTAX,
                f"literal out of range: {text}",
                text,
            )
        self.output.append(Instruction.const(text, as_float))

    def _emit_call(self, node: ast.Call) -> None:
        func = node.func
        if isinstance(func, ast.Name):
            raise self.fail(
                CompileErrorKind.WRONG_NAMESPACE,
                f"only {NAMESPACE} package functions allowed, found bare call {func.id}",
                func.id,
            )
        if not isinstance(func, ast.Attribute) or not isinstance(func.value, ast.Name):
            raise self.fail(
                CompileErrorKind.UNSUPPORTED_CONSTRUCT,
                "unknown function call",
                ast.get_source_segment(self.source, func),
            )
        if func.value.id != NAMESPACE:
            raise self.fail(
                CompileErrorKind.WRONG_NAMESPACE,
                f"only {NAMESPACE} package functions allowed, found package {func.value.id}",
                func.value.id,
            )
        if node.keywords or any(isinstance(a, ast.Starred) for a in node.args):
            raise self.fail(
                CompileErrorKind.UNSUPPORTED_CONSTRUCT,
                f"{qualified_name(func.attr)} takes positional arguments only",
                func.attr,
            )

        name = func.attr
        if name in UNARY_FUNCTIONS:
            impl, nargs = UNARY_FUNCTIONS[name], 1
        elif name in BINARY_FUNCTIONS:
            impl, nargs = BINARY_FUNCTIONS[name], 2
        else:
            raise self.fail(
                CompileErrorKind.UNKNOWN_FUNCTION,
                f"unknown math function {qualified_name(name)}",
                name,
            )
        if len(node.args) != nargs:
            raise self.fail(
                CompileErrorKind.SYNTAX,
                f"{qualified_name(name)} takes {nargs} argument(s), got {len(node.args)}",
                name,
            )

        for arg in node.args:
            self.emit(arg)
        self.output.append(Instruction.call(qualified_name(name), impl, nargs))

    def _unsupported_operator(self, op: ast.AST, arity: str) -> CompileError:
        symbol = _OPERATOR_SYMBOLS.get(type(op), type(op).__name__)
        return self.fail(
            CompileErrorKind.UNSUPPORTED_CONSTRUCT,
            f"unrecognized {arity} expression: {symbol}",
            symbol,
        )
