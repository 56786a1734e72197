"""
Restricted arithmetic formulas.

Formulas turn the named parameters captured from a benchmark name into
explanatory terms, and the measured metric into the response.

Public API:
    compile_expr(formula, symbols) -> Program
    compile_list(formula_list, symbols) -> tuple[Program, ...]
    Program.evaluate(binding) -> float

Example:
    >>> from benchls.expr import SymbolTable, compile_list
    >>> symbols = SymbolTable.from_names(["N"])
    >>> terms = compile_list("math.Log(N) * N, 1.0", symbols)
    >>> [t.evaluate({"N": 1000.0}) for t in terms]
"""

from benchls.expr.symbols import RESPONSE_NAME, SymbolTable
from benchls.expr.program import Instruction, Opcode, Program
from benchls.expr.compiler import compile_expr, compile_list
from benchls.expr.functions import BINARY_FUNCTIONS, NAMESPACE, UNARY_FUNCTIONS

__all__ = [
    "RESPONSE_NAME",
    "SymbolTable",
    "Instruction",
    "Opcode",
    "Program",
    "compile_expr",
    "compile_list",
    "NAMESPACE",
    "UNARY_FUNCTIONS",
    "BINARY_FUNCTIONS",
]
