"""
Compiled formula programs.

A Program is a postfix (RPN) sequence of Instructions drawn from a closed
opcode set. Evaluation walks the sequence once with a local stack, so a
Program is immutable, re-entrant, and safe to share between threads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

import numpy as np

from benchls.core.exceptions import MalformedProgramError, UnboundVariableError


class Opcode(Enum):
    """Instruction kinds."""
    CONST = "const"
    VAR = "var"
    POS = "u+"
    NEG = "u-"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    CALL1 = "call1"
    CALL2 = "call2"

    @property
    def arity(self) -> int:
        """Number of stack values the instruction consumes."""
        return _ARITY[self]


_ARITY = {
    Opcode.CONST: 0,
    Opcode.VAR: 0,
    Opcode.POS: 1,
    Opcode.NEG: 1,
    Opcode.CALL1: 1,
    Opcode.ADD: 2,
    Opcode.SUB: 2,
    Opcode.MUL: 2,
    Opcode.DIV: 2,
    Opcode.CALL2: 2,
}


@dataclass(frozen=True)
class Instruction:
    """
    One postfix instruction.

    Attributes:
        opcode: What the instruction does
        token: Canonical text: literal as written, variable name, operator
            symbol, 'u+'/'u-', or 'math.Name' for calls
        value: Literal value (CONST only)
        func: Implementation (CALL1/CALL2 only)
    """
    opcode: Opcode
    token: str
    value: np.float64 | None = None
    func: Callable[..., Any] | None = field(default=None, compare=False)

    @classmethod
    def const(cls, text: str, value: float) -> Instruction:
        return cls(Opcode.CONST, text, value=np.float64(value))

    @classmethod
    def var(cls, name: str) -> Instruction:
        return cls(Opcode.VAR, name)

    @classmethod
    def operator(cls, opcode: Opcode) -> Instruction:
        return cls(opcode, opcode.value)

    @classmethod
    def call(cls, qualified_name: str, func: Callable[..., Any], nargs: int) -> Instruction:
        opcode = Opcode.CALL1 if nargs == 1 else Opcode.CALL2
        return cls(opcode, qualified_name, func=func)

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True)
class Program:
    """
    A compiled formula.

    Attributes:
        source: Formula text the Program was compiled from
        instructions: Postfix instruction sequence (never empty)
        variables: Names of every variable the Program reads
    """
    source: str
    instructions: tuple[Instruction, ...]
    variables: frozenset[str] = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if not self.instructions:
            raise MalformedProgramError(
                f"no instructions in {self.source!r}",
                program=self.source,
                stack_depth=0,
            )
        names = frozenset(i.token for i in self.instructions if i.opcode is Opcode.VAR)
        object.__setattr__(self, 'variables', names)

    def __str__(self) -> str:
        return self.source

    def __len__(self) -> int:
        return len(self.instructions)

    def evaluate(self, binding: Mapping[str, float]) -> float:
        """
        Execute the Program against a variable binding.

        Arithmetic is IEEE-754 float64 throughout: division by zero yields
        ±Inf or NaN, never an exception.

        Args:
            binding: Value for every name in self.variables

        Returns:
            The single value left on the stack

        Raises:
            UnboundVariableError: binding lacks a referenced variable
            MalformedProgramError: stack underflow, or more or fewer than
                one value left at the end
        """
        stack: list[np.float64] = []
        with np.errstate(all='ignore'):
            for ins in self.instructions:
                op = ins.opcode
                if op is Opcode.CONST:
                    stack.append(ins.value)
                    continue
                if op is Opcode.VAR:
                    try:
                        stack.append(np.float64(binding[ins.token]))
                    except KeyError:
                        raise UnboundVariableError(
                            f"variable {ins.token!r} is not bound when evaluating {self.source!r}",
                            name=ins.token,
                        ) from None
                    continue

                if len(stack) < op.arity:
                    raise MalformedProgramError(
                        f"stack underflow at {ins.token!r} in {self.source!r}",
                        program=self.source,
                        stack_depth=len(stack),
                    )

                if op is Opcode.POS:
                    pass
                elif op is Opcode.NEG:
                    stack[-1] = -stack[-1]
                elif op is Opcode.CALL1:
                    stack[-1] = np.float64(ins.func(stack[-1]))
                else:
                    b = stack.pop()
                    a = stack[-1]
                    if op is Opcode.ADD:
                        stack[-1] = a + b
                    elif op is Opcode.SUB:
                        stack[-1] = a - b
                    elif op is Opcode.MUL:
                        stack[-1] = a * b
                    elif op is Opcode.DIV:
                        stack[-1] = a / b
                    else:
                        stack[-1] = np.float64(ins.func(a, b))

        if len(stack) != 1:
            raise MalformedProgramError(
                f"invalid expression: {self.source!r} left {len(stack)} values on the stack",
                program=self.source,
                stack_depth=len(stack),
            )
        return float(stack[0])

    def postfix(self) -> str:
        """Instruction tokens in execution order, e.g. 'M N + M N - math.Hypot u-'."""
        return " ".join(i.token for i in self.instructions)

    def to_infix(self) -> str:
        """
        Rebuild a fully parenthesized infix formula.

        The result compiles back to a Program with identical instructions
        apart from literal spelling of parentheses.
        """
        parts: list[str] = []
        for ins in self.instructions:
            op = ins.opcode
            if op is Opcode.CONST or op is Opcode.VAR:
                parts.append(ins.token)
            elif op is Opcode.POS:
                parts[-1] = f"(+{parts[-1]})"
            elif op is Opcode.NEG:
                parts[-1] = f"(-{parts[-1]})"
            elif op is Opcode.CALL1:
                parts[-1] = f"{ins.token}({parts[-1]})"
            else:
                b = parts.pop()
                a = parts[-1]
                if op is Opcode.CALL2:
                    parts[-1] = f"{ins.token}({a}, {b})"
                else:
                    parts[-1] = f"({a} {ins.token} {b})"
        return parts[0]
