"""
Symbol tables for formula compilation.

A SymbolTable is the set of bare identifiers a formula may reference.
Explanatory formulas see the named capture groups of the benchmark pattern;
the response formula additionally sees the reserved response name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from benchls.core.exceptions import CompileError, CompileErrorKind

# Name bound to the selected benchmark metric when evaluating the response.
RESPONSE_NAME = "Y"


@dataclass(frozen=True)
class SymbolTable:
    """
    Immutable ordered set of variable names.

    Construct via from_names(), which enforces that the reserved response
    name is not among the user-supplied names.
    """
    names: tuple[str, ...]

    @classmethod
    def from_names(cls, names: Iterable[str]) -> SymbolTable:
        """
        Build the explanatory symbol table.

        Duplicates are dropped, first occurrence wins.

        Raises:
            CompileError: reserved-name-collision if RESPONSE_NAME is present
        """
        ordered = tuple(dict.fromkeys(names))
        if RESPONSE_NAME in ordered:
            raise CompileError(
                f"`{RESPONSE_NAME}` is reserved and cannot be used as a named "
                f"expression in vars",
                kind=CompileErrorKind.RESERVED_NAME_COLLISION,
                detail=RESPONSE_NAME,
            )
        return cls(names=ordered)

    def with_response(self) -> SymbolTable:
        """Return a table that also contains RESPONSE_NAME."""
        if RESPONSE_NAME in self.names:
            return self
        return SymbolTable(names=self.names + (RESPONSE_NAME,))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)
