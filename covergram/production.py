import re
import string
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Self

from covergram.errors import ProductionSyntaxError, ShapeError

ARROW = "->"
EPS = "epsilon"

_DISTANCE = re.compile(r"[0-9]*")


class Shape(Enum):
    EPSILON = "epsilon"
    TERMINAL = "terminal"
    UNIT = "unit"
    BINARY = "binary"


def is_terminal_symbol(s: str) -> bool:
    return isinstance(s, str) and len(s) == 1 and s in string.ascii_lowercase


def is_nonterminal_symbol(s: str) -> bool:
    return isinstance(s, str) and len(s) == 1 and s in string.ascii_uppercase


@dataclass(frozen=True)
class Production:
    left: str
    right: tuple[str, ...]
    distance: int = 0

    def __post_init__(self):
        object.__setattr__(self, "right", tuple(self.right))

        if not is_nonterminal_symbol(self.left):
            raise ShapeError(f"Left side must be one uppercase letter, got {self.left!r}")
        if isinstance(self.distance, bool) or not isinstance(self.distance, int) or self.distance < 0:
            raise ShapeError(f"Distance must be a non-negative integer, got {self.distance!r}")
        if len(self.right) > 2:
            raise ShapeError(f"Right side has {len(self.right)} symbols, at most 2 allowed: {self.right!r}")

        for s in self.right:
            if not (is_terminal_symbol(s) or is_nonterminal_symbol(s)):
                raise ShapeError(f"Symbol {s!r} is not a single letter")
        if len(self.right) == 2 and not all(is_nonterminal_symbol(s) for s in self.right):
            raise ShapeError(f"Binary right side must be two nonterminals, got {''.join(self.right)!r}")

    @classmethod
    def parse(cls, text: str) -> Self:
        """Builds a production from the text format `L<d>->RHS`.

        Examples:
            - `S->AC` is the binary production `S -> AC` with distance 0
            - `A1->b` is `A -> b` with distance 1
            - `A->` is `A -> epsilon`
        """
        if ARROW not in text:
            raise ProductionSyntaxError(f"Missing '{ARROW}' in production {text!r}")

        head, rhs = text.split(ARROW, 1)
        if not head:
            raise ProductionSyntaxError(f"Missing left side in production {text!r}")

        left, dist = head[0], head[1:]
        if not is_nonterminal_symbol(left):
            raise ProductionSyntaxError(f"Left side must be one uppercase letter in {text!r}")
        if not _DISTANCE.fullmatch(dist):
            raise ProductionSyntaxError(f"Invalid distance {dist!r} in production {text!r}")
        if len(rhs) > 2:
            raise ProductionSyntaxError(f"Right side longer than 2 symbols in production {text!r}")
        if len(rhs) == 2 and not all(is_nonterminal_symbol(s) for s in rhs):
            raise ProductionSyntaxError(f"Binary right side must be uppercase in production {text!r}")
        if len(rhs) == 1 and not (is_terminal_symbol(rhs) or is_nonterminal_symbol(rhs)):
            raise ProductionSyntaxError(f"Right side must be a letter in production {text!r}")

        return cls(left=left, right=tuple(rhs), distance=int(dist) if dist else 0)

    @classmethod
    def from_strings(cls, texts: Iterable[str]) -> list[Self]:
        return [cls.parse(t) for t in texts]

    @classmethod
    def derive(cls, left: str, right: Iterable[str], distance: int) -> Self:
        return cls(left=left, right=tuple(right), distance=distance)

    @property
    def shape(self) -> Shape:
        if not self.right:
            return Shape.EPSILON
        if len(self.right) == 2:
            return Shape.BINARY
        if is_terminal_symbol(self.right[0]):
            return Shape.TERMINAL
        return Shape.UNIT

    @property
    def key(self) -> tuple[str, tuple[str, ...]]:
        return self.left, self.right

    def is_epsilon(self) -> bool:
        return self.shape is Shape.EPSILON

    def is_terminal(self) -> bool:
        return self.shape is Shape.TERMINAL

    def is_unit(self) -> bool:
        return self.shape is Shape.UNIT

    def is_binary(self) -> bool:
        return self.shape is Shape.BINARY

    def describe(self) -> str:
        """Diagnostic form: `A->BC`, `A->[1]b`, `A->[1]epsilon`."""
        rhs = "".join(self.right) or EPS
        if self.distance:
            return f"{self.left}{ARROW}[{self.distance}]{rhs}"
        return f"{self.left}{ARROW}{rhs}"

    def __repr__(self):
        return f"Production({self})"

    def __str__(self) -> str:
        dist = str(self.distance) if self.distance else ""
        return f"{self.left}{dist}{ARROW}{''.join(self.right)}"
