from typing import Iterable, Iterator, Self

from covergram.production import Production, Shape


class ProductionSet:
    """Ordered productions with at most one entry per `(left, right)` pair.

    Every insertion goes through `try_add`, so the stored entry for a pair is
    always the cheapest one proposed so far.
    """

    def __init__(self, productions: Iterable[Production] = ()):
        self.productions: list[Production] = []
        self.index: dict[tuple[str, tuple[str, ...]], int] = {}
        for p in productions:
            self.try_add(p)

    def try_add(self, candidate: Production) -> bool:
        """Adds `candidate` unless a production with the same sides is at least as cheap.

        Returns `True` when the set changed, either by appending a new pair or by
        replacing a costlier entry in place.
        """
        i = self.index.get(candidate.key)
        if i is None:
            self.index[candidate.key] = len(self.productions)
            self.productions.append(candidate)
            return True

        if self.productions[i].distance <= candidate.distance:
            return False

        self.productions[i] = candidate
        return True

    def copy(self) -> Self:
        other = ProductionSet()
        other.productions = self.productions.copy()
        other.index = self.index.copy()
        return other

    def get(self, left: str, right: Iterable[str]) -> Production | None:
        i = self.index.get((left, tuple(right)))
        return None if i is None else self.productions[i]

    def of_shape(self, shape: Shape) -> list[Production]:
        return [p for p in self.productions if p.shape is shape]

    def with_left(self, symbol: str) -> list[Production]:
        return [p for p in self.productions if p.left == symbol]

    def without(self, shape: Shape) -> Self:
        return ProductionSet(p for p in self.productions if p.shape is not shape)

    def difference(self, other: Self) -> list[Production]:
        """Productions present here but not, by value, in `other`."""
        return [p for p in self.productions if p not in other]

    def __sub__(self, other: Self) -> list[Production]:
        return self.difference(other)

    def __contains__(self, p: Production) -> bool:
        return self.get(p.left, p.right) == p

    def __iter__(self) -> Iterator[Production]:
        return iter(self.productions)

    def __len__(self) -> int:
        return len(self.productions)

    def __eq__(self, value: object) -> bool:
        if not isinstance(value, ProductionSet):
            return NotImplemented
        return self.productions == value.productions

    def __repr__(self):
        return f"ProductionSet([{', '.join(str(p) for p in self.productions)}])"

    def __str__(self) -> str:
        return "\n".join(p.describe() for p in self.productions)
