import logging
import string
from typing import Iterable

from covergram.config import CoverSettings
from covergram.errors import GrammarError
from covergram.grammar import Grammar
from covergram.production import Production, Shape
from covergram.production_set import ProductionSet

log = logging.getLogger(__name__)

EDIT_COST = 1


def insertion_symbols(used: set[str], preferred: tuple[str, str]) -> tuple[str, str]:
    """Names for the helper nonterminals, avoiding symbols the grammar already uses."""
    taken = set(used)
    chosen = []
    for s in preferred:
        if s in taken:
            free = [c for c in string.ascii_uppercase if c not in taken]
            if not free:
                raise GrammarError("No free uppercase letter left for the insertion nonterminals")
            log.info("Insertion symbol %s is used by the grammar, taking %s", s, free[0])
            s = free[0]
        taken.add(s)
        chosen.append(s)
    return chosen[0], chosen[1]


def construct_cover(
    productions: Iterable[Production],
    terminal: Iterable[str],
    settings: CoverSettings | None = None,
) -> ProductionSet:
    """Adds the insertion, deletion and substitution productions.

    With `H`, `I` the helper nonterminals and `a`, `b` terminals:
        * `H -> HI | I` and `I -> a` (distance 1) insert any run of terminals
        * for `A -> a`: `A -> b` (distance 1, substitution),
          `A -> epsilon` (distance 1, deletion), `A -> HA` and `A -> AH`
          (insertion before and after `A`)

    The result keeps the input productions and is not in CNF yet because of
    the deletion productions.
    """
    settings = settings or CoverSettings()
    base = ProductionSet(productions)
    alphabet = sorted(Grammar.check_alphabet(terminal))

    used = set()
    for p in base:
        used.add(p.left)
        used.update(s for s in p.right if s.isupper())
    h, i = insertion_symbols(used, settings.insertion_symbols)

    q = base.copy()
    q.try_add(Production.derive(h, (h, i), 0))
    q.try_add(Production.derive(h, (i,), 0))
    for a in alphabet:
        q.try_add(Production.derive(i, (a,), EDIT_COST))

    for p in base.of_shape(Shape.TERMINAL):
        a = p.right[0]
        # substitution
        for b in alphabet:
            if b != a:
                q.try_add(Production.derive(p.left, (b,), EDIT_COST))

        # deletion
        q.try_add(Production.derive(p.left, (), EDIT_COST))

        # series of insertions
        q.try_add(Production.derive(p.left, (h, p.left), 0))
        q.try_add(Production.derive(p.left, (p.left, h), 0))

    log.info("Cover added %d productions (insertion symbols %s, %s)", len(q) - len(base), h, i)
    return q
