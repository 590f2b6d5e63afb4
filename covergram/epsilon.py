import logging

from covergram.production import Production, Shape
from covergram.production_set import ProductionSet

log = logging.getLogger(__name__)


def add_all_nullable(productions: ProductionSet) -> ProductionSet:
    """Adds every derived `A -> epsilon` reachable through `A -> BC` with `B`, `C` nullable."""
    p = productions.copy()

    is_changing = True
    passes = 0
    while is_changing:
        is_changing = False
        passes += 1
        for pr in p.of_shape(Shape.BINARY):
            # A -> BC
            pb = p.get(pr.right[0], ())
            pc = p.get(pr.right[1], ())
            if pb is None or pc is None:
                continue
            candidate = Production.derive(pr.left, (), pb.distance + pc.distance)
            if p.try_add(candidate):
                log.debug("Nullable: %s", candidate.describe())
                is_changing = True

    log.info("Nullable closure reached a fixpoint after %d passes", passes)
    return p


def eliminate_epsilon(productions: ProductionSet) -> ProductionSet:
    """Replaces epsilon productions by unit productions.

    For `P -> epsilon` with distance `d` and `C -> PB` or `C -> BP`, adds
    `C -> B` with the distance of the binary production plus `d`. Runs once:
    `add_all_nullable` already found every nullable symbol. A resulting
    `C -> C` is not added.
    """
    p = productions.copy()
    binary = productions.of_shape(Shape.BINARY)

    for pr in productions.of_shape(Shape.EPSILON):
        for pab in binary:
            if pab.right[0] == pr.left:
                # C -> PB
                _add_unit(p, pab.left, pab.right[1], pab.distance + pr.distance)
            if pab.right[1] == pr.left:
                # C -> BP
                _add_unit(p, pab.left, pab.right[0], pab.distance + pr.distance)

    return p.without(Shape.EPSILON)


def _add_unit(p: ProductionSet, left: str, right: str, distance: int):
    if left == right:
        return
    candidate = Production.derive(left, (right,), distance)
    if p.try_add(candidate):
        log.debug("Epsilon elimination: %s", candidate.describe())
