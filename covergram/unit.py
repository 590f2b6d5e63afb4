import logging

from covergram.production import Production, Shape
from covergram.production_set import ProductionSet

log = logging.getLogger(__name__)


def add_all_unit(productions: ProductionSet) -> ProductionSet:
    """Chains unit productions: `A -> B` and `B -> C` give `A -> C`, distances summed.

    `A -> A` is never produced. Repeats until a pass changes nothing.
    """
    p = productions.copy()

    is_changing = True
    passes = 0
    while is_changing:
        is_changing = False
        passes += 1
        for pr in p.of_shape(Shape.UNIT):
            # A -> B
            for pb in p.with_left(pr.right[0]):
                # B -> C
                if not pb.is_unit() or pb.right[0] == pr.left:
                    continue
                candidate = Production.derive(pr.left, pb.right, pr.distance + pb.distance)
                if p.try_add(candidate):
                    log.debug("Unit closure: %s", candidate.describe())
                    is_changing = True

    log.info("Unit closure reached a fixpoint after %d passes", passes)
    return p


def eliminate_unit(productions: ProductionSet) -> ProductionSet:
    """Replaces every `A -> B` by `A -> b` / `A -> CD` for each `B -> b` / `B -> CD`.

    Runs once over the closed unit productions, then drops them all.
    """
    p = productions.copy()

    for pr in productions.of_shape(Shape.UNIT):
        # A -> B
        for pb in productions.with_left(pr.right[0]):
            # B -> b or B -> CD
            if pb.is_terminal() or pb.is_binary():
                candidate = Production.derive(pr.left, pb.right, pr.distance + pb.distance)
                if p.try_add(candidate):
                    log.debug("Unit elimination: %s", candidate.describe())

    return p.without(Shape.UNIT)
