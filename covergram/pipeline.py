import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable

import networkx as nx
import pandas as pd
from matplotlib import pyplot as plt

from covergram.config import CoverSettings
from covergram.cover import construct_cover
from covergram.epsilon import add_all_nullable, eliminate_epsilon
from covergram.grammar import Grammar, anbn, dependency_graph, reachable
from covergram.production import Production
from covergram.production_set import ProductionSet
from covergram.unit import add_all_unit, eliminate_unit

log = logging.getLogger(__name__)

MATH_NA = "∅"


@dataclass
class Stage:
    name: str
    productions: ProductionSet
    added: list[Production] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.name}: {len(self.added)} added, {len(self.productions)} total"


def build_covering_grammar(grammar: Grammar, settings: CoverSettings | None = None) -> list[Stage]:
    """Runs every transformation and keeps the result of each one.

    The first stage holds the base grammar, the last one the covering grammar
    in CNF. `Stage.added` lists productions that are new, or cheaper, compared
    with the previous stage.
    """
    settings = settings or CoverSettings()

    steps: list[tuple[str, Callable[[ProductionSet], ProductionSet]]] = [
        ("cover", lambda p: construct_cover(p, grammar.terminal, settings)),
        ("nullable", add_all_nullable),
        ("eliminate epsilon", eliminate_epsilon),
        ("unit closure", add_all_unit),
        ("eliminate unit", eliminate_unit),
    ]

    stages = [Stage("base", grammar.productions.copy(), list(grammar.productions))]
    for name, step in steps:
        previous = stages[-1].productions
        current = step(previous)
        stage = Stage(name, current, current - previous)
        log.info("%s", stage)
        stages.append(stage)
    return stages


def covering_grammar(grammar: Grammar, settings: CoverSettings | None = None) -> ProductionSet:
    return build_covering_grammar(grammar, settings)[-1].productions


def trace(stages: Iterable[Stage]) -> pd.DataFrame:
    records = []
    for stage in stages:
        for p in stage.added:
            records.append(
                {
                    "stage": stage.name,
                    "production": str(p),
                    "left": p.left,
                    "right": "".join(p.right),
                    "distance": p.distance,
                    "shape": p.shape.value,
                }
            )

    columns = ["stage", "production", "left", "right", "distance", "shape"]
    return pd.DataFrame.from_records(records, columns=columns)


def distance_table(productions: Iterable[Production]) -> pd.DataFrame:
    """Left symbols as rows, right sides as columns, distances as cells."""
    records = [{"left": p.left, "right": "".join(p.right), "distance": p.distance} for p in productions]
    df = pd.DataFrame.from_records(records, columns=["left", "right", "distance"])
    df = df.pivot(index="left", columns="right", values="distance")
    df = df.sort_index()
    df = df.map(lambda v: MATH_NA if pd.isna(v) else int(v))
    return df[sorted(df.columns)]


def visualize(productions: Iterable[Production], goal: str):
    productions = list(productions)
    graph = dependency_graph(productions).subgraph(reachable(productions, goal))

    pos = nx.spring_layout(graph, seed=0)
    nx.draw(graph, pos, arrows=True, node_shape="o", node_size=1500, alpha=0.4)
    nx.draw_networkx_labels(graph, pos)
    nx.draw_networkx_edge_labels(
        graph, pos, edge_labels={e: d["distance"] for e, d in graph.edges.items() if d["distance"]}
    )
    plt.show()


def configure_logging(level: str = "WARNING"):
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s", level=level)


def print_productions(title: str, productions: Iterable[Production]):
    print(title)
    for p in productions:
        print(p.describe())


if __name__ == "__main__":
    settings = CoverSettings.load()
    configure_logging(settings.log_level)

    stages = build_covering_grammar(anbn, settings)

    print_productions("Original productions:", stages[0].productions)
    print_productions("Add cover productions:", stages[1].added)
    print_productions("Add nullable productions:", stages[2].added)
    print_productions("Eliminate epsilon; new productions:", stages[3].added)
    print_productions("Add derived unit productions:", stages[4].added)
    print_productions("Eliminate unit; new productions:", stages[5].added)
    print_productions("Final grammar", stages[-1].productions)
    print()

    print(distance_table(stages[-1].productions))
