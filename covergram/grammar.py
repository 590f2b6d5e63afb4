from typing import Iterable

import networkx as nx

from covergram.errors import GrammarError
from covergram.production import Production, is_nonterminal_symbol, is_terminal_symbol
from covergram.production_set import ProductionSet


class Grammar:

    def __init__(
        self,
        goal: str,
        terminal: Iterable[str],
        productions: Iterable[Production | str],
        nonterminal: Iterable[str] | None = None,
    ):
        self.goal = goal
        self.terminal = Grammar.check_alphabet(terminal)
        self.productions = Grammar.clean_productions(productions)
        if nonterminal is None:
            self.nonterminal = {s for s in Grammar.select_symbols(self.productions) if is_nonterminal_symbol(s)}
        else:
            self.nonterminal = set(nonterminal)

    @staticmethod
    def check_alphabet(terminal: Iterable[str]) -> set[str]:
        alphabet = set(terminal)
        for t in alphabet:
            if not is_terminal_symbol(t):
                raise GrammarError(f"Terminal {t!r} is not a single lowercase letter")
        return alphabet

    @staticmethod
    def select_symbols(productions: Iterable[Production]) -> set[str]:
        s = set()
        for p in productions:
            s.add(p.left)
            for v in p.right:
                s.add(v)
        return s

    @staticmethod
    def clean_productions(productions: Iterable[Production | str]) -> ProductionSet:
        return ProductionSet(Production.parse(p) if isinstance(p, str) else p for p in productions)

    def __repr__(self):
        return f"Grammar(goal={self.goal!r}, terminal={sorted(self.terminal)}, productions={len(self.productions)})"


def dependency_graph(productions: Iterable[Production]) -> nx.DiGraph:
    """Edge `A -> X` for every symbol `X` on a right side of `A`, weighted by the cheapest such production."""
    graph = nx.DiGraph()
    for p in productions:
        graph.add_node(p.left)
        for s in p.right:
            if graph.has_edge(p.left, s):
                graph.edges[p.left, s]["distance"] = min(graph.edges[p.left, s]["distance"], p.distance)
            else:
                graph.add_edge(p.left, s, distance=p.distance)
    return graph


def reachable(productions: Iterable[Production], goal: str) -> set[str]:
    graph = dependency_graph(productions)
    if goal not in graph:
        return set()
    return nx.descendants(graph, goal) | {goal}


# a^n b^n, n >= 1
anbn = Grammar(
    goal="S",
    terminal={"a", "b"},
    productions=["S->AC", "S->AB", "C->SB", "A->a", "B->b"],
)
