import itertools
from typing import Iterable

import pandas as pd

from covergram.config import CoverSettings
from covergram.grammar import Grammar, anbn
from covergram.pipeline import MATH_NA, build_covering_grammar, covering_grammar, distance_table, trace
from covergram.production import Production, Shape


def min_distance(productions: Iterable[Production], goal: str, word: str) -> int | None:
    """CYK over a CNF grammar, returning the cheapest derivation of `word` from `goal`."""
    productions = list(productions)
    n = len(word)
    best: dict[tuple[int, int], dict[str, int]] = {}

    for i, c in enumerate(word):
        cell: dict[str, int] = {}
        for p in productions:
            if p.is_terminal() and p.right[0] == c:
                cell[p.left] = min(cell.get(p.left, p.distance), p.distance)
        best[i, i + 1] = cell

    for length in range(2, n + 1):
        for i in range(n - length + 1):
            j = i + length
            cell = {}
            for k in range(i + 1, j):
                left, right = best[i, k], best[k, j]
                for p in productions:
                    if not p.is_binary():
                        continue
                    b, c = p.right
                    if b in left and c in right:
                        d = p.distance + left[b] + right[c]
                        cell[p.left] = min(cell.get(p.left, d), d)
            best[i, j] = cell

    return best[0, n].get(goal)


def test_stages_in_order() -> None:
    stages = build_covering_grammar(anbn)

    assert [s.name for s in stages] == [
        "base",
        "cover",
        "nullable",
        "eliminate epsilon",
        "unit closure",
        "eliminate unit",
    ]
    assert stages[0].added == list(anbn.productions)
    assert stages[2].added == Production.from_strings(["S2->", "C3->"])


def test_stages_do_not_share_state() -> None:
    stages = build_covering_grammar(anbn)

    assert len(anbn.productions) == 5
    for before, after in zip(stages, stages[1:]):
        assert before.productions is not after.productions
        assert after.added == after.productions - before.productions


def test_every_stage_is_canonical() -> None:
    for stage in build_covering_grammar(anbn):
        keys = [p.key for p in stage.productions]
        assert len(keys) == len(set(keys)), stage.name


def test_cnf_after_elimination() -> None:
    stages = build_covering_grammar(anbn)
    by_name = {s.name: s.productions for s in stages}

    assert by_name["eliminate epsilon"].of_shape(Shape.EPSILON) == []
    assert by_name["eliminate unit"].of_shape(Shape.EPSILON) == []
    assert by_name["eliminate unit"].of_shape(Shape.UNIT) == []


def test_closures_are_fixpoints_of_the_pipeline() -> None:
    from covergram.epsilon import add_all_nullable
    from covergram.unit import add_all_unit

    stages = build_covering_grammar(anbn)
    by_name = {s.name: s.productions for s in stages}

    assert add_all_nullable(by_name["nullable"]) == by_name["nullable"]
    assert add_all_unit(by_name["unit closure"]) == by_name["unit closure"]


def test_base_productions_survive_with_zero_distance() -> None:
    final = covering_grammar(anbn)

    for p in anbn.productions:
        assert p in final, p


def test_covering_grammar_derives_every_string() -> None:
    final = covering_grammar(anbn)

    for n in range(1, 6):
        for letters in itertools.product("ab", repeat=n):
            word = "".join(letters)
            assert min_distance(final, "S", word) is not None, word


def test_covering_grammar_distances() -> None:
    final = covering_grammar(anbn)

    assert min_distance(final, "S", "ab") == 0
    assert min_distance(final, "S", "aabb") == 0
    assert min_distance(final, "S", "a") == 1
    assert min_distance(final, "S", "b") == 1
    assert min_distance(final, "S", "aab") == 1
    assert min_distance(final, "S", "abb") == 1


def test_pipeline_with_nullable_base_grammar() -> None:
    g = Grammar(goal="S", terminal={"x"}, productions=["S->SS", "S->x", "S->", "T->S"])
    final = covering_grammar(g)

    assert final.of_shape(Shape.EPSILON) == []
    assert final.of_shape(Shape.UNIT) == []
    assert min_distance(final, "S", "xx") == 0
    assert min_distance(final, "T", "x") == 0


def test_pipeline_honours_settings() -> None:
    final = covering_grammar(anbn, CoverSettings(insertion_symbols=("X", "Y")))

    assert final.with_left("H") == []
    assert Production.parse("X->XY") in final
    assert Production.parse("X1->a") in final


def test_trace_lists_added_productions() -> None:
    stages = build_covering_grammar(anbn)
    df = trace(stages)

    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["stage", "production", "left", "right", "distance", "shape"]
    assert len(df) == sum(len(s.added) for s in stages)
    nullable = df[df["stage"] == "nullable"]
    assert list(nullable["production"]) == ["S2->", "C3->"]
    assert set(nullable["shape"]) == {"epsilon"}


def test_distance_table() -> None:
    df = distance_table(covering_grammar(anbn))

    assert df.at["A", "a"] == 0
    assert df.at["A", "b"] == 1
    assert df.at["S", "AB"] == 0
    assert df.at["I", "HA"] == MATH_NA
    assert list(df.columns) == sorted(df.columns)
