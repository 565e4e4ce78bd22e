"""Printer tests: canonical output, sugar recognition and round trips."""

import time

import pytest

from lamtext import (
    Var, Dup, Let, Lam, App, Ctr, Num, Op2, Oper, Rule, File,
    read_term, read_file, show_term, show_rule, show_file,
)
from lamtext.syntax.ast import U64_MAX, make_list, make_string


def test_atoms() -> None:
    assert show_term(Var("x")) == "x"
    assert show_term(Num(0)) == "0"
    assert show_term(Num(U64_MAX)) == str(U64_MAX)


def test_binders() -> None:
    assert show_term(Lam("x", Var("x"))) == "λx x"
    assert show_term(Let("x", Num(1), Var("x"))) == "let x = 1; x"
    assert show_term(Dup("a", "b", Var("x"), Var("a"))) == "dup a b = x; a"


def test_application_spine_is_flattened() -> None:
    term = App(App(App(Var("f"), Var("a")), Var("b")), Var("c"))
    assert show_term(term) == "(f a b c)"
    assert show_term(App(Var("f"), App(Var("g"), Var("x")))) == "(f (g x))"


@pytest.mark.parametrize("oper", list(Oper))
def test_operators(oper: Oper) -> None:
    assert show_term(Op2(oper, Var("a"), Num(2))) == f"({oper.symbol} a 2)"


def test_plain_constructors() -> None:
    assert show_term(Ctr("Foo", [])) == "(Foo)"
    assert show_term(Ctr("Pair", [Num(1), Var("y")])) == "(Pair 1 y)"


def test_list_sugar() -> None:
    assert show_term(read_term("[1,2,3]")) == "[1, 2, 3]"
    assert show_term(Ctr("Nil", [])) == "[]"
    assert show_term(make_list([make_list([]), Var("x")])) == "[[], x]"


def test_string_sugar() -> None:
    assert show_term(read_term('"ab"')) == '"ab"'
    assert show_term(Ctr("StrNil", [])) == '""'
    assert show_term(make_string('say "hi"')) == '`say "hi"`'


def test_string_inside_list() -> None:
    assert show_term(make_list([make_string("a"), Num(1)])) == '["a", 1]'


def test_deviating_list_shapes_are_not_sugared() -> None:
    a, b, c = Var("a"), Var("b"), Var("c")
    assert show_term(Ctr("Cons", [a, b, c])) == "(Cons a b c)"
    assert show_term(Ctr("Cons", [a, Var("rest")])) == "(Cons a rest)"
    assert show_term(Ctr("Nil", [a])) == "(Nil a)"
    # a bad tail deep in the chain disables sugar for the whole chain
    chain = Ctr("Cons", [a, Ctr("Cons", [b, Ctr("End", [])])])
    assert show_term(chain) == "(Cons a (Cons b (End)))"


def test_deviating_string_shapes_are_not_sugared() -> None:
    assert show_term(Ctr("StrCons", [Var("c"), Ctr("StrNil", [])])) == '(StrCons c "")'
    assert show_term(Ctr("StrCons", [Num(97), Ctr("Nil", [])])) == "(StrCons 97 [])"
    assert show_term(Ctr("StrCons", [Num(97)])) == "(StrCons 97)"
    assert show_term(Ctr("StrCons", [Num(0xD800), Ctr("StrNil", [])])) == '(StrCons 55296 "")'
    both = make_string("`\"")
    # only the outer chain contains both delimiters
    assert show_term(both) == '(StrCons 96 `"`)'


def test_rules_and_files() -> None:
    rule = Rule(Ctr("Id", [Var("x")]), Var("x"))
    assert show_rule(rule) == "(Id x) = x"
    assert show_file(File([rule, Rule(Ctr("Main", []), Num(1))])) == "(Id x) = x\n(Main) = 1"
    assert show_file(File([])) == ""
    assert str(rule) == "(Id x) = x"


def test_str_uses_the_printer() -> None:
    assert str(Op2(Oper.NEQ, Num(1), Num(2))) == "(!= 1 2)"


CANONICAL = [
    Var("x"),
    Num(7),
    Lam("f", Lam("x", App(Var("f"), App(Var("f"), Var("x"))))),
    App(App(Var("f"), Num(1)), Ctr("Pair", [Var("a"), Var("b")])),
    App(Lam("x", Var("x")), Var("y")),
    App(Ctr("Foo", []), Var("x")),
    Let("x", Op2(Oper.MUL, Num(3), Num(4)), Op2(Oper.SHR, Var("x"), Num(1))),
    Dup("a", "b", Ctr("Leaf", [Num(1)]), Ctr("Node", [Var("a"), Var("b")])),
    Op2(Oper.LTE, App(Var("g"), Var("z")), Op2(Oper.EQL, Num(0), Var("z"))),
    Ctr("Tree", [Ctr("Leaf", []), Ctr("Leaf", [])]),
]


@pytest.mark.parametrize("term", CANONICAL, ids=lambda t: show_term(t))
def test_canonical_terms_round_trip(term) -> None:
    assert read_term(show_term(term)) == term


def test_sugared_file_round_trip() -> None:
    source = '(Main) = (Print "hi" [1, 2, [3]])\n(Len Nil) = 0'
    assert show_file(read_file(source)) == '(Main) = (Print "hi" [1, 2, [3]])\n(Len []) = 0'


def test_deep_terms_print_without_recursion() -> None:
    depth = 20000
    term = Var("x")
    for _ in range(depth):
        term = Lam("x", term)
    assert show_term(term) == "λx " * depth + "x"

    items = [Num(i) for i in range(depth)]
    assert show_term(make_list(items)) == "[" + ", ".join(str(i) for i in range(depth)) + "]"

    spine = Var("f")
    for i in range(depth):
        spine = App(spine, Num(i))
    assert show_term(spine) == "(f " + " ".join(str(i) for i in range(depth)) + ")"


def test_long_chains_that_do_not_sugar_print_in_linear_time() -> None:
    length = 20000
    chain = Var("end")
    for i in reversed(range(length)):
        chain = Ctr("Cons", [Num(i), chain])
    start = time.perf_counter()
    shown = show_term(chain)
    elapsed = time.perf_counter() - start
    assert shown == "".join(f"(Cons {i} " for i in range(length)) + "end" + ")" * length
    # a rescan from every inner node takes tens of seconds at this length
    assert elapsed < 3


def test_string_with_both_delimiters_sugars_its_clean_suffix() -> None:
    term = make_string('`"ab')
    assert show_term(term) == '(StrCons 96 `"ab`)'

    length = 20000
    long_term = make_string('`"' + "x" * length)
    start = time.perf_counter()
    shown = show_term(long_term)
    elapsed = time.perf_counter() - start
    assert shown == '(StrCons 96 `"' + "x" * length + '`)'
    assert elapsed < 3


def test_shared_chain_is_printed_consistently() -> None:
    tail = Ctr("Cons", [Num(1), Var("t")])
    term = Ctr("Pair", [tail, Ctr("Cons", [Num(0), tail])])
    assert show_term(term) == "(Pair (Cons 1 t) (Cons 0 (Cons 1 t)))"
