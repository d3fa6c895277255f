# mypy: allow-untyped-defs

import re

import pytest  # type: ignore

from stepparse.parser import GrammarError
from stepparse.result import FAILURE, Success
from stepparse.testutil import drive, step_trace


def digit_pairs(registry):
    return registry.choice(
        [
            registry.sequence([registry.str("1"), registry.str("2")]),
            registry.sequence([registry.str("3"), registry.str("4")]),
        ]
    )


# Literals.


@pytest.mark.parametrize(
    "literal, source, remaining",
    [
        ("abc", "abcdef", "def"),
        ("abc", "abc", ""),
        ("", "xyz", "xyz"),
        ("", "", ""),
    ],
)
def test_literal_match(registry, literal, source, remaining):
    task = registry.str(literal)(source)
    assert step_trace(task) == [True]
    assert task.result == Success(literal, remaining)


@pytest.mark.parametrize("literal, source", [("abc", "ab"), ("abc", "xabc"), ("a", "")])
def test_literal_mismatch(registry, literal, source):
    task = registry.str(literal)(source)
    assert step_trace(task) == [True]
    assert task.result == FAILURE


def test_literal_must_be_a_string(registry):
    with pytest.raises(GrammarError):
        registry.str(42)


# Patterns.


def test_pattern_match(registry):
    task = registry.pattern(r"\d+")("123abc")
    assert step_trace(task) == [True]
    assert task.result == Success("123", "abc")


def test_pattern_is_anchored(registry):
    assert registry.pattern(r"\d+").parse("x1") == FAILURE


def test_pattern_empty_match(registry):
    assert registry.pattern("a*").parse("bbb") == Success("", "bbb")


def test_pattern_flags(registry):
    parser = registry.pattern("abc", re.IGNORECASE)
    assert parser.parse("ABCd") == Success("ABC", "d")
    assert repr(parser) == "pattern('abc', 2)"
    assert repr(registry.pattern("abc")) == "pattern('abc')"


def test_compiled_pattern_is_the_same_parser(registry):
    assert registry.pattern(re.compile("ab")) is registry.pattern("ab")
    assert registry.pattern(re.compile("ab", re.I)) is registry.pattern("ab", re.I)
    with pytest.raises(GrammarError):
        registry.pattern(re.compile("ab"), re.I)


def test_pattern_is_compiled_once(registry, monkeypatch):
    parser = registry.pattern(r"\d+")

    def compile_again(*args, **kwargs):
        raise AssertionError("pattern compiled for a task")

    monkeypatch.setattr(re, "compile", compile_again)
    assert parser.parse("1a") == Success("1", "a")
    assert parser.parse("22b") == Success("22", "b")


@pytest.mark.parametrize("expr", ["(", b"ab", None])
def test_bad_pattern(registry, expr):
    with pytest.raises(GrammarError):
        registry.pattern(expr)


# Sequences.


def test_sequence_one_child_per_step(registry):
    parser = registry.sequence([registry.str("a"), registry.str("b"), registry.str("c")])
    task = parser("abcd")
    assert step_trace(task) == [False, False, True]
    assert task.result == Success(["a", "b", "c"], "d")


def test_sequence_failure_skips_the_rest(registry):
    later = registry.str("c")
    parser = registry.sequence([registry.str("a"), registry.str("x"), later])
    task = parser("abc")
    assert drive(task) == 2
    assert task.result == FAILURE
    assert later.task_count == 0


def test_sequence_failure_on_first_child(registry):
    parser = registry.sequence([registry.str("x"), registry.str("a")])
    assert step_trace(parser("abc")) == [True]
    assert parser("abc").result == FAILURE


@pytest.mark.parametrize("source", ["", "anything"])
def test_empty_sequence(registry, source):
    task = registry.sequence([])(source)
    assert step_trace(task) == [True]
    assert task.result == Success([], source)


def test_sequence_values_are_nested(registry):
    inner = registry.sequence([registry.str("a"), registry.pattern("[0-9]")])
    parser = registry.sequence([inner, registry.str(";")])
    assert parser.parse("a1;b") == Success([["a", "1"], ";"], "b")


def test_deeply_nested_sequence(registry):
    depth = 300
    parser = registry.str("a")
    for _ in range(depth):
        parser = registry.sequence([parser])
    task = parser("ab")
    # Every level resolves in the same cascade.
    assert drive(task) == 1
    value = task.result.value
    for _ in range(depth):
        assert isinstance(value, list) and len(value) == 1
        value = value[0]
    assert value == "a"
    assert task.result.remaining == "b"


@pytest.mark.parametrize("kind", ["choice", "ordered_choice"])
def test_deeply_nested_choice(registry, kind):
    depth = 250
    build = getattr(registry, kind)
    parser = registry.str("a")
    for _ in range(depth):
        parser = build([registry.str("x"), parser])
    task = parser("ab")
    assert drive(task) == 1
    assert task.result == Success("a", "b")


# Choices.


def test_choice_first_alternative(registry):
    assert digit_pairs(registry).parse("12") == Success(["1", "2"], "")


def test_choice_second_alternative(registry):
    assert digit_pairs(registry).parse("34") == Success(["3", "4"], "")


def test_choice_no_alternative(registry):
    task = digit_pairs(registry)("56")
    assert step_trace(task) == [True]
    assert task.result == FAILURE


@pytest.mark.parametrize("source", ["", "anything"])
def test_empty_choice(registry, source):
    task = registry.choice([])(source)
    assert step_trace(task) == [True]
    assert task.result == FAILURE


def test_choice_steps_every_pending_alternative(registry):
    long = registry.sequence([registry.str("a"), registry.str("b"), registry.str("c")])
    short = registry.sequence([registry.str("x"), registry.str("y")])
    parser = registry.choice([long, short])
    task = parser("abc")
    assert not task.step()
    assert long("abc").steps == 1
    assert short("abc").steps == 1
    assert short("abc").result == FAILURE
    assert not task.step()
    assert long("abc").steps == 2
    assert short("abc").steps == 1
    assert task.step()
    assert task.result == Success(["a", "b", "c"], "")


def test_choice_tie_break_by_declaration_order(registry):
    parser = registry.choice([registry.str("a"), registry.pattern("a+")])
    assert parser.parse("aa") == Success("a", "a")
    parser = registry.choice([registry.pattern("a+"), registry.str("a")])
    assert parser.parse("aa") == Success("aa", "")


def test_choice_takes_the_first_to_finish(registry):
    longer = registry.sequence([registry.str("a"), registry.str("b")])
    parser = registry.choice([longer, registry.str("a")])
    task = parser("ab")
    assert drive(task) == 1
    assert task.result == Success("a", "b")


def test_choice_falls_through_failures(registry):
    parser = registry.choice([registry.str("x"), registry.str("y"), registry.str("a")])
    assert parser.parse("a") == Success("a", "")


def test_choice_lists_the_same_alternative_twice(registry):
    slow = registry.sequence([registry.str("a"), registry.str("b")])
    parser = registry.choice([slow, slow])
    task = parser("ab")
    assert drive(task) == 2
    assert slow("ab").steps == 2
    assert task.result == Success(["a", "b"], "")


# Ordered choices.


def test_ordered_choice_waits_for_earlier_alternatives(registry):
    longer = registry.sequence([registry.str("a"), registry.str("b")])
    parser = registry.ordered_choice([longer, registry.str("a")])
    task = parser("ab")
    assert drive(task) == 2
    assert task.result == Success(["a", "b"], "")


def test_ordered_choice_after_earlier_failure(registry):
    failing = registry.sequence([registry.str("a"), registry.str("x")])
    parser = registry.ordered_choice([failing, registry.str("a")])
    task = parser("ab")
    assert drive(task) == 2
    assert task.result == Success("a", "b")


def test_ordered_choice_all_fail(registry):
    parser = registry.ordered_choice([registry.str("x"), registry.str("y")])
    assert parser.parse("a") == FAILURE
    assert registry.ordered_choice([]).parse("a") == FAILURE
