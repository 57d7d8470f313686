from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List

import pytest

from exprcalc import receives_environment
from exprcalc.evaluator import eval_expr
from exprcalc.runtime import invocable_with
from exprcalc.types import Frame
from tests.support.harness import (
    EvaluationError,
    NotCallable,
    parse_pipeline,
    run_program,
    run_runtime_case,
)


def _explode(value: object) -> object:
    raise ValueError(f"boom: {value}")


@receives_environment
def _size(env: Mapping) -> float:
    return float(len(env))


@receives_environment
def _lookup(env: Mapping, key: str) -> Any:
    return env[key]


def _add(a: float, b: float) -> float:
    return a + b


ENV: Dict[str, Any] = {
    "add": _add,
    "zero": lambda: 42.0,
    "join": lambda *parts: "".join(parts),
    "max": max,
    "fails": _explode,
    "size": _size,
    "lookup": _lookup,
    "seven": 7,
    "word": "calc",
}

SCENARIOS = [
    pytest.param("add(1, 2);", ("number", 3), None, id="call-basic"),
    pytest.param("add(add(1, 2), 3);", ("number", 6), None, id="call-nested"),
    pytest.param("zero();", ("number", 42), None, id="call-no-args"),
    pytest.param("join('a', 'b', word);", ("string", "abcalc"), None, id="call-varargs"),
    pytest.param("join();", ("string", ""), None, id="call-varargs-empty"),
    pytest.param("max(1, 5, 3);", ("number", 5), None, id="call-builtin"),
    pytest.param("add((1, 2), 3);", ("number", 5), None, id="call-statement-arg"),
    pytest.param("add(1 ? 2 : 3, 4);", ("number", 6), None, id="call-conditional-arg"),
    pytest.param("add(1, 2) * 2;", ("number", 6), None, id="call-in-dyadic"),
    pytest.param("0 ? nope() : 1;", ("number", 1), None, id="untaken-branch-not-called"),
    pytest.param("add;", ("same", _add), None, id="callable-as-value"),
    pytest.param("size();", ("number", len(ENV)), None, id="receiver-environment"),
    pytest.param("lookup('word');", ("string", "calc"), None, id="receiver-with-args"),
    pytest.param("add(1);", None, NotCallable, id="too-few-args"),
    pytest.param("add(1, 2, 3);", None, NotCallable, id="too-many-args"),
    pytest.param("zero(1);", None, NotCallable, id="zero-arity-with-arg"),
    pytest.param("lookup();", None, NotCallable, id="receiver-arity"),
    pytest.param("seven(1);", None, NotCallable, id="number-not-callable"),
    pytest.param("word();", None, NotCallable, id="string-not-callable"),
    pytest.param("nope();", None, NotCallable, id="missing-callee"),
    pytest.param("fails(1);", None, ValueError, id="callable-error-propagates"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc, ENV)


@pytest.fixture
def calls() -> List[object]:
    return []


@pytest.fixture
def tracing_env(calls: List[object]) -> Dict[str, Any]:
    def hit(value: object) -> object:
        calls.append(value)
        return value

    return {
        "hit": hit,
        "ignore": lambda *args: 0.0,
        "first": lambda a, b: a,
    }


def test_arguments_evaluated_left_to_right(calls, tracing_env) -> None:
    run_program("ignore(hit(1), hit(2), hit(3));", tracing_env)

    assert calls == [1.0, 2.0, 3.0]


def test_unused_arguments_are_still_evaluated(calls, tracing_env) -> None:
    assert run_program("first(hit('a'), hit('b'));", tracing_env) == "a"
    assert calls == ["a", "b"]


def test_arguments_evaluated_before_arity_check(calls, tracing_env) -> None:
    with pytest.raises(NotCallable):
        run_program("first(hit(1), hit(2), hit(3));", tracing_env)

    assert calls == [1.0, 2.0, 3.0]


def test_arguments_evaluated_before_missing_callee(calls, tracing_env) -> None:
    with pytest.raises(NotCallable):
        run_program("nope(hit(1));", tracing_env)

    assert calls == [1.0]


def test_dyadic_operands_evaluated_left_to_right(calls, tracing_env) -> None:
    assert run_program("hit(1) - hit(2) - hit(3);", tracing_env) == 2.0
    assert calls == [1.0, 2.0, 3.0]


def test_conditional_evaluates_one_branch(calls, tracing_env) -> None:
    assert run_program("hit(0) ? hit(1) : hit(2);", tracing_env) == 2.0
    assert calls == [0.0, 2.0]


def test_statements_run_in_order(calls, tracing_env) -> None:
    run_program("hit(1), hit(2); hit(3);", tracing_env)

    assert calls == [1.0, 2.0, 3.0]


def test_callee_resolved_after_arguments() -> None:
    env: Dict[str, Any] = {}

    def define() -> float:
        env["g"] = lambda x: x * 2
        return 21.0

    env["define"] = define

    assert run_program("g(define());", env) == 42.0


def test_environment_is_read_only_to_callables() -> None:
    @receives_environment
    def poke(env: Mapping) -> None:
        env["x"] = 1.0  # type: ignore[index]

    env = {"poke": poke}

    with pytest.raises(TypeError):
        run_program("poke();", env)
    assert "x" not in env


def test_receiver_is_a_mapping_view() -> None:
    seen: List[Mapping] = []

    @receives_environment
    def grab(env: Mapping) -> float:
        seen.append(env)
        return 0.0

    run_program("grab();", {"grab": grab, "word": "calc"})

    assert isinstance(seen[0], Mapping)
    assert seen[0]["word"] == "calc"


def test_callable_errors_are_not_wrapped() -> None:
    with pytest.raises(ValueError, match="boom: 1"):
        run_program("fails(1);", ENV)


def test_not_callable_reports_location() -> None:
    with pytest.raises(NotCallable) as exc_info:
        run_program("1;\n  nope(2);", ENV)

    err = exc_info.value
    assert isinstance(err, EvaluationError)
    assert err.name == "nope"
    assert err.arg_count == 1
    assert str(err).endswith("(line 2, col 3)")


def test_not_callable_message_names_value_kind() -> None:
    with pytest.raises(NotCallable) as exc_info:
        run_program("seven();", ENV)

    assert "'seven' cannot be called with 0 argument(s)" in str(exc_info.value)
    assert "int value is not callable" in str(exc_info.value)


def test_invocable_with() -> None:
    assert invocable_with(_add, 2) is None
    assert invocable_with(_add, 1) is not None
    assert invocable_with(max, 3) is None
    assert invocable_with(7, 0) is not None


def test_eval_expr_accepts_frame() -> None:
    tree = parse_pipeline("add(1, 2);")

    assert eval_expr(tree, Frame(ENV)) == 3.0
    assert eval_expr(tree, ENV) == 3.0


def test_eval_without_environment() -> None:
    assert eval_expr(parse_pipeline("missing;")) is None
    with pytest.raises(NotCallable):
        eval_expr(parse_pipeline("f();"))
