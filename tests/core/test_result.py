"""Tests for unwind.core.result module."""

import pytest

from unwind.core.errors import new_generic_error, new_not_found_error, wrap_error
from unwind.core.recovery import Abort
from unwind.core.result import Err, Ok, Result, collect_results, from_pair, try_result


class TestOk:
    """Test Ok class."""

    def test_create_ok(self):
        result = Ok(42)
        assert result.value == 42
        assert result.error is None
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap(self):
        assert Ok("hello").unwrap() == "hello"

    def test_unwrap_or(self):
        assert Ok(10).unwrap_or(99) == 10

    def test_map_chaining(self):
        result = Ok(3).map(lambda x: x * 2).map(lambda x: x + 1)
        assert result.unwrap() == 7

    def test_flat_map(self):
        def double_if_even(x: int) -> Result[int]:
            if x % 2 == 0:
                return Ok(x * 2)
            return Err(new_generic_error("odd number"))

        assert Ok(4).flat_map(double_if_even).unwrap() == 8
        assert Ok(3).flat_map(double_if_even).is_err()

    def test_and_then(self):
        assert Ok(10).and_then(lambda x: Ok(x + 5)).unwrap() == 15

    def test_map_err_no_op(self):
        result = Ok(42).map_err(lambda e: wrap_error("ctx", e))
        assert result == Ok(42)

    def test_inspect(self):
        seen = []
        assert Ok(42).inspect(seen.append) == Ok(42)
        assert seen == [42]

    def test_to_pair(self):
        assert Ok(5).to_pair() == (5, None)

    def test_to_dict(self):
        assert Ok(5).to_dict() == {"ok": True, "value": 5}


class TestErr:
    """Test Err class."""

    def test_create_err(self):
        error = new_generic_error("boom")
        result = Err(error)
        assert result.error is error
        assert result.value is None
        assert result.is_err() is True

    def test_unwrap_aborts_with_record(self):
        error = new_generic_error("boom")
        with pytest.raises(Abort) as exc_info:
            Err(error).unwrap()
        assert exc_info.value.payload is error

    def test_unwrap_or(self):
        assert Err(new_generic_error("x")).unwrap_or(0) == 0

    def test_unwrap_or_else(self):
        assert Err(new_generic_error("abc")).unwrap_or_else(lambda e: len(e.render())) == 3

    def test_map_is_skipped(self):
        calls = []
        result = Err(new_generic_error("x")).map(lambda v: calls.append(v))
        assert result.is_err()
        assert calls == []

    def test_map_err_wraps(self):
        result = Err(new_generic_error("inner")).map_err(lambda e: wrap_error("outer", e))
        assert result.error.render() == "outer: inner"

    def test_or_else_recovers(self):
        assert Err(new_generic_error("x")).or_else(lambda e: Ok(1)) == Ok(1)

    def test_inspect_err(self):
        seen = []
        error = new_generic_error("x")
        Err(error).inspect_err(seen.append)
        assert seen == [error]

    def test_to_pair_has_no_value(self):
        error = new_generic_error("x")
        assert Err(error).to_pair() == (None, error)

    def test_to_dict(self):
        d = Err(new_not_found_error("User", "9")).to_dict()
        assert d["ok"] is False
        assert d["error"]["tag"] == "NOT_FOUND"
        assert d["error"]["message"] == "User with ID '9' not found"


class TestPatternMatching:
    """Ok/Err support structural pattern matching."""

    def test_match(self):
        def describe(result: Result[int]) -> str:
            match result:
                case Ok(value):
                    return f"ok {value}"
                case Err(error):
                    return f"err {error}"
            return "unreachable"

        assert describe(Ok(1)) == "ok 1"
        assert describe(Err(new_generic_error("bad"))) == "err bad"


class TestUtilities:
    """Test from_pair, try_result and collect_results."""

    def test_from_pair_value(self):
        assert from_pair(3, None) == Ok(3)

    def test_from_pair_error_wins(self):
        error = new_generic_error("x")
        assert from_pair(3, error) == Err(error)

    def test_try_result_ok(self):
        assert try_result(lambda: int("42")) == Ok(42)

    def test_try_result_wraps_exception(self):
        result = try_result(lambda: 1 // 0)
        assert result.is_err()
        assert result.error.render().startswith("ZeroDivisionError:")

    def test_try_result_lets_abort_through(self):
        def boom():
            raise Abort("fatal")

        with pytest.raises(Abort):
            try_result(boom)

    def test_collect_results_all_ok(self):
        assert collect_results([Ok(1), Ok(2), Ok(3)]) == Ok([1, 2, 3])

    def test_collect_results_first_error(self):
        first = new_generic_error("first")
        second = new_generic_error("second")
        result = collect_results([Ok(1), Err(first), Err(second)])
        assert result == Err(first)
