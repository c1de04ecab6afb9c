"""Tests for unwind.core.errors module."""

from dataclasses import FrozenInstanceError
from typing import assert_never

import pytest

from unwind.core.errors import (
    Database,
    ErrorRecord,
    ErrorTag,
    Generic,
    NotFound,
    Validation,
    classify,
    contains,
    describe,
    find_kind,
    has_kind,
    new_database_error,
    new_generic_error,
    new_not_found_error,
    new_validation_error,
    wrap_error,
)


class TestConstructors:
    """Test the four kind constructors."""

    def test_validation(self):
        err = new_validation_error("age", "age cannot be negative")
        assert err.kind == Validation(field="age", message="age cannot be negative")
        assert err.cause is None
        assert err.tag == ErrorTag.VALIDATION

    def test_not_found(self):
        err = new_not_found_error("User", "999")
        assert err.kind == NotFound(resource="User", id="999")
        assert err.tag == ErrorTag.NOT_FOUND

    def test_database_wraps_cause(self):
        cause = new_generic_error("connection timeout")
        err = new_database_error("get user by id", cause)
        assert err.kind == Database(operation="get user by id")
        assert err.cause is cause
        assert err.tag == ErrorTag.DATABASE

    def test_generic(self):
        err = new_generic_error("boom")
        assert err.kind == Generic(message="boom")
        assert err.tag == ErrorTag.GENERIC

    def test_records_are_immutable(self):
        err = new_generic_error("boom")
        with pytest.raises(FrozenInstanceError):
            err.cause = new_generic_error("other")  # type: ignore[misc]

    def test_equal_records_compare_equal(self):
        assert new_not_found_error("User", "1") == new_not_found_error("User", "1")
        assert new_not_found_error("User", "1") != new_not_found_error("User", "2")


class TestRender:
    """Test deterministic rendering."""

    def test_validation_render(self):
        err = new_validation_error("age", "age cannot be negative")
        assert err.render() == "validation failed on field 'age': age cannot be negative"

    def test_not_found_render(self):
        assert new_not_found_error("User", "999").render() == "User with ID '999' not found"

    def test_database_render_includes_operation_and_cause(self):
        cause = new_generic_error("connection timeout")
        err = new_database_error("op", cause)
        text = err.render()
        assert "op" in text
        assert cause.render() in text
        assert text == "database error during op: connection timeout"

    def test_database_render_without_cause(self):
        err = ErrorRecord(Database(operation="flush"))
        assert err.render() == "database error during flush"

    def test_generic_render_with_cause(self):
        err = wrap_error("math operation failed", new_generic_error("cannot divide by zero"))
        assert err.render() == "math operation failed: cannot divide by zero"

    def test_render_is_idempotent(self):
        err = new_database_error("op", new_not_found_error("Row", "7"))
        assert err.render() == err.render()

    def test_str_matches_render(self):
        err = new_not_found_error("User", "1")
        assert str(err) == err.render()

    def test_nested_chain_renders_every_level(self):
        inner = new_generic_error("disk full")
        middle = new_database_error("write", inner)
        outer = wrap_error("save failed", middle)
        assert outer.render() == "save failed: database error during write: disk full"


class TestChain:
    """Test unwrap and chain walking."""

    def test_unwrap_returns_cause(self):
        cause = new_generic_error("connection timeout")
        err = new_database_error("op", cause)
        assert err.unwrap() == cause

    def test_unwrap_at_end_is_none(self):
        assert new_generic_error("x").unwrap() is None

    def test_chain_order(self):
        a = new_generic_error("a")
        b = wrap_error("b", a)
        c = wrap_error("c", b)
        assert list(c.chain()) == [c, b, a]

    def test_root_cause(self):
        root = new_not_found_error("User", "1")
        err = wrap_error("lookup", new_database_error("select", root))
        assert err.root_cause() == root
        assert root.root_cause() == root

    def test_to_dict_nests_cause(self):
        err = new_database_error("select", new_not_found_error("User", "1"))
        d = err.to_dict()
        assert d["tag"] == "DATABASE"
        assert d["operation"] == "select"
        assert d["cause"]["tag"] == "NOT_FOUND"
        assert d["cause"]["id"] == "1"


class TestClassify:
    """Test pattern matching over the closed kind set."""

    def test_not_found_fields_survive(self):
        match classify(new_not_found_error("User", "999")):
            case NotFound(resource=resource, id=id_):
                assert resource == "User"
                assert id_ == "999"
            case _:
                pytest.fail("expected NotFound")

    def test_exhaustive_match(self):
        def label(err: ErrorRecord) -> str:
            match classify(err):
                case Validation(field=field_name):
                    return f"validation:{field_name}"
                case NotFound(resource=resource):
                    return f"missing:{resource}"
                case Database(operation=operation):
                    return f"db:{operation}"
                case Generic(message=message):
                    return f"generic:{message}"
                case unreachable:
                    assert_never(unreachable)

        assert label(new_validation_error("age", "bad")) == "validation:age"
        assert label(new_not_found_error("User", "1")) == "missing:User"
        assert label(new_database_error("op", new_generic_error("x"))) == "db:op"
        assert label(new_generic_error("oops")) == "generic:oops"

    def test_find_kind_walks_chain(self):
        err = wrap_error("outer", new_database_error("op", new_not_found_error("User", "5")))
        found = find_kind(err, NotFound)
        assert found == NotFound(resource="User", id="5")

    def test_find_kind_missing(self):
        assert find_kind(new_generic_error("x"), Validation) is None
        assert find_kind(None, Validation) is None

    def test_has_kind(self):
        err = new_database_error("op", new_generic_error("x"))
        assert has_kind(err, Database)
        assert has_kind(err, Generic)
        assert not has_kind(err, NotFound)

    def test_contains(self):
        root = new_generic_error("timeout")
        err = wrap_error("ctx", root)
        assert contains(err, root)
        assert contains(err, new_generic_error("timeout"))
        assert not contains(err, new_generic_error("other"))
        assert not contains(None, root)


class TestDescribe:
    """Test display field extraction."""

    def test_not_found(self):
        fields = describe(new_not_found_error("User", "999"))
        assert fields == {
            "error": "User with ID '999' not found",
            "resource": "User",
            "id": "999",
        }

    def test_database_includes_original(self):
        fields = describe(new_database_error("op", new_generic_error("timeout")), include_message=False)
        assert fields == {"operation": "op", "original": "timeout"}

    def test_generic_has_only_message(self):
        assert describe(new_generic_error("x")) == {"error": "x"}
