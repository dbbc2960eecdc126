"""Tests for the Errorable and Cancellable result types."""

import pytest

from kindkit.core.results import (
    CANCELLED,
    Accepted,
    Cancelled,
    Err,
    Ok,
    UnknownOutcome,
    err,
    failed,
    succeeded,
)


class TestErrorable:
    def test_ok(self):
        result = Ok(["kind"])
        assert succeeded(result)
        assert not failed(result)
        assert result.value == ["kind"]

    def test_err_primary_message(self):
        result = err("first", "second")
        assert failed(result)
        assert result.error == "first"
        assert result.errors == ("first", "second")

    def test_err_requires_a_message(self):
        with pytest.raises(ValueError):
            Err(())

    def test_err_rejects_bare_string(self):
        """A str would otherwise be split into one error per character."""
        with pytest.raises(TypeError):
            Err("boom")

    def test_err_list_becomes_tuple(self):
        assert Err(["a"]).errors == ("a",)

    def test_ok_none_is_success(self):
        assert succeeded(Ok(None))


class TestCancellable:
    def test_accepted(self):
        assert Accepted("dev").value == "dev"

    def test_cancelled_singleton_compares_equal(self):
        assert CANCELLED == Cancelled()
        assert isinstance(CANCELLED, Cancelled)

    def test_unknown_outcome_is_not_success(self):
        outcome = UnknownOutcome("Creating Kind cluster...")
        assert not succeeded(outcome)
        assert not failed(outcome)
        assert outcome.title == "Creating Kind cluster..."
