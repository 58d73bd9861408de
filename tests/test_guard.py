"""Tests for glp.guard."""

import pytest

from glp.guard import not_empty


@pytest.mark.parametrize("value", ["group/app", "1", [1], {"a": 1}, 0])
def test_returns_value_unchanged(value: object) -> None:
    assert not_empty(value, "value") is value


@pytest.mark.parametrize("value", [None, "", [], ()])
def test_empty_raises(value: object) -> None:
    with pytest.raises(ValueError, match="project_id cannot be empty"):
        not_empty(value, "project_id")
