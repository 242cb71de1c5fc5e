import pytest

from spansmith.core.exceptions import ProtocolViolationError
from spansmith.core.stack import (
    RESET,
    HighlightStack,
    Scope,
    resolve_visible,
    stack_entry,
)


def test_reset_marker_hides_outer_scopes() -> None:
    assert resolve_visible(["a", "none", "b"]) == ["b"]


def test_duplicates_keep_their_outermost_position() -> None:
    assert resolve_visible(["x", "y", "x"]) == ["x", "y"]


def test_visible_scopes_are_ordered_outer_to_inner() -> None:
    assert resolve_visible(["a", "b", "c"]) == ["a", "b", "c"]


@pytest.mark.parametrize("stack", [[], ["none"], ["a", "none"], ["a", "none", "none"]])
def test_nothing_visible(stack: list[str]) -> None:
    assert resolve_visible(stack) == []


def test_only_the_most_recent_reset_matters() -> None:
    assert resolve_visible(["a", "none", "b", "none", "c", "d"]) == ["c", "d"]


def test_stack_entries_are_accepted_directly() -> None:
    assert resolve_visible([Scope("a"), RESET, Scope("b"), Scope("c")]) == ["b", "c"]


def test_stack_entry_converts_the_reset_name() -> None:
    assert stack_entry("none") is RESET
    assert stack_entry("keyword") == Scope("keyword")


def test_highlight_stack_push_pop() -> None:
    stack = HighlightStack()
    stack.push("markup")
    stack.push_reset()
    stack.push("keyword")
    assert stack.visible() == ["keyword"]
    assert stack.pop() == Scope("keyword")
    assert stack.pop() is RESET
    assert stack.visible() == ["markup"]
    assert len(stack) == 1


def test_popping_an_empty_stack_is_a_protocol_violation() -> None:
    with pytest.raises(ProtocolViolationError, match="without a matching start"):
        HighlightStack().pop()
