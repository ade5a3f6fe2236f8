"""Tests for diff data models."""

from loraxmod.diff.models import CHANGE_ORDER, ChangeType, DiffResult, SemanticChange
from loraxmod.tree.node import Point


def _change(change_type: ChangeType, **kwargs) -> SemanticChange:
    defaults = {"node_type": "function_declaration", "path": ""}
    defaults.update(kwargs)
    return SemanticChange(change_type=change_type, **defaults)


class TestChangeType:
    """Priority order."""

    def test_priority_order(self) -> None:
        assert [c.value for c in sorted(ChangeType, key=lambda c: c.priority)] == [
            "REMOVE",
            "RENAME",
            "MOVE",
            "MODIFY",
            "ADD",
        ]
        assert CHANGE_ORDER[0] is ChangeType.REMOVE

    def test_values_are_strings(self) -> None:
        assert ChangeType("RENAME") is ChangeType.RENAME
        assert ChangeType.ADD == "ADD"


class TestSemanticChange:
    """SemanticChange serialization."""

    def test_given_change_when_to_dict_then_contract_fields_only(self) -> None:
        """Default serialization has exactly the cross-binding fields."""
        # Given
        change = _change(
            ChangeType.RENAME,
            old_identity="foo",
            new_identity="bar",
            old_value="function foo() {}",
            new_value="function bar() {}",
            old_path="",
            new_path="",
        )

        # When
        data = change.to_dict()

        # Then
        assert data == {
            "type": "RENAME",
            "node_type": "function_declaration",
            "path": "",
            "old_identity": "foo",
            "new_identity": "bar",
            "old_value": "function foo() {}",
            "new_value": "function bar() {}",
        }

    def test_metadata_adds_paths_and_lines(self) -> None:
        change = _change(
            ChangeType.MOVE,
            old_path="",
            new_path="Foo > class_body",
            start=Point(3, 0),
            end=Point(5, 1),
        )

        data = change.to_dict(with_metadata=True)

        assert data["old_path"] == ""
        assert data["new_path"] == "Foo > class_body"
        assert data["start_line"] == 4
        assert data["end_line"] == 6

    def test_is_moved(self) -> None:
        assert _change(ChangeType.MOVE, old_path="", new_path="K").is_moved
        assert not _change(ChangeType.MODIFY, old_path="K", new_path="K").is_moved
        assert not _change(ChangeType.ADD, new_path="K").is_moved


class TestDiffResult:
    """DiffResult aggregation."""

    def test_empty_summary_has_every_type(self) -> None:
        assert DiffResult().summary == {
            "REMOVE": 0,
            "RENAME": 0,
            "MOVE": 0,
            "MODIFY": 0,
            "ADD": 0,
        }

    def test_summary_counts(self) -> None:
        result = DiffResult(
            changes=[
                _change(ChangeType.ADD),
                _change(ChangeType.ADD),
                _change(ChangeType.MODIFY),
            ]
        )

        assert result.summary["ADD"] == 2
        assert result.summary["MODIFY"] == 1
        assert result.summary["REMOVE"] == 0
        assert len(result) == 3
        assert len(result.by_type(ChangeType.ADD)) == 2

    def test_to_dict(self) -> None:
        result = DiffResult(changes=[_change(ChangeType.REMOVE, old_identity="foo")])

        data = result.to_dict()

        assert data["summary"]["REMOVE"] == 1
        assert data["changes"] == [
            {
                "type": "REMOVE",
                "node_type": "function_declaration",
                "path": "",
                "old_identity": "foo",
                "new_identity": None,
                "old_value": None,
                "new_value": None,
            }
        ]
