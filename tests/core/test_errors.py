"""Tests for error types and codes."""

import pytest

from loraxmod.core.errors import (
    ConfigError,
    ErrorCode,
    LoraxError,
    SchemaError,
    TreeError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.SCHEMA_MALFORMED, 1000),
            (ErrorCode.SCHEMA_NOT_FOUND, 1000),
            (ErrorCode.TREE_NO_ROOT, 2000),
            (ErrorCode.TREE_UNSUPPORTED_LANGUAGE, 2000),
            (ErrorCode.CONFIG_PARSE_ERROR, 3000),
            (ErrorCode.CONFIG_INVALID_VALUE, 3000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # When
        value = code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestLoraxError:
    """Base error behavior tests."""

    def test_given_error_when_str_then_includes_code_and_name(self) -> None:
        """String form is '[code] NAME: message'."""
        # Given
        error = TreeError.no_root("diff", "old")

        # When
        text = str(error)

        # Then
        assert text == "[2001] TREE_NO_ROOT: diff: old tree has no root node"

    def test_to_dict(self) -> None:
        error = LoraxError(code=ErrorCode.TREE_NO_ROOT, message="boom", details={"k": 1})

        assert error.to_dict() == {
            "code": 2001,
            "error": "TREE_NO_ROOT",
            "message": "boom",
            "retryable": False,
            "details": {"k": 1},
        }

    def test_is_exception(self) -> None:
        with pytest.raises(LoraxError):
            raise SchemaError.not_found("cobol", [])


class TestSchemaError:
    """SchemaError constructors."""

    def test_malformed_with_node_type(self) -> None:
        error = SchemaError.malformed("fields must be a mapping", node_type="call", source="x.json")

        assert error.code == ErrorCode.SCHEMA_MALFORMED
        assert "in 'call'" in error.message
        assert error.details["source"] == "x.json"

    def test_malformed_without_node_type(self) -> None:
        error = SchemaError.malformed("not a list")

        assert error.message == "Malformed schema: not a list"

    def test_not_found_lists_tried_paths(self) -> None:
        error = SchemaError.not_found("cobol", ["/a/cobol.json", "/b/cobol.json"])

        assert error.code == ErrorCode.SCHEMA_NOT_FOUND
        assert "2 locations" in error.message
        assert error.details["tried"] == ["/a/cobol.json", "/b/cobol.json"]


class TestTreeError:
    """TreeError constructors."""

    def test_no_root_details(self) -> None:
        error = TreeError.no_root("extract_all", "input")

        assert error.details == {"operation": "extract_all", "tree": "input"}

    def test_unsupported_language(self) -> None:
        error = TreeError.unsupported_language("cobol", "no grammar package")

        assert error.code == ErrorCode.TREE_UNSUPPORTED_LANGUAGE
        assert "cobol" in error.message


class TestConfigError:
    """ConfigError constructors."""

    def test_parse_error(self) -> None:
        error = ConfigError.parse_error("/x/config.yaml", "bad indent")

        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert error.details == {"path": "/x/config.yaml", "reason": "bad indent"}

    def test_invalid_value_stringifies_value(self) -> None:
        error = ConfigError.invalid_value("diff.similarity_threshold", 2, "out of range")

        assert error.details["value"] == "2"

