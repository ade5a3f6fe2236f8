"""Tests for the tree-sitter adapter (requires the Python grammar)."""

import pytest

pytest.importorskip("tree_sitter_python")

from loraxmod.core.errors import ErrorCode, TreeError  # noqa: E402
from loraxmod.tree.node import Point, SyntaxNode, named_children  # noqa: E402
from loraxmod.tree.treesitter import TreeSitterNode, load_language, make_parser  # noqa: E402

SOURCE = b"def greet(name):\n    return name\n"


@pytest.fixture(scope="module")
def root() -> TreeSitterNode:
    tree = make_parser("python").parse(SOURCE)
    node = TreeSitterNode.from_tree(tree)
    assert node is not None
    return node


class TestTreeSitterNode:
    """Node protocol over tree_sitter.Node."""

    def test_root(self, root: TreeSitterNode) -> None:
        assert isinstance(root, SyntaxNode)
        assert root.type == "module"
        assert root.is_named
        assert root.start == Point(0, 0)
        assert root.text.startswith("def greet(name):")

    def test_field_lookup(self, root: TreeSitterNode) -> None:
        func = named_children(root)[0]

        assert func.type == "function_definition"
        assert func.child_for_field("name").text == "greet"
        assert func.child_for_field("parameters").text == "(name)"
        assert func.child_for_field("nonexistent") is None

    def test_children_include_anonymous_tokens(self, root: TreeSitterNode) -> None:
        func = root.children[0]

        assert [c.type for c in func.children][:2] == ["def", "identifier"]
        assert not func.children[0].is_named

    def test_from_tree_none(self) -> None:
        assert TreeSitterNode.from_tree(None) is None


class TestLoadLanguage:
    """Grammar loading."""

    def test_cached(self) -> None:
        assert load_language("python") is load_language("python")

    def test_unknown_language(self) -> None:
        with pytest.raises(TreeError) as exc_info:
            load_language("cobol")

        assert exc_info.value.code == ErrorCode.TREE_UNSUPPORTED_LANGUAGE
