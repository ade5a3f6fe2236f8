"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides a small JavaScript-like schema plus builders for in-memory trees.
"""

import json
import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local loraxmod package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of loraxmod modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("loraxmod"):
        del sys.modules[module_name]

from loraxmod.schema.reader import SchemaReader  # noqa: E402
from loraxmod.tree.node import Point  # noqa: E402
from loraxmod.tree.static import StaticNode  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"
JS_SCHEMA_PATH = FIXTURES_DIR / "javascript-mini.json"
PY_SCHEMA_PATH = FIXTURES_DIR / "python-mini.json"


class JsTrees:
    """Builders for JavaScript-shaped ``StaticNode`` trees.

    Node text is always the concatenation its children imply, so intent
    values and diff values line up with what a real parser would report.
    Call ``program`` last: it assigns one row per named node in pre-order.
    """

    @staticmethod
    def anon(text: str, field: str | None = None) -> StaticNode:
        return StaticNode(type=text, text=text, is_named=False, field_name=field)

    @staticmethod
    def leaf(node_type: str, text: str, field: str | None = None) -> StaticNode:
        return StaticNode(type=node_type, text=text, field_name=field)

    def ident(self, name: str, field: str | None = None) -> StaticNode:
        return self.leaf("identifier", name, field)

    def number(self, value: str, field: str | None = None) -> StaticNode:
        return self.leaf("number", value, field)

    def params(self, *names: str) -> StaticNode:
        children = [self.anon("("), *(self.ident(n) for n in names), self.anon(")")]
        return StaticNode(
            type="formal_parameters",
            text="(" + ", ".join(names) + ")",
            children=children,
            field_name="parameters",
        )

    def ret(self, value: str = "1") -> StaticNode:
        return StaticNode(
            type="return_statement",
            text=f"return {value};",
            children=[self.anon("return"), self.number(value), self.anon(";")],
        )

    def block(self, *statements: StaticNode, field: str | None = "body") -> StaticNode:
        return StaticNode(
            type="statement_block",
            text="{" + "".join(s.text for s in statements) + "}",
            children=[self.anon("{"), *statements, self.anon("}")],
            field_name=field,
        )

    def func(
        self,
        name: str,
        *statements: StaticNode,
        params: tuple[str, ...] = (),
    ) -> StaticNode:
        """``function <name>(<params>) {<statements>}``; body defaults to ``return 1;``."""
        body = self.block(*(statements or (self.ret("1"),)))
        parameters = self.params(*params)
        return StaticNode(
            type="function_declaration",
            text=f"function {name}{parameters.text} {body.text}",
            children=[self.anon("function"), self.ident(name, "name"), parameters, body],
        )

    def klass(self, name: str, *members: StaticNode) -> StaticNode:
        body = StaticNode(
            type="class_body",
            text="{" + "".join(m.text for m in members) + "}",
            children=[self.anon("{"), *members, self.anon("}")],
            field_name="body",
        )
        return StaticNode(
            type="class_declaration",
            text=f"class {name} {body.text}",
            children=[self.anon("class"), self.ident(name, "name"), body],
        )

    def call(self, callee: str, *args: str) -> StaticNode:
        arguments = StaticNode(
            type="arguments",
            text="(" + ", ".join(args) + ")",
            children=[self.anon("("), *(self.number(a) for a in args), self.anon(")")],
            field_name="arguments",
        )
        expression = StaticNode(
            type="call_expression",
            text=f"{callee}{arguments.text}",
            children=[self.ident(callee, "function"), arguments],
        )
        return StaticNode(
            type="expression_statement",
            text=f"{expression.text};",
            children=[expression, self.anon(";")],
        )

    def program(self, *statements: StaticNode) -> StaticNode:
        root = StaticNode(
            type="program",
            text="\n".join(s.text for s in statements),
            children=list(statements),
        )
        _number_rows(root)
        return root


def _number_rows(root: StaticNode) -> None:
    row = 0
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_named:
            node.start = Point(row, 0)
            node.end = Point(row, len(node.text))
            row += 1
        else:
            node.start = node.end = Point(max(row - 1, 0), 0)
        stack.extend(reversed(node.children))


@pytest.fixture(scope="session")
def js_node_types() -> list[dict]:
    return json.loads(JS_SCHEMA_PATH.read_text(encoding="utf-8"))


@pytest.fixture(scope="session")
def js_schema() -> SchemaReader:
    return SchemaReader.from_file(JS_SCHEMA_PATH)


@pytest.fixture
def js() -> JsTrees:
    return JsTrees()


@pytest.fixture(scope="session")
def py_schema_path() -> Path:
    """Hand-written subset of the Python grammar's node types."""
    return PY_SCHEMA_PATH
