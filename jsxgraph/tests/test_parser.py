import pytest

from jsxgraph.errors import ParseError
from jsxgraph.parser import (
    ExpressionValue,
    IdentifierValue,
    StringValue,
    iter_elements,
    language_for,
    parse_source,
)
from jsxgraph.parser.jsx_parser import TS_LANGUAGE, TSX_LANGUAGE


class TestJsxParser:
    """Test tree-sitter parsing and syntax classification."""

    def test_language_by_extension(self):
        assert language_for("a.ts") is TS_LANGUAGE
        assert language_for("a.tsx") is TSX_LANGUAGE
        assert language_for("a.jsx") is TSX_LANGUAGE
        assert language_for("a.js") is TSX_LANGUAGE

    def test_broken_source_raises_parse_error(self):
        with pytest.raises(ParseError) as exc_info:
            parse_source("function broken( {\n  return <div>;\n", "broken.tsx")
        assert exc_info.value.file_path == "broken.tsx"

    def test_elements_in_document_order(self):
        parsed = parse_source("const v = <div><span/><p>x</p></div>;\n", "v.tsx")
        names = [element.tag_name for element in iter_elements(parsed.root, parsed)]
        assert names == ["div", "span", "p"]

    def test_fragments_are_not_elements(self):
        source = "const v = <><Fragment><li/></Fragment><React.Fragment><b/></React.Fragment></>;\n"
        parsed = parse_source(source, "v.tsx")
        names = [element.tag_name for element in iter_elements(parsed.root, parsed)]
        assert names == ["li", "b"]

    def test_attribute_values(self):
        source = 'const v = <img src="./a.png" alt={label} title={`t ${x}`} hidden data-fingerprint="abc" />;\n'
        parsed = parse_source(source, "v.tsx")
        element = next(iter_elements(parsed.root, parsed))

        assert element.tag_name == "img"
        assert element.attribute("src").value == StringValue("./a.png")
        assert element.attribute("alt").value == IdentifierValue("label")
        assert element.attribute("title").value == ExpressionValue("`t ${x}`")
        assert element.attribute("hidden").value is None
        assert element.marker("data-fingerprint") == "abc"
        assert element.marker("data-missing") is None

    def test_positions_are_one_based_lines_and_character_columns(self):
        source = "const s = 'é';\nconst v = (\n  <div/>\n);\n"
        parsed = parse_source(source, "v.tsx")
        element = next(iter_elements(parsed.root, parsed))

        assert parsed.start(element.tag_node) == (3, 2)
        assert parsed.text(element.node) == "<div/>"

    def test_columns_count_utf16_code_units(self):
        prefix = "const s = '\U0001F600'; const v = "
        parsed = parse_source(prefix + "<div/>;\n", "v.tsx")
        element = next(iter_elements(parsed.root, parsed))

        assert len(prefix) == 25
        assert parsed.start(element.tag_node) == (1, 26)

    def test_member_expression_tags(self):
        parsed = parse_source("const v = <Menu.Item label='x' />;\n", "v.tsx")
        element = next(iter_elements(parsed.root, parsed))
        assert element.tag_name == "Menu.Item"
