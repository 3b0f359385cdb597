"""
Closed set of syntax variants the injector and graph builder care about.

`classify` turns a raw tree-sitter node into one of `FunctionDecl`, `Element`
or `CallExpr` (or `None` for anything else); attribute values are one of
`StringValue`, `IdentifierValue` or `ExpressionValue`.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Union
from tree_sitter import Node

from .jsx_parser import ParsedSource

FRAGMENT_NAMES = {"Fragment", "React.Fragment"}

FUNCTION_DECLARATIONS = {"function_declaration", "generator_function_declaration"}
FUNCTION_VALUES = {"arrow_function", "function_expression", "function"}
ELEMENT_NODES = {"jsx_element", "jsx_self_closing_element"}


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class IdentifierValue:
    name: str


@dataclass(frozen=True)
class ExpressionValue:
    text: str


AttributeValue = Union[StringValue, IdentifierValue, ExpressionValue]


@dataclass
class Attribute:
    name: str
    value: Optional[AttributeValue]
    node: Node


@dataclass
class FunctionDecl:
    name: str
    node: Node


@dataclass
class Element:
    tag_name: str
    node: Node
    tag_node: Node
    attributes: List[Attribute] = field(default_factory=list)

    def attribute(self, name: str) -> Optional[Attribute]:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def marker(self, attribute_name: str) -> Optional[str]:
        """Value of a string-literal marker attribute, if present."""
        attr = self.attribute(attribute_name)
        if attr is not None and isinstance(attr.value, StringValue):
            return attr.value.value
        return None


@dataclass
class CallExpr:
    callee: str
    node: Node


SyntaxItem = Union[FunctionDecl, Element, CallExpr]


def _named(node: Node) -> List[Node]:
    return [child for child in node.named_children if child.type != "comment"]


def attribute_value(node: Optional[Node], parsed: ParsedSource) -> Optional[AttributeValue]:
    if node is None:
        return None
    if node.type == "string":
        return StringValue(parsed.text(node)[1:-1])
    if node.type == "jsx_expression":
        inner = _named(node)
        if len(inner) == 1 and inner[0].type == "identifier":
            return IdentifierValue(parsed.text(inner[0]))
        if inner:
            return ExpressionValue(parsed.text(inner[0]))
        return ExpressionValue("")
    return ExpressionValue(parsed.text(node))


def parse_attribute(node: Node, parsed: ParsedSource) -> Optional[Attribute]:
    parts = _named(node)
    if not parts:
        return None
    value = attribute_value(parts[1], parsed) if len(parts) > 1 else None
    return Attribute(name=parsed.text(parts[0]), value=value, node=node)


def tag_node_of(node: Node) -> Optional[Node]:
    """The opening (or self-closing) tag node of an element node."""
    if node.type == "jsx_self_closing_element":
        return node
    tag = node.child_by_field_name("open_tag")
    if tag is None:
        for child in node.named_children:
            if child.type == "jsx_opening_element":
                return child
    return tag


def classify_element(node: Node, parsed: ParsedSource) -> Optional[Element]:
    tag = tag_node_of(node)
    if tag is None:
        return None
    name_node = tag.child_by_field_name("name")
    if name_node is None:
        return None
    tag_name = parsed.text(name_node)
    if tag_name in FRAGMENT_NAMES:
        return None

    attributes = []
    for child in tag.named_children:
        if child.type == "jsx_attribute":
            attr = parse_attribute(child, parsed)
            if attr is not None:
                attributes.append(attr)
    return Element(tag_name=tag_name, node=node, tag_node=tag, attributes=attributes)


def classify(node: Node, parsed: ParsedSource) -> Optional[SyntaxItem]:
    """Map a raw node onto a syntax variant, or `None`."""
    if node.type in FUNCTION_DECLARATIONS:
        name = node.child_by_field_name("name")
        if name is not None:
            return FunctionDecl(name=parsed.text(name), node=node)
        return None

    if node.type == "variable_declarator":
        name = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name is not None and name.type == "identifier" and value is not None and value.type in FUNCTION_VALUES:
            return FunctionDecl(name=parsed.text(name), node=node)
        return None

    # `export default function App() {}` may come back as a named expression
    if node.type in FUNCTION_VALUES and node.parent is not None and node.parent.type == "export_statement":
        name = node.child_by_field_name("name")
        if name is not None:
            return FunctionDecl(name=parsed.text(name), node=node)
        return None

    if node.type in ELEMENT_NODES:
        return classify_element(node, parsed)

    if node.type == "call_expression":
        callee = node.child_by_field_name("function")
        if callee is not None and callee.type == "identifier":
            return CallExpr(callee=parsed.text(callee), node=node)
        return None

    return None


def iter_elements(node: Node, parsed: ParsedSource):
    """Yield every element under ``node`` in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in ELEMENT_NODES:
            element = classify_element(current, parsed)
            if element is not None:
                yield element
        stack.extend(reversed(current.children))
