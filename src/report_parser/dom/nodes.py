# src/report_parser/dom/nodes.py
from typing import List, Optional

from bs4 import NavigableString, Tag
from bs4.element import PageElement, PreformattedString


def is_text_node(node: Optional[PageElement]) -> bool:
    """True for character data; comments, CDATA and doctypes are not text."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_tag(node: Optional[PageElement], name: str) -> bool:
    return isinstance(node, Tag) and node.name == name


def has_class(tag: Tag, class_name: str) -> bool:
    """Case-sensitive membership test on the tag's class list."""
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return class_name in classes


def element_children(tag: Tag) -> List[Tag]:
    """Child elements only, skipping text and comment nodes."""
    return [child for child in tag.children if isinstance(child, Tag)]
