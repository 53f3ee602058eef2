from __future__ import annotations

import re

from bs4 import Tag

from report_parser.dom.nodes import element_children, has_class, is_tag, is_text_node
from report_parser.errors import NumericFormatError, StructureError, error_context

# ASCII decimal literal; float() alone would also take "inf", "nan", "1_0", padding and non-ASCII digits.
_DECIMAL_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class ScoreDecoder:
    """
    Rebuilds a score that the report renders as two styled fragments:

        <td><span class="int">12.</span><span class="frac">34</span></td>  ->  12.34

    The integer fragment keeps the decimal separator, so the value is the
    plain concatenation of both fragments.
    """

    INT_CLASS = "int"
    FRAC_CLASS = "frac"

    def decode(self, cell: Tag) -> float:
        children = element_children(cell)
        if len(children) != 2:
            raise StructureError(f"expected 2 score fragments, found {len(children)}")
        first, second = children

        with error_context("parse action score int"):
            int_part = self._fragment_text(first, self.INT_CLASS)
        if not int_part.endswith("."):
            raise StructureError(f"integer part {int_part!r} doesn't end with '.'")
        with error_context("parse action score frac"):
            frac_part = self._fragment_text(second, self.FRAC_CLASS)

        return self._to_float(int_part + frac_part)

    @staticmethod
    def _fragment_text(node: Tag, expected_class: str) -> str:
        """Returns the verbatim text of a <span class='expected_class'> fragment."""
        if not is_tag(node, "span"):
            raise StructureError(f"expected <span>, found <{node.name}>")
        if not has_class(node, expected_class):
            raise StructureError(f"missing expected class {expected_class!r}")
        contents = node.contents
        if len(contents) != 1:
            raise StructureError(f"expected a single child, found {len(contents)}")
        if not is_text_node(contents[0]):
            raise StructureError("child is not text")
        return str(contents[0])

    @staticmethod
    def _to_float(combined: str) -> float:
        if not _DECIMAL_LITERAL.fullmatch(combined):
            raise NumericFormatError(f"cannot parse float from {combined!r}")
        try:
            return float(combined)
        except ValueError as e:
            raise NumericFormatError(f"cannot parse float from {combined!r}") from e
