from __future__ import annotations

from typing import Iterable, Iterator, List

from bs4 import Tag
from bs4.element import PageElement

from report_parser.dom.nodes import element_children, has_class, is_tag, is_text_node
from report_parser.errors import EmptyActionError, MissingAttributeError, StructureError, error_context
from report_parser.model import Action, ActionElement, TextElement, TileElement


class ActionResolver:
    """
    Builds the symbolic identity of an action from a run of DOM nodes.

    The same action shows up twice per turn, rendered differently: once as a
    bare mention next to a role label ("Player: Discard <tile>") and once as
    the first cell of a scored row. Both renderings resolve to the same
    Action, which is what lets the extractor pair them up.
    """

    def resolve(self, nodes: Iterable[PageElement]) -> Action:
        """
        Keeps non-blank text nodes and <svg class="tile"> elements, in order,
        and ignores everything else.

        Raises:
            StructureError: an <svg> is not a well-formed tile.
            MissingAttributeError: a tile face has no href.
            EmptyActionError: nothing qualifying was found.
        """
        elements: List[ActionElement] = []
        for node in nodes:
            if is_text_node(node):
                token = node.strip()
                if token:
                    elements.append(TextElement(token=token))
            elif is_tag(node, "svg"):
                with error_context("parse svg action element"):
                    elements.append(TileElement(face_id=self._tile_face(node)))

        if not elements:
            raise EmptyActionError("empty action")
        return Action(elements=tuple(elements))

    @staticmethod
    def role_siblings(role: Tag) -> Iterator[PageElement]:
        """Nodes following a role label, up to the next <details> block."""
        for sibling in role.next_siblings:
            if is_tag(sibling, "details"):
                break
            yield sibling

    @staticmethod
    def _tile_face(svg: Tag) -> str:
        if not has_class(svg, "tile"):
            raise StructureError("svg element class is not 'tile'")
        children = element_children(svg)
        if not children:
            raise StructureError("svg element has no child element")
        face = children[0]
        if face.name != "use":
            raise StructureError(f"expected <use>, found <{face.name}>")
        if not has_class(face, "face"):
            raise StructureError("use element class is not 'face'")
        href = face.get("href")
        if href is None:
            raise MissingAttributeError("no href attribute")
        return str(href)
