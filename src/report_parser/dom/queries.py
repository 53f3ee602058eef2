# src/report_parser/dom/queries.py
from typing import List

import soupsieve as sv
from bs4 import Tag


class ReportQueries:
    """
    Compiled structural patterns that locate rounds, turns, role labels and
    action rows inside a review report.

    This is the only place that knows how the report is laid out; the
    services and the extractor only ever ask these four questions.
    """

    ROUND_HEADING = "html > body > section > h1.kyoku-heading"
    ROUND_TO_TURN = "div:nth-child(4) > details:nth-child(2)"
    TURN_TO_ROLE = "span.role"
    TURN_TO_ACTION_ROW = "details > table > tbody > tr"

    def __init__(self):
        self.round_heading = sv.compile(self.ROUND_HEADING)
        self.round_to_turn = sv.compile(self.ROUND_TO_TURN)
        self.turn_to_role = sv.compile(self.TURN_TO_ROLE)
        self.turn_to_action_row = sv.compile(self.TURN_TO_ACTION_ROW)

    # All queries return matches in document order.

    def round_headings(self, document: Tag) -> List[Tag]:
        return self.round_heading.select(document)

    def turns(self, round_container: Tag) -> List[Tag]:
        """Turn detail blocks below the container that holds a round heading."""
        return self.round_to_turn.select(round_container)

    def roles(self, turn: Tag) -> List[Tag]:
        return self.turn_to_role.select(turn)

    def action_rows(self, turn: Tag) -> List[Tag]:
        return self.turn_to_action_row.select(turn)
