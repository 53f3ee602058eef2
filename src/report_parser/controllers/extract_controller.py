from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional, Sequence, Union

from bs4 import BeautifulSoup, Tag
from tqdm.auto import tqdm

from report_parser.dom.nodes import element_children, is_text_node
from report_parser.dom.queries import ReportQueries
from report_parser.errors import (
    ActionNotFoundError,
    MissingIdError,
    MissingParentError,
    RoleCountError,
    RoleLabelMismatchError,
    RowShapeError,
    UnexpectedRoleError,
    error_context,
)
from report_parser.model import Action, ParserSettings, ReportRecord, Round, ScoredAction, Turn
from report_parser.services.action_resolve_service import ActionResolver
from report_parser.services.score_decode_service import ScoreDecoder
from review_shell.core.managers.config_manager import config_manager

logger = logging.getLogger(__name__)


class ReportExtractor:
    """
    Walks a review report and produces the full ReportRecord.

    Processing is sequential and in document order. The first structural
    violation aborts the whole run; the raised error carries a context chain
    such as ``parse round kyoku-1-0: parse turn 4: parse role mortal: ...``.
    """

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or self.settings_from_config()
        self.queries = ReportQueries()
        self.resolver = ActionResolver()
        self.decoder = ScoreDecoder()

    @staticmethod
    def settings_from_config() -> ParserSettings:
        """Builds parser settings from the 'parser' section of settings.json."""
        cfg = config_manager.get_nested("parser", {}) or {}
        roles = cfg.get("roles") or {}
        defaults = ParserSettings()
        return ParserSettings(
            features=cfg.get("features") or defaults.features,
            show_progress=config_manager.get_bool("parser.show_progress", defaults.show_progress),
            player_label=roles.get("player", defaults.player_label),
            reference_label=roles.get("reference", defaults.reference_label),
        )

    # -------- Entry points --------

    def extract_file(self, path: Union[str, Path]) -> ReportRecord:
        """Reads a UTF-8 report from disk and extracts it."""
        html = Path(path).read_text(encoding="utf-8")
        return self.extract(html)

    def extract(self, html: str) -> ReportRecord:
        start = time.perf_counter()
        # Strip a BOM so the parser sees the <html> root first
        soup = BeautifulSoup(html.replace("\ufeff", ""), self.settings.features)

        headings = self.queries.round_headings(soup)
        iterator = headings
        if self.settings.show_progress:
            iterator = tqdm(headings, desc="Parsing rounds", unit="round", leave=False)

        rounds: List[Round] = []
        for index, heading in enumerate(iterator):
            label = heading.get("id") or f"#{index}"
            with error_context(f"parse round {label}"):
                rounds.append(self._parse_round(heading))

        record = ReportRecord(rounds=tuple(rounds))
        logger.info(
            "Extracted %d rounds / %d turns in %.3fs.",
            len(record.rounds), record.turn_count, time.perf_counter() - start,
        )
        return record

    # -------- Rounds & turns --------

    def _parse_round(self, heading: Tag) -> Round:
        round_id = heading.get("id")
        if round_id is None:
            raise MissingIdError("missing round heading id")
        parent = heading.parent
        if not isinstance(parent, Tag):
            raise MissingParentError("missing round heading parent")

        turns: List[Turn] = []
        for index, turn in enumerate(self.queries.turns(parent)):
            with error_context(f"parse turn {index}"):
                turns.append(self._parse_turn(turn))

        logger.debug("Round %s: %d turns.", round_id, len(turns))
        return Round(round_id=str(round_id), turns=tuple(turns))

    def _parse_turn(self, turn: Tag) -> Turn:
        roles = self.queries.roles(turn)
        if len(roles) < 2:
            raise RoleCountError(f"expected player and mortal roles in turn, found {len(roles)}")
        if len(roles) > 2:
            raise UnexpectedRoleError(f"unexpected extra role in turn ({len(roles)} found)")

        with error_context("parse role player"):
            player = self._parse_role(roles[0], self.settings.player_label)
        with error_context("parse role mortal"):
            reference = self._parse_role(roles[1], self.settings.reference_label)

        actions: List[ScoredAction] = []
        for index, row in enumerate(self.queries.action_rows(turn)):
            with error_context(f"parse action row {index}"):
                actions.append(self._parse_scored_action(row))

        with error_context("match player action"):
            player_choice = self._find_action(actions, player)
        with error_context("match mortal action"):
            reference_choice = self._find_action(actions, reference)

        return Turn(
            player_choice=player_choice,
            reference_choice=reference_choice,
            actions=tuple(actions),
        )

    # -------- Roles & rows --------

    def _parse_role(self, role: Tag, expected_label: str) -> Action:
        first = next(iter(role.children), None)
        if first is None:
            raise RoleLabelMismatchError("role label has no child")
        if not is_text_node(first):
            raise RoleLabelMismatchError("role label child is not text")
        if str(first) != expected_label:
            raise RoleLabelMismatchError(f"unexpected role name {str(first)!r}, expected {expected_label!r}")

        with error_context("parse action"):
            return self.resolver.resolve(self.resolver.role_siblings(role))

    def _parse_scored_action(self, row: Tag) -> ScoredAction:
        cells = element_children(row)
        if len(cells) != 3:
            raise RowShapeError(f"expected 3 cells (action, Q, pi), found {len(cells)}")
        action_cell, quality_cell, probability_cell = cells

        with error_context("parse action"):
            action = self.resolver.resolve(action_cell.children)
        with error_context("parse action score quality"):
            quality = self.decoder.decode(quality_cell)
        with error_context("parse action score probability"):
            probability = self.decoder.decode(probability_cell)

        return ScoredAction(action=action, quality=quality, probability=probability)

    @staticmethod
    def _find_action(actions: Sequence[ScoredAction], action: Action) -> int:
        # First match wins; identical rows are not reported.
        for index, scored in enumerate(actions):
            if scored.action == action:
                return index
        raise ActionNotFoundError(f"action {action} not found")
