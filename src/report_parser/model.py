# ============================================
# file: src/report_parser/model.py
# ============================================
from __future__ import annotations

from typing import Annotated, Iterator, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ParserSettings(BaseModel):
    features: str = "html5lib"
    show_progress: bool = False
    player_label: str = "Player: "
    reference_label: str = "Mortal: "


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextElement(_Frozen):
    """A plain text token of an action description (e.g. 'Discard')."""
    kind: Literal["text"] = "text"
    token: str


class TileElement(_Frozen):
    """A tile face, identified by the href of the <use class='face'> node."""
    kind: Literal["tile"] = "tile"
    face_id: str


ActionElement = Annotated[Union[TextElement, TileElement], Field(discriminator="kind")]


class Action(_Frozen):
    """
    Symbolic identity of an action: the ordered text tokens and tile faces
    that describe it. Two actions are equal when their elements are equal
    one by one, so a tile '5m' never equals a text token '5m'.
    """
    elements: Tuple[ActionElement, ...]

    @field_validator("elements")
    @classmethod
    def _not_empty(cls, v: Tuple[ActionElement, ...]) -> Tuple[ActionElement, ...]:
        if not v:
            raise ValueError("an action needs at least one element")
        return v

    def __str__(self) -> str:
        return " ".join(
            e.token if isinstance(e, TextElement) else f"[{e.face_id}]"
            for e in self.elements
        )


class ScoredAction(_Frozen):
    action: Action
    quality: float
    probability: float


class Turn(_Frozen):
    player_choice: int
    reference_choice: int
    actions: Tuple[ScoredAction, ...]

    @model_validator(mode="after")
    def _check_choices(self) -> "Turn":
        n = len(self.actions)
        for name, idx in (("player_choice", self.player_choice),
                          ("reference_choice", self.reference_choice)):
            if not 0 <= idx < n:
                raise ValueError(f"{name}={idx} is out of range for {n} actions")
        return self

    @property
    def player_action(self) -> ScoredAction:
        return self.actions[self.player_choice]

    @property
    def reference_action(self) -> ScoredAction:
        return self.actions[self.reference_choice]

    @property
    def is_match(self) -> bool:
        return self.player_choice == self.reference_choice

    @property
    def loss(self) -> float:
        """Absolute quality gap between the reference's and the player's choice."""
        return abs(self.reference_action.quality - self.player_action.quality)


class Round(_Frozen):
    round_id: str
    turns: Tuple[Turn, ...] = ()


class ReportRecord(_Frozen):
    """The whole review report: every round in document order."""
    rounds: Tuple[Round, ...] = ()

    @property
    def turn_count(self) -> int:
        return sum(len(r.turns) for r in self.rounds)

    def iter_turns(self) -> Iterator[Tuple[Round, int, Turn]]:
        """Yields (round, index within round, turn) in document order."""
        for rnd in self.rounds:
            for i, turn in enumerate(rnd.turns):
                yield rnd, i, turn
