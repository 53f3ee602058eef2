# src/review_shell/core/services/metrics_service.py
import logging
import math
from typing import Any, Dict, List

import pandas as pd
from pydantic import BaseModel

from report_parser.model import ReportRecord

logger = logging.getLogger(__name__)

TURN_COLUMNS = [
    "round_id", "turn", "player_choice", "reference_choice",
    "player_quality", "reference_quality", "loss", "is_match",
]


class ReviewMetrics(BaseModel):
    """
    Summary of a review. Both ratios are NaN when the report has no turns.
    """
    turn_count: int
    average_loss: float
    correct_ratio: float

    def format(self, precision: int = 3) -> str:
        return (
            f"average loss:  {self.average_loss:.{precision}f}\n"
            f"correct ratio: {self.correct_ratio:.{precision}f}"
        )


class MetricsService:
    """
    Reduces an extracted ReportRecord to per-turn rows and summary statistics.
    """

    def turn_frame(self, record: ReportRecord) -> pd.DataFrame:
        """
        One row per turn, in document order.

        Returns:
            pd.DataFrame: columns as in TURN_COLUMNS; empty (but typed) for a
                          report without turns.
        """
        rows: List[Dict[str, Any]] = []
        for rnd, index, turn in record.iter_turns():
            rows.append({
                "round_id": rnd.round_id,
                "turn": index,
                "player_choice": turn.player_choice,
                "reference_choice": turn.reference_choice,
                "player_quality": turn.player_action.quality,
                "reference_quality": turn.reference_action.quality,
                "loss": turn.loss,
                "is_match": turn.is_match,
            })
        df = pd.DataFrame(rows, columns=TURN_COLUMNS)
        return df.astype({"loss": float, "is_match": bool})

    def summarize(self, record: ReportRecord) -> ReviewMetrics:
        df = self.turn_frame(record)
        # mean() of an empty column is NaN, which is the documented result for 0 turns
        metrics = ReviewMetrics(
            turn_count=len(df),
            average_loss=float(df["loss"].mean()),
            correct_ratio=float(df["is_match"].astype(float).mean()),
        )
        if math.isnan(metrics.average_loss):
            logger.warning("Report contains no turns; statistics are undefined.")
        return metrics
