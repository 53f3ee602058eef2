# src/review_shell/core/utils/path_utils.py
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and user paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_shell_package_root() -> Path:
        """
        Returns the absolute path of the review_shell package
        (the directory holding settings.json).
        """
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_shell_package_root() / "settings.json"

    # --- Helper methods ---

    @staticmethod
    def resolve_output_path(path: str) -> Path:
        """
        Expands '~' and makes the output path absolute.
        Creates the parent directory if it doesn't exist.
        """
        out = Path(path).expanduser().resolve()
        out.parent.mkdir(parents=True, exist_ok=True)
        return out
