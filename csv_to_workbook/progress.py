"""Progress information passed to the caller's progress callback."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class ProgressInfo:
    """One progress notification.

    Per-file notifications carry ``current_file_*`` fields; per-run
    notifications carry ``total_files_*`` fields and leave the file name
    empty. Unset numeric fields are -1.
    """
    current_file_name: Optional[str] = None
    current_file_position: int = -1
    current_file_max: int = -1
    message: Optional[str] = None
    total_files_position: int = -1
    total_files_max: int = -1

    @property
    def current_file_percentage(self) -> Optional[int]:
        """``position / max * 100`` truncated, or None when max is not positive."""
        if self.current_file_max <= 0:
            return None
        return self.current_file_position * 100 // self.current_file_max


ProgressCallback = Callable[[ProgressInfo], None]


def _ignore(info):
    return None


def safe_reporter(callback: Optional[ProgressCallback]) -> ProgressCallback:
    """Wrap ``callback`` so that it can never break an import.

    Progress is best-effort: a failing callback is logged and otherwise
    ignored. ``None`` gives a reporter that does nothing.
    """
    if callback is None:
        return _ignore
    if getattr(callback, "_is_safe_reporter", False):
        return callback

    def report(info: ProgressInfo) -> None:
        try:
            callback(info)
        except Exception:
            logger.exception("Progress callback failed; continuing without it")

    report._is_safe_reporter = True
    return report
