"""Debug output for pagination decisions."""

from __future__ import annotations

from tqdm import tqdm

from .constants import DEBUG_PAGINATION


def _debug(*, msg: str, scope: str = "pages") -> None:
    """Print a pagination trace line when ``DEBUG_PAGINATION`` is set.

    Lines go through ``tqdm.write`` so they do not tear an active progress bar.

    Args:
        msg: Message to print.
        scope: Short tag naming the loop that emitted the message.
    """

    if DEBUG_PAGINATION:
        tqdm.write(f"[{scope}] {msg}")
