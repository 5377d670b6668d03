from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def confirm(question: str, *, assume_yes: bool = False) -> bool:
    """Ask a y/N question; --yes answers for the user.

    A closed stdin counts as "no".
    """

    if assume_yes:
        logger.info("%s (auto-confirmed)", question)
        return True
    try:
        answer = input(f"{question} (y/N) ")
    except EOFError:
        return False
    return answer.strip().lower().startswith("y")
