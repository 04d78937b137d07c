"""Exception taxonomy for rule-level rejections and state desynchronisation."""

from __future__ import annotations


class Chess3DError(Exception):
    """Base class for errors raised by the rules engine."""


class IllegalMoveError(Chess3DError, ValueError):
    """Requested move is not in the legal set; nothing was applied."""


class InvariantViolation(Chess3DError, RuntimeError):
    """Caller state and board disagree (e.g. piece not on its claimed square).

    Not a game-rule case: it signals that the caller is holding a stale or
    corrupted board and must resynchronise before retrying.
    """
