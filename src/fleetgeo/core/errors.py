"""
Error types.

The calculation layer has exactly one failure mode: bad input. It raises
`ValidationError` at the point of detection and never recovers internally;
callers (CLI, HTTP controllers) translate it into their own error surface.
"""

from __future__ import annotations


class ValidationError(ValueError):
    """Invalid coordinate, radius, limit or point set.

    `context` names the offending input (e.g. "origin point") when one applies.
    """

    def __init__(self, message: str, *, context: str | None = None):
        super().__init__(message)
        self.message = message
        self.context = context
