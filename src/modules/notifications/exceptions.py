"""Notification exceptions."""

from __future__ import annotations


class NotificationFailure(Exception):
    """A message could not be rendered or handed to the mail backend.

    Callers log it; it never reaches the buyer or rolls anything back.
    """
