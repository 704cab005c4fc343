"""Identity resolution.

Authentication is delegated to SimpleJWT; the rest of the system only
needs a stable string that scopes carts and orders to one buyer.
"""

from __future__ import annotations

from rest_framework.request import Request


def get_identity(request: Request) -> str:
    """Return the caller's identity string.

    Prefers an external ``sub`` claim when the authenticated principal
    carries one, otherwise the local user primary key.
    """
    user = request.user
    sub = getattr(user, "sub", None)
    if sub:
        return str(sub)
    return str(user.pk)
