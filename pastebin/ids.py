from __future__ import annotations

import secrets
import string


# Same URL-safe alphabet nanoid uses.
URL_SAFE_ALPHABET = string.ascii_letters + string.digits + "_-"

SHORT_ID_LENGTH = 8


def generate_paste_id(length: int = SHORT_ID_LENGTH) -> str:
    """Return a random URL-safe token of ``length`` characters."""
    return "".join(secrets.choice(URL_SAFE_ALPHABET) for _ in range(length))
