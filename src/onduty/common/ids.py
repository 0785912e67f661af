from __future__ import annotations

import uuid


def new_id(prefix: str) -> str:
    """Opaque identifier such as ``r_3f2a...``."""
    return f"{prefix}_{uuid.uuid4().hex}"
