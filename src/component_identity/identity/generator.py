"""Fresh component identifiers."""

import uuid
from typing import Callable

UuidFactory = Callable[[], str]


def new_uuid() -> str:
    """Return a random (version 4) uuid string, unrelated to any key."""
    return str(uuid.uuid4())
