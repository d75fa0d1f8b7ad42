"""Request identifiers and HUEQ catalog codes."""

from __future__ import annotations

import re
import string
import time
from typing import TYPE_CHECKING, Final
from uuid import uuid4

from huevify.domain.errors import CatalogCodeExhaustedError

if TYPE_CHECKING:
    import random
    from collections.abc import Callable, Container

CATALOG_CODE_PATTERN: Final = re.compile(r"^\d{3}[A-Z]{2}\d$")
MAX_CODE_ATTEMPTS: Final[int] = 1000
MAX_ID_ATTEMPTS: Final[int] = 16


def new_request_id(kind: str) -> str:
    """Return ``<kind>_<epoch ms>_<random hex>``, unique for the process lifetime."""

    return f"{kind}_{time.time_ns() // 1_000_000}_{uuid4().hex[:8]}"


def unique_request_id(
    kind: str,
    taken: Container[str],
    *,
    factory: Callable[[str], str] = new_request_id,
) -> str:
    """Draw request ids until one is not in ``taken``."""

    for _ in range(MAX_ID_ATTEMPTS):
        candidate = factory(kind)
        if candidate not in taken:
            return candidate
    raise RuntimeError(f"Could not allocate a unique {kind} id")


def new_catalog_code(rng: random.Random) -> str:
    """Return a code shaped ``DDDLLD`` (3 digits, 2 uppercase letters, 1 digit)."""

    digits = f"{rng.randrange(1000):03d}"
    letters = "".join(rng.choice(string.ascii_uppercase) for _ in range(2))
    return f"{digits}{letters}{rng.randrange(10)}"


def unique_catalog_code(taken: Container[str], rng: random.Random) -> str:
    for _ in range(MAX_CODE_ATTEMPTS):
        code = new_catalog_code(rng)
        if code not in taken:
            return code
    raise CatalogCodeExhaustedError(
        f"No free catalog code found after {MAX_CODE_ATTEMPTS} attempts"
    )


def is_catalog_code(value: str) -> bool:
    return CATALOG_CODE_PATTERN.fullmatch(value) is not None
