"""Test data builders."""
from __future__ import annotations

import random
from typing import List

from address_pool.domain.address import PostalAddress


def make_postal(count: int, *, offset: int = 0) -> List[PostalAddress]:
    return [
        PostalAddress(
            address=f"{index} Test St.",
            city=f"TestCity{index}",
            state=f"State{index}",
            zip=f"{index}-{index}",
        )
        for index in range(offset, offset + count)
    ]


def postal_payloads(count: int) -> List[dict]:
    return [item.as_dict() for item in make_postal(count)]


class FirstChoiceRandom(random.Random):
    """Always draws the first candidate, making selection order predictable."""

    def randrange(self, *args, **kwargs) -> int:  # type: ignore[override]
        return 0
