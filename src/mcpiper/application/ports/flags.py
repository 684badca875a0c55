"""Port for the policy naming the bits of the flags bitfield."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class FlagDescriberPort(Protocol):
    """Map a flags bitfield to the ordered names of the bits it recognises."""

    def __call__(self, flags: int) -> Sequence[str]: ...


__all__ = ["FlagDescriberPort"]
