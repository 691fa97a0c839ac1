from __future__ import annotations

from typing import Protocol, runtime_checkable


class ResponderError(RuntimeError):
    """The upstream service did not produce a reply."""


@runtime_checkable
class Responder(Protocol):
    async def __call__(self, text: str) -> str: ...

