from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional


LOGGER = logging.getLogger("ws_relay.gatekeeper")


class AllowList:
    """Fixed set of origins permitted to connect. Exact string match only."""

    __slots__ = ("_origins",)

    def __init__(self, origins: Iterable[str] = ()):
        self._origins = frozenset(origins)

    def __contains__(self, origin: object) -> bool:
        return isinstance(origin, str) and origin in self._origins

    def __len__(self) -> int:
        return len(self._origins)

    def __iter__(self):
        return iter(sorted(self._origins))

    def __repr__(self) -> str:
        return f"AllowList({sorted(self._origins)!r})"


@dataclass
class GateStats:
    admitted: int = 0
    rejected: int = 0


class Gatekeeper:
    def __init__(self, allow_list: AllowList, check_origin: bool = True):
        self.allow_list = allow_list
        self.check_origin = check_origin
        self.stats = GateStats()

    def admit(self, origin: Optional[str]) -> bool:
        if not self.check_origin:
            self.stats.admitted += 1
            LOGGER.info("Connection from origin %s is allowed (origin check disabled).", origin)
            return True

        if origin is not None and origin in self.allow_list:
            self.stats.admitted += 1
            LOGGER.info("Connection from origin %s is allowed.", origin)
            return True

        self.stats.rejected += 1
        LOGGER.warning("Connection from origin %s is not allowed.", origin)
        return False
