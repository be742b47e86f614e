# controllers/counter.py
import asyncio
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional

from errors import GatewayError
from models import EntityKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountSnapshot:
    teams: int = 0
    projects: int = 0
    tasks: int = 0
    users: int = 0

    def get(self, kind: EntityKind) -> int:
        return getattr(self, EntityKind(kind).value)

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


class AggregateCounter:
    """Total record counts for every entity kind, independent of any page.

    All four counts are fetched together and applied together: if any one
    request fails the previous snapshot stays in place.
    """

    def __init__(self, gateways: Mapping[EntityKind, Any]):
        self.gateways = dict(gateways)
        self.snapshot: Optional[CountSnapshot] = None
        self.error: Optional[str] = None
        self._seq = 0

    @property
    def current(self) -> CountSnapshot:
        return self.snapshot or CountSnapshot()

    async def refresh(self) -> bool:
        self._seq += 1
        seq = self._seq
        kinds = list(EntityKind)
        results = await asyncio.gather(
            *(self.gateways[kind].count() for kind in kinds), return_exceptions=True
        )
        if seq != self._seq:
            logger.debug(f"count refresh #{seq} superseded by #{self._seq}")
            return False

        failures = [(kind, r) for kind, r in zip(kinds, results) if isinstance(r, BaseException)]
        if failures:
            self.error = "; ".join(f"{kind.value}: {exc}" for kind, exc in failures)
            logger.warning(f"count refresh failed, keeping previous counts ({self.error})")
            for _, exc in failures:
                # only gateway failures degrade; anything else is a bug
                if not isinstance(exc, GatewayError):
                    raise exc
            return False

        self.snapshot = CountSnapshot(**{kind.value: int(n) for kind, n in zip(kinds, results)})
        self.error = None
        return True
