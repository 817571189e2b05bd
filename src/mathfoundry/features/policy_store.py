"""In-memory feature policy table with a loading / resolved / error state.

The table is fetched once per process (or again on demand) and shared by
every access check. A failed fetch never fails closed: the store keeps an
empty table, which makes every check fall back to the hardcoded defaults.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from enum import Enum

import structlog

from mathfoundry.features.resolution import (
    AccessResult,
    FeatureAccessResolver,
    TierFeature,
)
from mathfoundry.features.tiers import SubscriptionTier

logger = structlog.get_logger()

PolicyFetcher = Callable[[], Awaitable[Sequence[TierFeature]]]


class PolicyLoadState(str, Enum):
    LOADING = "loading"
    RESOLVED = "resolved"
    ERROR = "error"


class AccessStatus(str, Enum):
    LOADING = "loading"
    GRANTED = "granted"
    DENIED = "denied"


class AccessDecision:
    """Access outcome that keeps "still loading" apart from "denied".

    ``is_granted`` is False while loading, so callers that only look at the
    boolean fail closed; callers that care can branch on ``status``.
    """

    __slots__ = ("result", "status")

    def __init__(self, status: AccessStatus, result: AccessResult | None = None) -> None:
        self.status = status
        self.result = result

    @classmethod
    def loading(cls) -> AccessDecision:
        return cls(AccessStatus.LOADING)

    @classmethod
    def from_result(cls, result: AccessResult) -> AccessDecision:
        status = AccessStatus.GRANTED if result.has_access else AccessStatus.DENIED
        return cls(status, result)

    @property
    def is_loading(self) -> bool:
        return self.status is AccessStatus.LOADING

    @property
    def is_granted(self) -> bool:
        return self.status is AccessStatus.GRANTED

    def __repr__(self) -> str:
        return f"AccessDecision(status={self.status.value!r}, result={self.result!r})"


class FeaturePolicyStore:
    """Holds the latest successfully loaded policy table."""

    def __init__(self, fetcher: PolicyFetcher, timeout_seconds: float | None = None) -> None:
        self._fetcher = fetcher
        self._timeout = timeout_seconds
        self._rows: tuple[TierFeature, ...] = ()
        self._state = PolicyLoadState.LOADING
        self._error: str | None = None
        self._generation = 0

    @property
    def state(self) -> PolicyLoadState:
        return self._state

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def rows(self) -> tuple[TierFeature, ...]:
        return self._rows

    async def load(self) -> PolicyLoadState:
        """Fetch the table. A load superseded by a later one is discarded."""
        self._generation += 1
        generation = self._generation
        self._state = PolicyLoadState.LOADING

        try:
            if self._timeout is not None:
                rows = await asyncio.wait_for(self._fetcher(), timeout=self._timeout)
            else:
                rows = await self._fetcher()
        except Exception as exc:
            if generation != self._generation:
                return self._state
            logger.warning("feature_policy_load_failed", error=str(exc), exc_info=True)
            self._rows = ()
            self._error = "Failed to load features"
            self._state = PolicyLoadState.ERROR
            return self._state

        if generation != self._generation:
            return self._state

        self._rows = tuple(sorted(rows, key=lambda r: r.display_order))
        self._error = None
        self._state = PolicyLoadState.RESOLVED
        logger.info("feature_policy_loaded", rows=len(self._rows))
        return self._state

    def resolver(self, effective_tier: SubscriptionTier | None) -> FeatureAccessResolver:
        """Resolver over the current table (empty while loading or after an error)."""
        return FeatureAccessResolver(effective_tier, self._rows)

    def decide(self, feature_id: str, effective_tier: SubscriptionTier | None) -> AccessDecision:
        if self._state is PolicyLoadState.LOADING:
            return AccessDecision.loading()
        return AccessDecision.from_result(self.resolver(effective_tier).check_feature_access(feature_id))
