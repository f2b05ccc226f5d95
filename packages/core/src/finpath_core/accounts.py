"""Account data provider adapter.

The planning engine never talks to a bank aggregator. A provider captures an
AccountsSnapshot up front and the caller hands it to ``plan()``:

    provider = CachingAccountProvider(DemoAccountProvider(), ttl_seconds=300)
    snapshot = provider.get_snapshot(access_token)
    result = plan(profile, accounts=snapshot)

Any object with a matching ``get_snapshot`` method satisfies
AccountDataProvider; no inheritance is required.
"""

import threading
import time
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Optional, Protocol, runtime_checkable

import pydantic
import structlog

from .config import ProviderConfig
from .exceptions import ConfigurationError, FinpathError, ProviderError
from .models.accounts import AccountBalance, AccountsSnapshot, AccountType

logger = structlog.get_logger()


# =============================================================================
# PROTOCOL
# =============================================================================

@runtime_checkable
class AccountDataProvider(Protocol):
    """Anything that can turn an access token into an AccountsSnapshot."""

    def get_snapshot(self, access_token: str) -> AccountsSnapshot:
        """Fetch current balances for the accounts behind ``access_token``.

        Raises:
            ProviderError: The upstream service failed or returned bad data
        """
        ...


# =============================================================================
# AGGREGATOR RECORD MAPPING
# =============================================================================

# Depository accounts are classified by subtype, everything else by type
_DEPOSITORY_SUBTYPES = {
    "checking": AccountType.CHECKING,
    "savings": AccountType.SAVINGS,
    "money market": AccountType.SAVINGS,
    "cd": AccountType.SAVINGS,
}

_TYPE_MAP = {
    "investment": AccountType.INVESTMENT,
    "brokerage": AccountType.INVESTMENT,
    "loan": AccountType.LOAN,
    "credit": AccountType.CREDIT,
}


def _account_type(record: Mapping[str, Any]) -> Optional[AccountType]:
    kind = str(record.get("type") or "").strip().lower()
    subtype = str(record.get("subtype") or "").strip().lower()
    if kind == "depository":
        return _DEPOSITORY_SUBTYPES.get(subtype)
    if kind in _DEPOSITORY_SUBTYPES:
        return _DEPOSITORY_SUBTYPES[kind]
    return _TYPE_MAP.get(kind)


def normalize_aggregator_accounts(records: Iterable[Mapping[str, Any]]) -> AccountsSnapshot:
    """
    Map bank-aggregator account records onto an AccountsSnapshot.

    Each record carries ``type``, an optional ``subtype`` and
    ``balances.current``. Records whose type has no counterpart, or that lack
    a current balance, are skipped.

    Raises:
        ProviderError: A record holds an unparseable balance
    """
    balances = []
    for record in records:
        account_type = _account_type(record)
        if account_type is None:
            logger.info(
                "account_skipped",
                reason="unsupported_type",
                type=record.get("type"),
                subtype=record.get("subtype"),
            )
            continue

        current = (record.get("balances") or {}).get("current")
        if current is None:
            logger.info("account_skipped", reason="no_balance", type=record.get("type"))
            continue

        try:
            balances.append(
                AccountBalance(type=account_type, balance=current, name=record.get("name"))
            )
        except pydantic.ValidationError as exc:
            raise ProviderError(
                f"Unparseable balance for account {record.get('name')!r}",
                provider="aggregator",
                operation="normalize",
                details={"balance": repr(current)},
            ) from exc

    return AccountsSnapshot.from_balances(balances)


# =============================================================================
# PROVIDERS
# =============================================================================

DEMO_ACCOUNTS = (
    {
        "name": "Primary Checking",
        "type": "depository",
        "subtype": "checking",
        "balances": {"available": 1250.75, "current": 1250.75},
    },
    {
        "name": "Savings Account",
        "type": "depository",
        "subtype": "savings",
        "balances": {"available": 8420.50, "current": 8420.50},
    },
    {
        "name": "Freedom Unlimited",
        "type": "credit",
        "subtype": "credit card",
        "balances": {"available": 4750.25, "current": -1249.75, "limit": 6000.00},
    },
)


class DemoAccountProvider:
    """Sandbox provider returning a fixed checking, savings and credit card set."""

    def get_snapshot(self, access_token: str) -> AccountsSnapshot:
        logger.debug("demo_accounts_served")
        return normalize_aggregator_accounts(DEMO_ACCOUNTS)


class CachingAccountProvider:
    """
    TTL cache in front of another provider, keyed by access token.

    Safe to share between threads. A TTL of zero disables caching.
    """

    def __init__(
        self,
        provider: AccountDataProvider,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds is None:
            ttl_seconds = ProviderConfig().cache_ttl_seconds
        if ttl_seconds < 0:
            raise ConfigurationError(
                "Cache TTL cannot be negative",
                config_key="cache_ttl_seconds",
                expected=">= 0",
                actual=ttl_seconds,
            )
        self.provider = provider
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: dict[str, tuple[float, AccountsSnapshot]] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, provider: AccountDataProvider, config: ProviderConfig) -> "CachingAccountProvider":
        if not config.enabled:
            raise ConfigurationError(
                "Account provider is disabled",
                config_key="enabled",
                expected="true",
                actual=config.enabled,
            )
        return cls(provider, ttl_seconds=config.cache_ttl_seconds)

    def get_snapshot(self, access_token: str) -> AccountsSnapshot:
        now = self._clock()
        with self._lock:
            cached = self._cache.get(access_token)
            if cached is not None and now - cached[0] < self.ttl_seconds:
                logger.debug("account_cache_hit")
                return cached[1]

        try:
            snapshot = self.provider.get_snapshot(access_token)
        except FinpathError:
            raise
        except Exception as exc:
            logger.error("account_fetch_failed", provider=type(self.provider).__name__, error=str(exc))
            raise ProviderError(
                f"Account provider failed: {exc}",
                provider=type(self.provider).__name__,
                operation="get_snapshot",
            ) from exc

        with self._lock:
            expired = [
                token for token, (ts, _) in self._cache.items() if now - ts >= self.ttl_seconds
            ]
            for token in expired:
                del self._cache[token]
            if self.ttl_seconds > 0:
                self._cache[access_token] = (now, snapshot)
        logger.info("account_snapshot_fetched", account_count=len(snapshot.accounts))
        return snapshot

    def invalidate(self, access_token: Optional[str] = None) -> None:
        """Drop one cached token, or everything when no token is given."""
        with self._lock:
            if access_token is None:
                self._cache.clear()
            else:
                self._cache.pop(access_token, None)
