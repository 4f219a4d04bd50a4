"""
Narrow "error that means empty" translations.

Each rule is opted into by a single endpoint. Anything a rule does not
match still propagates as a TwentyIError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, FrozenSet, Optional

from .errors import TwentyIError
from .models import AccountBalance
from .observability import log_event

log = logging.getLogger("twentyi_mcp.core.degradation")

Fallback = Callable[..., Any]


@dataclass(frozen=True)
class DegradationRule:
    name: str
    statuses: FrozenSet[int]
    fallback: Fallback
    # also degrade a successful but empty ({} / []) body
    degrade_empty: bool = False

    def matches_error(self, exc: TwentyIError) -> bool:
        return exc.http_status is not None and exc.http_status in self.statuses

    def matches_payload(self, payload: Any) -> bool:
        return self.degrade_empty and isinstance(payload, (dict, list)) and not payload


async def degrade(rule: DegradationRule, call: Awaitable[Any], **context: Any) -> Any:
    """
    Await ``call`` and apply ``rule``.
    ``context`` is forwarded to the fallback, e.g. the reseller id.
    """
    try:
        payload = await call
    except TwentyIError as exc:
        if not rule.matches_error(exc):
            raise
        log_event(
            "degraded",
            logger=log,
            tool=rule.name,
            status=exc.http_status,
            error_type=exc.kind.value,
            degraded=True,
        )
        return rule.fallback(exc, **context)

    if rule.matches_payload(payload):
        log_event("degraded", logger=log, tool=rule.name, status="empty", degraded=True)
        return rule.fallback(None, **context)
    return payload


def zero_balance(
    exc: Optional[TwentyIError] = None, *, reseller_id: Optional[str] = None
) -> dict:
    if exc is None:
        return AccountBalance(
            message="Account has zero balance or no balance information available"
        ).model_dump()

    balance = AccountBalance(
        message=(
            "Balance information not available - account may have zero "
            "balance or no payment history"
        )
    )
    data = balance.model_dump()
    if reseller_id is not None:
        data["resellerId"] = reseller_id
    return data


def empty_list(exc: Optional[TwentyIError] = None, **_: Any) -> list:
    return []


ACCOUNT_BALANCE = DegradationRule(
    name="account_balance",
    statuses=frozenset({403, 404}),
    fallback=zero_balance,
    degrade_empty=True,
)

DOMAIN_VERIFICATION = DegradationRule(
    name="domain_verification",
    statuses=frozenset({404}),
    fallback=empty_list,
)


__all__ = [
    "DegradationRule",
    "degrade",
    "zero_balance",
    "empty_list",
    "ACCOUNT_BALANCE",
    "DOMAIN_VERIFICATION",
]
