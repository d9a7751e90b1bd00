from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable

from credit_ledger.core.ports.outbound.identity import AccessPolicy, Identity


@dataclass(frozen=True)
class AllowListPolicy(AccessPolicy):
    allowed_emails: FrozenSet[str]

    @staticmethod
    def of(emails: Iterable[str]) -> "AllowListPolicy":
        return AllowListPolicy(frozenset(e.strip().lower() for e in emails if e.strip()))

    def is_authorized(self, identity: Identity) -> bool:
        return identity.email.strip().lower() in self.allowed_emails
