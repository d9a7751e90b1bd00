from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Identity:
    email: str
    display_name: str = ""


class AccessPolicy(Protocol):
    def is_authorized(self, identity: Identity) -> bool: ...
