from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ActorContext:
    """The authenticated caller, passed explicitly into every workflow call."""
    user_id: int
    role: str
    store_ids: tuple[int, ...] = ()

    @classmethod
    def from_user(cls, user) -> ActorContext:
        return cls(user_id=user.id, role=user.role, store_ids=tuple(user.store_ids))

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'
