from __future__ import annotations

from typing import Iterable

from inventory_api.business.core.actor_context import ActorContext
from inventory_api.business.core.errors import AuthorizationError
from inventory_api.logger import get_logger

logger = get_logger("inventory_api.business.core.authorization")

_READ = frozenset({'view'})
_CRUD = frozenset({'view', 'create', 'update', 'delete'})
_TRANSFER_WRITE = frozenset({'view', 'create', 'update', 'cancel'})
_INVENTORY_WRITE = frozenset({'view', 'adjust'})

# (role, resource) -> allowed actions
PERMISSIONS = {
    ('admin', 'transfer'): _TRANSFER_WRITE,
    ('admin', 'inventory'): _INVENTORY_WRITE,
    ('admin', 'store'): _CRUD,
    ('admin', 'product'): _CRUD,
    ('staff', 'transfer'): _TRANSFER_WRITE,
    ('staff', 'inventory'): _INVENTORY_WRITE,
    ('staff', 'store'): _READ,
    ('staff', 'product'): _READ,
    ('viewer', 'transfer'): _READ,
    ('viewer', 'inventory'): _READ,
    ('viewer', 'store'): _READ,
    ('viewer', 'product'): _READ,
}

# Roles whose write actions are limited to their assigned stores
STORE_SCOPED_ROLES = frozenset({'staff'})


def is_allowed(role: str, resource: str, action: str) -> bool:
    return action in PERMISSIONS.get((role, resource), frozenset())


def authorize(actor: ActorContext, resource: str, action: str, store_ids: Iterable[int] = ()) -> None:
    """
    Raise AuthorizationError unless ``actor`` may perform ``action`` on ``resource``.

    ``store_ids`` are the stores the action touches. For store-scoped roles a
    write is allowed only if at least one of them is assigned to the actor;
    reads are never store-scoped.
    """
    if not is_allowed(actor.role, resource, action):
        logger.warning(f"Denied {action} on {resource} for user {actor.user_id} (role={actor.role})")
        raise AuthorizationError()

    store_ids = {sid for sid in store_ids if sid is not None}
    if action != 'view' and actor.role in STORE_SCOPED_ROLES and store_ids:
        if not store_ids.intersection(actor.store_ids):
            logger.warning(
                f"Denied {action} on {resource} for user {actor.user_id}: "
                f"stores {sorted(store_ids)} not assigned"
            )
            raise AuthorizationError("You are not assigned to any of the stores involved.")
