from __future__ import annotations

from inventory_api.data.inventory.inventory_transfer import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_IN_TRANSIT,
    STATUS_PENDING,
    TRANSFER_STATUSES,
)


class TransferStatusValidator:
    """
    Status transition rules for inventory transfers.

    completed and cancelled are terminal.
    """

    _NEXT = {
        STATUS_PENDING: {STATUS_IN_TRANSIT, STATUS_COMPLETED, STATUS_CANCELLED},
        STATUS_IN_TRANSIT: {STATUS_COMPLETED, STATUS_CANCELLED},
        STATUS_COMPLETED: set(),
        STATUS_CANCELLED: set(),
    }

    @classmethod
    def is_known(cls, status: str) -> bool:
        return status in TRANSFER_STATUSES

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls._NEXT.get(status)

    @classmethod
    def can_transition(cls, current_status: str, new_status: str) -> bool:
        return new_status in cls._NEXT.get(current_status, set())
