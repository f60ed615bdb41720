from __future__ import annotations

from contextlib import contextmanager

from inventory_api import db
from inventory_api.business.core.actor_context import ActorContext
from inventory_api.business.core.authorization import authorize
from inventory_api.business.core.errors import (
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
)
from inventory_api.business.inventory.status.transfer_status_validator import TransferStatusValidator
from inventory_api.business.inventory.stock.inventory_manager import InventoryManager
from inventory_api.business.inventory.transfers.transfer_request_validator import TransferRequest
from inventory_api.data.inventory.inventory import Inventory
from inventory_api.data.inventory.inventory_transfer import (
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_IN_TRANSIT,
    STATUS_PENDING,
    InventoryTransfer,
)
from inventory_api.logger import get_logger

logger = get_logger("inventory_api.business.inventory.transfers")


class InventoryTransferManager:
    """
    Store-to-store transfer workflow.

    Lifecycle:
        pending -> in_transit -> completed
        pending -> completed            (source and destination move together)
        pending | in_transit -> cancelled

    Stock effects:
    - leaving pending for in_transit or completed takes stock out of the source (transfer_out)
    - reaching completed puts stock into the destination (transfer_in)
    - cancelling an in_transit transfer puts stock back into the source (transfer_cancel)

    Every public method is one database transaction: the transfer row and the
    inventory rows it touches are locked, and either everything is committed
    or everything is rolled back.
    """

    def __init__(self, inventory_manager: InventoryManager | None = None):
        self.inventory = inventory_manager or InventoryManager()

    @contextmanager
    def _unit_of_work(self):
        try:
            yield
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

    def _get_locked(self, transfer_id: int) -> InventoryTransfer:
        transfer = db.session.get(InventoryTransfer, transfer_id, with_for_update=True)
        if transfer is None:
            raise NotFoundError("Inventory transfer", transfer_id)
        return transfer

    def _lock_inventories(self, transfer) -> tuple[Inventory, Inventory]:
        return self.inventory.lock_for_transfer(
            transfer.product_variant_id, transfer.from_store_id, transfer.to_store_id
        )

    @staticmethod
    def _ensure_available(src: Inventory, quantity: int) -> None:
        available = src.quantity or 0
        if available < quantity:
            raise InsufficientStockError(
                f"Insufficient stock at the source store: {available} available, {quantity} requested.",
                available=available,
                requested=quantity,
            )

    # Stock movements

    def _ship(self, transfer, src: Inventory, user_id: int) -> None:
        self._ensure_available(src, transfer.quantity)
        self.inventory.reduce_stock(
            src,
            transfer.quantity,
            'transfer_out',
            user_id=user_id,
            notes=f"Transfer #{transfer.id} out to store #{transfer.to_store_id}",
            transfer_id=transfer.id,
        )

    def _receive(self, transfer, dst: Inventory, user_id: int) -> None:
        self.inventory.add_stock(
            dst,
            transfer.quantity,
            'transfer_in',
            user_id=user_id,
            notes=f"Transfer #{transfer.id} in from store #{transfer.from_store_id}",
            transfer_id=transfer.id,
        )

    def _restore(self, transfer, src: Inventory, user_id: int, reason: str | None) -> None:
        notes = f"Transfer #{transfer.id} cancelled, stock restored"
        if reason:
            notes += f": {reason}"
        self.inventory.add_stock(
            src,
            transfer.quantity,
            'transfer_cancel',
            user_id=user_id,
            notes=notes,
            transfer_id=transfer.id,
        )

    # Creation

    def _create_one(self, actor: ActorContext, request: TransferRequest) -> InventoryTransfer:
        authorize(actor, 'transfer', 'create', (request.from_store_id, request.to_store_id))

        src, dst = self.inventory.lock_for_transfer(
            request.product_variant_id, request.from_store_id, request.to_store_id
        )
        self._ensure_available(src, request.quantity)

        transfer = InventoryTransfer(
            from_store_id=request.from_store_id,
            to_store_id=request.to_store_id,
            product_variant_id=request.product_variant_id,
            user_id=actor.user_id,
            quantity=request.quantity,
            status=request.status,
            notes=request.notes,
        )
        db.session.add(transfer)
        db.session.flush()

        if transfer.status == STATUS_COMPLETED:
            self._ship(transfer, src, actor.user_id)
            self._receive(transfer, dst, actor.user_id)
        return transfer

    def create(self, actor: ActorContext, request: TransferRequest) -> InventoryTransfer:
        """
        Create a transfer.

        With status ``completed`` (the default) stock moves immediately; with
        ``pending`` only the transfer row is written. Either way the source must
        currently hold enough stock.
        """
        with self._unit_of_work():
            transfer = self._create_one(actor, request)

        logger.info(
            f"Transfer {transfer.id} created by user {actor.user_id}: {transfer.quantity} of variant "
            f"{transfer.product_variant_id} store {transfer.from_store_id} -> {transfer.to_store_id} "
            f"({transfer.status})"
        )
        return transfer

    def create_batch(self, actor: ActorContext, requests: list[TransferRequest]) -> list[InventoryTransfer]:
        """Create several transfers in one transaction; any failure rolls back all of them."""
        with self._unit_of_work():
            transfers = [self._create_one(actor, request) for request in requests]

        logger.info(
            f"Batch of {len(transfers)} transfers created by user {actor.user_id}: "
            f"{[t.id for t in transfers]}"
        )
        return transfers

    # Status changes

    def update_status(
        self,
        actor: ActorContext,
        transfer_id: int,
        new_status: str,
        *,
        notes: str | None = None,
        replace_notes: bool = False,
    ) -> InventoryTransfer:
        with self._unit_of_work():
            transfer = self._get_locked(transfer_id)
            authorize(actor, 'transfer', 'update', (transfer.from_store_id, transfer.to_store_id))

            old_status = transfer.status
            if old_status == new_status:
                return transfer

            if TransferStatusValidator.is_terminal(old_status):
                raise InvalidTransitionError(
                    "Completed or cancelled transfers cannot change status.",
                    from_status=old_status,
                    to_status=new_status,
                )
            if not TransferStatusValidator.can_transition(old_status, new_status):
                raise InvalidTransitionError(
                    f"Cannot change transfer status from {old_status} to {new_status}.",
                    from_status=old_status,
                    to_status=new_status,
                )

            if new_status == STATUS_CANCELLED:
                self._apply_cancel(transfer, actor, reason=None)
            else:
                src, dst = self._lock_inventories(transfer)
                if old_status == STATUS_PENDING:
                    self._ship(transfer, src, actor.user_id)
                if new_status == STATUS_COMPLETED:
                    self._receive(transfer, dst, actor.user_id)
                transfer.status = new_status

            if replace_notes:
                transfer.notes = notes

        logger.info(
            f"Transfer {transfer_id} status {old_status} -> {new_status} by user {actor.user_id}"
        )
        return transfer

    def _apply_cancel(self, transfer, actor: ActorContext, reason: str | None) -> None:
        if transfer.status == STATUS_IN_TRANSIT:
            src, _ = self._lock_inventories(transfer)
            self._restore(transfer, src, actor.user_id, reason)
        transfer.status = STATUS_CANCELLED

    def cancel(self, actor: ActorContext, transfer_id: int, reason: str) -> InventoryTransfer:
        """
        Cancel a pending or in-transit transfer.

        In-transit stock goes back to the source store. The reason is prepended
        to the transfer notes.
        """
        with self._unit_of_work():
            transfer = self._get_locked(transfer_id)
            authorize(actor, 'transfer', 'cancel', (transfer.from_store_id, transfer.to_store_id))

            old_status = transfer.status
            if transfer.is_closed:
                raise InvalidTransitionError(
                    "Completed or cancelled transfers cannot be cancelled again.",
                    from_status=old_status,
                    to_status=STATUS_CANCELLED,
                )

            self._apply_cancel(transfer, actor, reason)
            original_notes = transfer.notes
            transfer.notes = f"Cancelled. Reason: {reason}"
            if original_notes:
                transfer.notes += f"\nOriginal notes: {original_notes}"

        logger.info(f"Transfer {transfer_id} cancelled from {old_status} by user {actor.user_id}")
        return transfer
