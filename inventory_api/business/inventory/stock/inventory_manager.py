from __future__ import annotations

from datetime import datetime

from flask import current_app
from sqlalchemy.exc import IntegrityError

from inventory_api import db
from inventory_api.business.core.errors import InsufficientStockError, ValidationError
from inventory_api.business.core.request_validation import MAX_INT
from inventory_api.data.inventory.inventory import Inventory
from inventory_api.data.inventory.inventory_transaction import InventoryTransaction
from inventory_api.logger import get_logger

logger = get_logger("inventory_api.business.inventory.stock")

ADJUST_ACTIONS = ('add', 'reduce', 'set')


class InventoryManager:
    """
    Core stock operations.

    Responsibilities:
    - Keep Inventory.quantity >= 0
    - Write one InventoryTransaction for every quantity change
    - Take row locks on the Inventory rows being changed

    Only adjust() commits; for everything else callers own the transaction boundary.
    """

    def _default_threshold(self) -> int:
        return current_app.config.get('DEFAULT_LOW_STOCK_THRESHOLD', 5)

    def _new_inventory(self, product_variant_id: int, store_id: int) -> Inventory:
        """
        Insert an empty record inside a savepoint.

        When another transaction inserted the same (variant, store) first the
        unique constraint fails; the savepoint is rolled back and the existing
        row is locked and returned instead.
        """
        inv = Inventory(
            product_variant_id=product_variant_id,
            store_id=store_id,
            quantity=0,
            low_stock_threshold=self._default_threshold(),
        )
        try:
            with db.session.begin_nested():
                db.session.add(inv)
        except IntegrityError:
            logger.info(
                f"Inventory for variant {product_variant_id} at store {store_id} already exists, reusing it"
            )
            inv = self.find(product_variant_id, store_id, lock=True)
            if inv is None:
                raise
        return inv

    def find(self, product_variant_id: int, store_id: int, *, lock: bool = False) -> Inventory | None:
        query = Inventory.query.filter_by(product_variant_id=product_variant_id, store_id=store_id)
        if lock:
            query = query.with_for_update()
        return query.first()

    def get_or_create(self, product_variant_id: int, store_id: int, *, lock: bool = False) -> Inventory:
        inv = self.find(product_variant_id, store_id, lock=lock)
        if inv is None:
            inv = self._new_inventory(product_variant_id, store_id)
        return inv

    def lock_for_transfer(self, product_variant_id: int, from_store_id: int, to_store_id: int) -> tuple[Inventory, Inventory]:
        """
        Lock the source and destination rows of a transfer in one statement.

        Rows are locked in primary-key order so two transfers touching the same
        pair of stores cannot deadlock. A missing row is created with quantity 0.
        """
        rows = (
            Inventory.query
            .filter(
                Inventory.product_variant_id == product_variant_id,
                Inventory.store_id.in_([from_store_id, to_store_id]),
            )
            .order_by(Inventory.id)
            .with_for_update()
            .all()
        )
        by_store = {row.store_id: row for row in rows}
        src = by_store.get(from_store_id) or self._new_inventory(product_variant_id, from_store_id)
        dst = by_store.get(to_store_id) or self._new_inventory(product_variant_id, to_store_id)
        return src, dst

    def _record(
        self,
        inv: Inventory,
        delta: int,
        transaction_type: str,
        *,
        user_id: int | None,
        notes: str | None = None,
        transfer_id: int | None = None,
    ) -> InventoryTransaction:
        before = inv.quantity or 0
        after = before + delta
        if after < 0:
            raise InsufficientStockError(
                f"Insufficient stock: {before} available, {-delta} requested",
                available=before,
                requested=-delta,
            )
        if after > MAX_INT:
            raise ValidationError({'quantity': [f"The resulting stock may not be greater than {MAX_INT}."]})
        inv.quantity = after
        inv.updated_at = datetime.utcnow()

        entry = InventoryTransaction(
            inventory_id=inv.id,
            user_id=user_id,
            type=transaction_type,
            quantity=delta,
            before_quantity=before,
            after_quantity=after,
            notes=notes,
            transfer_id=transfer_id,
        )
        db.session.add(entry)
        logger.debug(
            f"Inventory {inv.id} {transaction_type} {delta:+d} ({before} -> {after}) "
            f"user={user_id} transfer={transfer_id}"
        )
        return entry

    def add_stock(self, inv: Inventory, quantity: int, transaction_type: str = 'addition', **kwargs) -> InventoryTransaction:
        if quantity <= 0:
            raise ValueError("quantity must be > 0")
        return self._record(inv, quantity, transaction_type, **kwargs)

    def reduce_stock(self, inv: Inventory, quantity: int, transaction_type: str = 'reduction', **kwargs) -> InventoryTransaction:
        if quantity <= 0:
            raise ValueError("quantity must be > 0")
        return self._record(inv, -quantity, transaction_type, **kwargs)

    def set_stock(self, inv: Inventory, quantity: int, **kwargs) -> InventoryTransaction | None:
        if quantity < 0:
            raise ValueError("quantity must be >= 0")
        delta = quantity - (inv.quantity or 0)
        if delta == 0:
            return None
        return self._record(inv, delta, 'adjustment', **kwargs)

    def adjust(
        self,
        *,
        product_variant_id: int,
        store_id: int,
        action: str,
        quantity: int,
        user_id: int | None,
        notes: str | None = None,
    ) -> Inventory:
        """Apply a manual add/reduce/set adjustment and commit it."""
        if action not in ADJUST_ACTIONS:
            raise ValidationError({'action': [f"The action must be one of: {', '.join(ADJUST_ACTIONS)}."]})

        try:
            inv = self.get_or_create(product_variant_id, store_id, lock=True)
            if action == 'add':
                self.add_stock(inv, quantity, user_id=user_id, notes=notes)
            elif action == 'reduce':
                self.reduce_stock(inv, quantity, user_id=user_id, notes=notes)
            else:
                self.set_stock(inv, quantity, user_id=user_id, notes=notes)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        logger.info(
            f"Inventory adjusted by user {user_id}: {action} {quantity} "
            f"variant={product_variant_id} store={store_id} -> {inv.quantity}"
        )
        return inv
