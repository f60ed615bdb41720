"""
Inventory Service
Read-only queries over stock records and the transaction ledger.
"""

from datetime import datetime, time
from typing import Optional

from flask_sqlalchemy.pagination import Pagination

from inventory_api import db
from inventory_api.business.core.errors import NotFoundError
from inventory_api.data.inventory.inventory import Inventory
from inventory_api.data.inventory.inventory_transaction import InventoryTransaction


def _apply_date_range(query, start_date, end_date):
    if start_date:
        query = query.filter(InventoryTransaction.created_at >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.filter(InventoryTransaction.created_at <= datetime.combine(end_date, time.max))
    return query


class InventoryService:

    @staticmethod
    def get_list_data(
        page: int = 1,
        per_page: int = 15,
        store_id: Optional[int] = None,
        product_variant_id: Optional[int] = None,
        low_stock: bool = False,
    ) -> Pagination:
        query = Inventory.query

        if store_id:
            query = query.filter_by(store_id=store_id)

        if product_variant_id:
            query = query.filter_by(product_variant_id=product_variant_id)

        if low_stock:
            query = query.filter(Inventory.quantity <= Inventory.low_stock_threshold)

        query = query.order_by(Inventory.store_id, Inventory.product_variant_id)
        return query.paginate(page=page, per_page=per_page, error_out=False)

    @staticmethod
    def get_inventory(inventory_id: int) -> Inventory:
        inventory = db.session.get(Inventory, inventory_id)
        if inventory is None:
            raise NotFoundError("Inventory", inventory_id)
        return inventory

    @staticmethod
    def get_history(
        inventory_id: int,
        page: int = 1,
        per_page: int = 15,
        transaction_type: Optional[str] = None,
        start_date=None,
        end_date=None,
    ) -> Pagination:
        """Ledger of one inventory record, newest first."""
        InventoryService.get_inventory(inventory_id)

        query = InventoryTransaction.query.filter_by(inventory_id=inventory_id)
        if transaction_type and transaction_type != 'all':
            query = query.filter_by(type=transaction_type)
        query = _apply_date_range(query, start_date, end_date)
        query = query.order_by(InventoryTransaction.created_at.desc(), InventoryTransaction.id.desc())
        return query.paginate(page=page, per_page=per_page, error_out=False)

    @staticmethod
    def get_all_transactions(
        page: int = 1,
        per_page: int = 15,
        store_id: Optional[int] = None,
        transaction_type: Optional[str] = None,
        start_date=None,
        end_date=None,
    ) -> Pagination:
        """Ledger across every inventory record, newest first."""
        query = InventoryTransaction.query
        if store_id:
            query = query.join(Inventory, InventoryTransaction.inventory_id == Inventory.id).filter(
                Inventory.store_id == store_id
            )
        if transaction_type:
            query = query.filter(InventoryTransaction.type == transaction_type)
        query = _apply_date_range(query, start_date, end_date)
        query = query.order_by(InventoryTransaction.created_at.desc(), InventoryTransaction.id.desc())
        return query.paginate(page=page, per_page=per_page, error_out=False)
