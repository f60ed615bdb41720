"""
Inventory Transfer Service
Read-only list and detail queries for inventory transfers.
"""

from datetime import datetime, time
from typing import Optional

from flask_sqlalchemy.pagination import Pagination

from inventory_api import db
from inventory_api.business.core.errors import NotFoundError
from inventory_api.data.catalog.product import Product
from inventory_api.data.catalog.product_variant import ProductVariant
from inventory_api.data.inventory.inventory_transfer import InventoryTransfer


class InventoryTransferService:
    """
    Service for inventory transfer presentation data.

    Provides methods for:
    - Building filtered, newest-first transfer listings
    - Fetching a single transfer
    """

    @staticmethod
    def get_list_data(
        page: int = 1,
        per_page: int = 15,
        from_store_id: Optional[int] = None,
        to_store_id: Optional[int] = None,
        status: Optional[str] = None,
        start_date=None,
        end_date=None,
        product_name: Optional[str] = None,
    ) -> Pagination:
        """
        Get paginated inventory transfers with filters.

        The date range applies only when both ends are given and is inclusive
        of the whole end day.
        """
        query = InventoryTransfer.query

        if from_store_id:
            query = query.filter_by(from_store_id=from_store_id)

        if to_store_id:
            query = query.filter_by(to_store_id=to_store_id)

        if status:
            query = query.filter_by(status=status)

        if start_date and end_date:
            query = query.filter(
                InventoryTransfer.created_at >= datetime.combine(start_date, time.min),
                InventoryTransfer.created_at <= datetime.combine(end_date, time.max),
            )

        if product_name:
            query = (
                query.join(ProductVariant, InventoryTransfer.product_variant_id == ProductVariant.id)
                .join(Product, ProductVariant.product_id == Product.id)
                .filter(Product.name.ilike(f"%{product_name}%"))
            )

        query = query.order_by(InventoryTransfer.created_at.desc(), InventoryTransfer.id.desc())

        return query.paginate(page=page, per_page=per_page, error_out=False)

    @staticmethod
    def get_transfer(transfer_id: int) -> InventoryTransfer:
        transfer = db.session.get(InventoryTransfer, transfer_id)
        if transfer is None:
            raise NotFoundError("Inventory transfer", transfer_id)
        return transfer
