from inventory_api import db
from inventory_api.data.core.timestamped_base import TimestampedBase


class Inventory(TimestampedBase):
    """
    Stock quantity of one product variant at one store.

    Quantities change only through InventoryManager, which writes an
    InventoryTransaction for every change.
    """
    __tablename__ = 'inventories'

    product_variant_id = db.Column(db.Integer, db.ForeignKey('product_variants.id'), nullable=False)
    store_id = db.Column(db.Integer, db.ForeignKey('stores.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    low_stock_threshold = db.Column(db.Integer, nullable=False, default=5)

    __table_args__ = (
        db.UniqueConstraint('product_variant_id', 'store_id', name='uix_inventory_variant_store'),
        db.CheckConstraint('quantity >= 0', name='ck_inventory_quantity_non_negative'),
    )

    # Relationships
    product_variant = db.relationship('ProductVariant')
    store = db.relationship('Store', back_populates='inventories')
    transactions = db.relationship(
        'InventoryTransaction',
        back_populates='inventory',
        order_by='InventoryTransaction.id.desc()',
        lazy='dynamic',
    )

    def __repr__(self):
        return f'<Inventory Variant:{self.product_variant_id} Store:{self.store_id} Qty:{self.quantity}>'

    @property
    def is_low_stock(self):
        return (self.quantity or 0) <= (self.low_stock_threshold or 0)

    def to_dict(self, include_audit_fields=True):
        result = super().to_dict(include_audit_fields=include_audit_fields)
        result['is_low_stock'] = self.is_low_stock
        result['store'] = self.store.to_summary() if self.store else None
        result['product_variant'] = self.product_variant.to_summary() if self.product_variant else None
        return result
