from inventory_api import db
from inventory_api.data.core.timestamped_base import TimestampedBase

STATUS_PENDING = 'pending'
STATUS_IN_TRANSIT = 'in_transit'
STATUS_COMPLETED = 'completed'
STATUS_CANCELLED = 'cancelled'

TRANSFER_STATUSES = (STATUS_PENDING, STATUS_IN_TRANSIT, STATUS_COMPLETED, STATUS_CANCELLED)


class InventoryTransfer(TimestampedBase):
    """
    A move of one variant's stock from one store to another.

    Rows are never deleted; `status` changes only through InventoryTransferManager.
    """
    __tablename__ = 'inventory_transfers'

    from_store_id = db.Column(db.Integer, db.ForeignKey('stores.id'), nullable=False)
    to_store_id = db.Column(db.Integer, db.ForeignKey('stores.id'), nullable=False)
    product_variant_id = db.Column(db.Integer, db.ForeignKey('product_variants.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    quantity = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    notes = db.Column(db.Text, nullable=True)

    __table_args__ = (
        db.CheckConstraint('from_store_id != to_store_id', name='ck_transfer_distinct_stores'),
        db.CheckConstraint('quantity > 0', name='ck_transfer_quantity_positive'),
        db.Index('ix_transfer_from_status', 'from_store_id', 'status'),
        db.Index('ix_transfer_to_status', 'to_store_id', 'status'),
    )

    # Relationships
    from_store = db.relationship('Store', foreign_keys=[from_store_id])
    to_store = db.relationship('Store', foreign_keys=[to_store_id])
    product_variant = db.relationship('ProductVariant')
    user = db.relationship('User')

    def __repr__(self):
        return f'<InventoryTransfer {self.id} {self.from_store_id}->{self.to_store_id} {self.status}>'

    @property
    def is_closed(self):
        return self.status in (STATUS_COMPLETED, STATUS_CANCELLED)

    def to_dict(self, include_audit_fields=True):
        result = super().to_dict(include_audit_fields=include_audit_fields)
        result['from_store'] = self.from_store.to_summary() if self.from_store else None
        result['to_store'] = self.to_store.to_summary() if self.to_store else None
        result['user'] = self.user.to_summary() if self.user else None
        result['product_variant'] = self.product_variant.to_summary() if self.product_variant else None
        return result
