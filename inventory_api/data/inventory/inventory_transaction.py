from inventory_api import db
from datetime import datetime

TRANSACTION_TYPES = (
    'addition',
    'reduction',
    'adjustment',
    'transfer_in',
    'transfer_out',
    'transfer_cancel',
)


class InventoryTransaction(db.Model):
    """
    Append-only audit entry for one change to an Inventory quantity.

    Conventions:
    - `quantity` is the signed delta: positive for increases, negative for decreases.
    - `before_quantity` + `quantity` == `after_quantity`.
    """
    __tablename__ = 'inventory_transactions'

    id = db.Column(db.Integer, primary_key=True)
    inventory_id = db.Column(db.Integer, db.ForeignKey('inventories.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    type = db.Column(db.String(30), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    before_quantity = db.Column(db.Integer, nullable=False)
    after_quantity = db.Column(db.Integer, nullable=False)
    notes = db.Column(db.Text, nullable=True)
    transfer_id = db.Column(db.Integer, db.ForeignKey('inventory_transfers.id'), nullable=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    inventory = db.relationship('Inventory', back_populates='transactions')
    user = db.relationship('User')

    def __repr__(self):
        return f'<InventoryTransaction {self.type} Inventory:{self.inventory_id} Qty:{self.quantity}>'

    def to_dict(self):
        return {
            'id': self.id,
            'inventory_id': self.inventory_id,
            'user_id': self.user_id,
            'type': self.type,
            'quantity': self.quantity,
            'before_quantity': self.before_quantity,
            'after_quantity': self.after_quantity,
            'notes': self.notes,
            'transfer_id': self.transfer_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'user': self.user.to_summary() if self.user else None,
            'store_id': self.inventory.store_id if self.inventory else None,
            'product_variant_id': self.inventory.product_variant_id if self.inventory else None,
        }
