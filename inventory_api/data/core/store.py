from inventory_api.data.core.timestamped_base import TimestampedBase
from inventory_api import db


class Store(TimestampedBase):
    __tablename__ = 'stores'

    name = db.Column(db.String(100), nullable=False, unique=True)
    address = db.Column(db.Text, nullable=True)

    # Relationships (no backrefs)
    inventories = db.relationship('Inventory', back_populates='store')

    def __repr__(self):
        return f'<Store {self.name}>'

    def to_summary(self):
        return {'id': self.id, 'name': self.name, 'address': self.address}
