from inventory_api.data.core.timestamped_base import TimestampedBase
from inventory_api import db


class Product(TimestampedBase):
    __tablename__ = 'products'

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)

    variants = db.relationship('ProductVariant', back_populates='product', order_by='ProductVariant.id')

    def __repr__(self):
        return f'<Product {self.name}>'
