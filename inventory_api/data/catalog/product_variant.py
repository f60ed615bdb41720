from inventory_api.data.core.timestamped_base import TimestampedBase
from inventory_api import db


class ProductVariant(TimestampedBase):
    """A sellable SKU of a product; inventory is tracked per variant."""
    __tablename__ = 'product_variants'

    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    sku = db.Column(db.String(100), nullable=False, unique=True)
    price = db.Column(db.Numeric(12, 2), nullable=False, default=0)

    product = db.relationship('Product', back_populates='variants')

    def __repr__(self):
        return f'<ProductVariant {self.sku}>'

    def to_summary(self):
        return {
            'id': self.id,
            'sku': self.sku,
            'product': {'id': self.product.id, 'name': self.product.name} if self.product else None,
        }
