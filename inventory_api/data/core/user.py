import hashlib
import secrets
from datetime import datetime

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from inventory_api import db
from inventory_api.business.core.data_insertion_mixin import DataInsertionMixin

ROLES = ('admin', 'staff', 'viewer')

user_stores = db.Table(
    'user_stores',
    db.Column('user_id', db.Integer, db.ForeignKey('users.id'), primary_key=True),
    db.Column('store_id', db.Integer, db.ForeignKey('stores.id'), primary_key=True),
)


def _hash_token(token):
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


class User(UserMixin, DataInsertionMixin, db.Model):
    __tablename__ = 'users'
    __serialize_exclude__ = ('password_hash', 'api_token_hash')

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    name = db.Column(db.String(120), nullable=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='viewer')
    is_active = db.Column(db.Boolean, default=True)
    api_token_hash = db.Column(db.String(64), unique=True, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    stores = db.relationship('Store', secondary=user_stores, order_by='Store.id')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def issue_api_token(self):
        """Create a new bearer token; only its hash is stored."""
        token = secrets.token_hex(32)
        self.api_token_hash = _hash_token(token)
        return token

    def revoke_api_token(self):
        self.api_token_hash = None

    @classmethod
    def find_by_api_token(cls, token):
        if not token:
            return None
        return cls.query.filter_by(api_token_hash=_hash_token(token)).first()

    @property
    def store_ids(self):
        return tuple(store.id for store in self.stores)

    def to_summary(self):
        return {'id': self.id, 'name': self.name or self.username}

    def __repr__(self):
        return f'<User {self.username}>'
