"""
Data layer: Flask-SQLAlchemy models (CRUD only).

- core/ - users and stores
- catalog/ - products and their sellable variants
- inventory/ - stock records, the transaction ledger and transfers
"""
