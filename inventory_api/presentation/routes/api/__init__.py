"""
JSON API blueprints.

- transfers.py - /api/inventory/transfers
- inventory.py - /api/inventory (stock records, adjustments, ledger)
- stores.py - /api/stores
"""
