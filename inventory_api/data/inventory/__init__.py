"""
Inventory models.

Architecture:
- inventory.py - stock quantity of one variant at one store
- inventory_transaction.py - append-only ledger of quantity changes
- inventory_transfer.py - store-to-store transfer with a status lifecycle
"""
