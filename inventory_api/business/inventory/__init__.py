"""
Inventory business layer.

Organized into:
- stock/ - quantity changes and ledger writes
- status/ - transfer status transition rules
- transfers/ - the transfer workflow and request validation
"""
