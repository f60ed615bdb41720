"""
Shared helpers for the Inventory API tests
"""


def quantity_at(variant_id, store_id):
    """Current stock of a variant at a store, 0 when no record exists"""
    from inventory_api.data.inventory.inventory import Inventory

    inv = (
        Inventory.query
        .filter_by(product_variant_id=variant_id, store_id=store_id)
        .populate_existing()
        .first()
    )
    return inv.quantity if inv else 0


def ledger(transfer_id):
    """(type, quantity) pairs written for a transfer, oldest first"""
    from inventory_api.data.inventory.inventory_transaction import InventoryTransaction

    entries = InventoryTransaction.query.filter_by(transfer_id=transfer_id).order_by(InventoryTransaction.id)
    return [(entry.type, entry.quantity) for entry in entries]


def transfer_payload(seed, **overrides):
    payload = {
        'from_store_id': seed.north_id,
        'to_store_id': seed.south_id,
        'product_variant_id': seed.variant_id,
        'quantity': 25,
    }
    payload.update(overrides)
    return payload
