"""
Test the transfer workflow: creation, status transitions and cancellation.
"""
import pytest

from inventory_api import db
from inventory_api.business.core.errors import (
    AuthorizationError,
    InsufficientStockError,
    InvalidTransitionError,
    NotFoundError,
)
from inventory_api.business.inventory.transfers.transfer_manager import InventoryTransferManager
from inventory_api.business.inventory.transfers.transfer_request_validator import TransferRequest
from inventory_api.data.inventory.inventory_transfer import InventoryTransfer
from inventory_api.test.helpers import ledger, quantity_at


def _request(seed, quantity=25, status='pending', notes=None, to_store_id=None):
    return TransferRequest(
        from_store_id=seed.north_id,
        to_store_id=to_store_id or seed.south_id,
        product_variant_id=seed.variant_id,
        quantity=quantity,
        status=status,
        notes=notes,
    )


def _stock(seed):
    return quantity_at(seed.variant_id, seed.north_id), quantity_at(seed.variant_id, seed.south_id)


# Creation

def test_completed_creation_moves_stock_immediately(ctx, seed, actors):
    transfer = InventoryTransferManager().create(actors['admin'], _request(seed, status='completed'))

    assert transfer.status == 'completed'
    assert transfer.user_id == seed.user_ids['admin']
    assert _stock(seed) == (75, 25)
    assert ledger(transfer.id) == [('transfer_out', -25), ('transfer_in', 25)]


def test_completed_creation_creates_missing_destination(ctx, seed, actors):
    transfer = InventoryTransferManager().create(
        actors['admin'], _request(seed, quantity=10, status='completed', to_store_id=seed.east_id)
    )

    assert quantity_at(seed.variant_id, seed.east_id) == 10
    assert ledger(transfer.id) == [('transfer_out', -10), ('transfer_in', 10)]


def test_pending_creation_leaves_stock_alone(ctx, seed, actors):
    transfer = InventoryTransferManager().create(actors['admin'], _request(seed, notes='Restock'))

    assert transfer.status == 'pending'
    assert transfer.notes == 'Restock'
    assert _stock(seed) == (100, 0)
    assert ledger(transfer.id) == []


@pytest.mark.parametrize('status', ['pending', 'completed'])
def test_creation_over_available_stock_changes_nothing(ctx, seed, actors, status):
    with pytest.raises(InsufficientStockError) as exc_info:
        InventoryTransferManager().create(actors['admin'], _request(seed, quantity=101, status=status))

    assert exc_info.value.status_code == 400
    assert _stock(seed) == (100, 0)
    assert InventoryTransfer.query.count() == 0


def test_creation_from_store_without_record_counts_as_zero(ctx, seed, actors):
    request = TransferRequest(
        from_store_id=seed.east_id,
        to_store_id=seed.south_id,
        product_variant_id=seed.variant_id,
        quantity=1,
        status='completed',
    )
    with pytest.raises(InsufficientStockError) as exc_info:
        InventoryTransferManager().create(actors['admin'], request)
    assert exc_info.value.available == 0


def test_staff_can_create_from_assigned_store(ctx, seed, actors):
    transfer = InventoryTransferManager().create(actors['staff'], _request(seed))
    assert transfer.id is not None


def test_staff_cannot_create_between_unassigned_stores(ctx, seed, actors):
    with pytest.raises(AuthorizationError):
        InventoryTransferManager().create(actors['eaststaff'], _request(seed))
    assert InventoryTransfer.query.count() == 0


def test_viewer_cannot_create(ctx, seed, actors):
    with pytest.raises(AuthorizationError):
        InventoryTransferManager().create(actors['viewer'], _request(seed))


def test_batch_is_all_or_nothing(ctx, seed, actors):
    requests = [_request(seed, quantity=60, status='completed'), _request(seed, quantity=60, status='completed')]

    with pytest.raises(InsufficientStockError):
        InventoryTransferManager().create_batch(actors['admin'], requests)

    assert InventoryTransfer.query.count() == 0
    assert _stock(seed) == (100, 0)


def test_batch_creates_every_transfer(ctx, seed, actors):
    transfers = InventoryTransferManager().create_batch(
        actors['admin'], [_request(seed, quantity=10), _request(seed, quantity=20)]
    )

    assert [t.quantity for t in transfers] == [10, 20]
    assert all(t.status == 'pending' for t in transfers)
    assert InventoryTransfer.query.count() == 2


# Status transitions

def test_pending_to_in_transit_ships_once(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed))

    manager.update_status(actors['admin'], transfer.id, 'in_transit')

    assert _stock(seed) == (75, 0)
    assert ledger(transfer.id) == [('transfer_out', -25)]


def test_in_transit_to_completed_receives(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed))
    manager.update_status(actors['admin'], transfer.id, 'in_transit')

    transfer = manager.update_status(actors['admin'], transfer.id, 'completed')

    assert transfer.status == 'completed'
    assert _stock(seed) == (75, 25)
    assert ledger(transfer.id) == [('transfer_out', -25), ('transfer_in', 25)]


def test_pending_to_completed_moves_both_sides(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed))

    manager.update_status(actors['admin'], transfer.id, 'completed')

    assert _stock(seed) == (75, 25)
    assert ledger(transfer.id) == [('transfer_out', -25), ('transfer_in', 25)]


def test_pending_to_cancelled_has_no_stock_effect(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed))

    transfer = manager.update_status(actors['admin'], transfer.id, 'cancelled')

    assert transfer.status == 'cancelled'
    assert _stock(seed) == (100, 0)
    assert ledger(transfer.id) == []


def test_in_transit_to_cancelled_restores_source(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed))
    manager.update_status(actors['admin'], transfer.id, 'in_transit')

    manager.update_status(actors['admin'], transfer.id, 'cancelled')

    assert _stock(seed) == (100, 0)
    assert ledger(transfer.id) == [('transfer_out', -25), ('transfer_cancel', 25)]


def test_in_transit_cannot_go_back_to_pending(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed))
    manager.update_status(actors['admin'], transfer.id, 'in_transit')

    with pytest.raises(InvalidTransitionError) as exc_info:
        manager.update_status(actors['admin'], transfer.id, 'pending')

    assert exc_info.value.status_code == 400
    assert (exc_info.value.from_status, exc_info.value.to_status) == ('in_transit', 'pending')
    assert db.session.get(InventoryTransfer, transfer.id).status == 'in_transit'


@pytest.mark.parametrize('target', ['pending', 'in_transit', 'cancelled'])
def test_completed_transfers_are_final(ctx, seed, actors, target):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed, status='completed'))

    with pytest.raises(InvalidTransitionError):
        manager.update_status(actors['admin'], transfer.id, target)

    assert _stock(seed) == (75, 25)


def test_same_status_is_a_no_op(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed, status='completed'))

    transfer = manager.update_status(actors['admin'], transfer.id, 'completed')

    assert transfer.status == 'completed'
    assert len(ledger(transfer.id)) == 2


def test_status_update_replaces_notes_when_given(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed, notes='Original'))

    transfer = manager.update_status(actors['admin'], transfer.id, 'in_transit')
    assert transfer.notes == 'Original'

    transfer = manager.update_status(
        actors['admin'], transfer.id, 'completed', notes='Signed by driver', replace_notes=True
    )
    assert transfer.notes == 'Signed by driver'


def test_shipping_without_stock_rolls_back(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed, quantity=80))
    other = manager.create(actors['admin'], _request(seed, quantity=80, status='completed'))
    assert other.status == 'completed'

    with pytest.raises(InsufficientStockError):
        manager.update_status(actors['admin'], transfer.id, 'in_transit')

    assert db.session.get(InventoryTransfer, transfer.id).status == 'pending'
    assert _stock(seed) == (20, 80)
    assert ledger(transfer.id) == []


def test_unknown_transfer_raises_not_found(ctx, seed, actors):
    with pytest.raises(NotFoundError) as exc_info:
        InventoryTransferManager().update_status(actors['admin'], 999, 'completed')
    assert exc_info.value.status_code == 404


def test_staff_cannot_move_transfers_of_other_stores(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed))

    with pytest.raises(AuthorizationError):
        manager.update_status(actors['eaststaff'], transfer.id, 'in_transit')

    assert _stock(seed) == (100, 0)


# Cancellation

def test_cancel_example_round_trip(ctx, seed, actors):
    """Source 100, ship 25 -> 75, cancel -> 100."""
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed))
    manager.update_status(actors['admin'], transfer.id, 'in_transit')
    assert quantity_at(seed.variant_id, seed.north_id) == 75

    manager.cancel(actors['admin'], transfer.id, 'Truck broke down')

    assert quantity_at(seed.variant_id, seed.north_id) == 100
    assert ledger(transfer.id) == [('transfer_out', -25), ('transfer_cancel', 25)]


def test_cancel_prefixes_reason_to_notes(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed, notes='Weekly restock'))

    transfer = manager.cancel(actors['admin'], transfer.id, 'Wrong store')

    assert transfer.status == 'cancelled'
    assert transfer.notes == "Cancelled. Reason: Wrong store\nOriginal notes: Weekly restock"


def test_cancel_without_original_notes(ctx, seed, actors):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed))

    transfer = manager.cancel(actors['admin'], transfer.id, 'Duplicate')

    assert transfer.notes == "Cancelled. Reason: Duplicate"


@pytest.mark.parametrize('status', ['completed', 'cancelled'])
def test_closed_transfers_cannot_be_cancelled(ctx, seed, actors, status):
    manager = InventoryTransferManager()
    transfer = manager.create(actors['admin'], _request(seed, status='completed'))
    if status == 'cancelled':
        transfer = manager.create(actors['admin'], _request(seed))
        manager.cancel(actors['admin'], transfer.id, 'First')
    before = _stock(seed)
    notes_before = db.session.get(InventoryTransfer, transfer.id).notes

    with pytest.raises(InvalidTransitionError) as exc_info:
        manager.cancel(actors['admin'], transfer.id, 'Again')

    assert "cannot be cancelled again" in exc_info.value.message
    assert _stock(seed) == before
    assert db.session.get(InventoryTransfer, transfer.id).notes == notes_before
