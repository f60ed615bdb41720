"""
Inventory transfer routes - listing, creation and status workflow
"""
from flask import Blueprint, jsonify, request
from flask_login import login_required

from inventory_api.business.core.authorization import authorize
from inventory_api.business.core.request_validation import one_of, raise_if_errors
from inventory_api.business.inventory.transfers.transfer_manager import InventoryTransferManager
from inventory_api.business.inventory.transfers.transfer_request_validator import TransferRequestValidator
from inventory_api.data.inventory.inventory_transfer import TRANSFER_STATUSES
from inventory_api.logger import get_logger
from inventory_api.presentation.routes.api.helpers import (
    current_actor,
    date_range_args,
    int_arg,
    json_body,
    page_args,
    paginated,
)
from inventory_api.services.inventory.transfer_service import InventoryTransferService

logger = get_logger("inventory_api.routes.transfers")

bp = Blueprint('transfers', __name__)


@bp.route('/inventory/transfers', methods=['GET'])
@login_required
def list_transfers():
    """List transfers, newest first"""
    authorize(current_actor(), 'transfer', 'view')

    errors = {}
    status = one_of(request.args, 'status', TRANSFER_STATUSES, errors)
    raise_if_errors(errors)
    start_date, end_date = date_range_args()
    page, per_page = page_args()

    pagination = InventoryTransferService.get_list_data(
        page=page,
        per_page=per_page,
        from_store_id=int_arg('from_store_id'),
        to_store_id=int_arg('to_store_id'),
        status=status,
        start_date=start_date,
        end_date=end_date,
        product_name=request.args.get('product_name') or None,
    )
    return jsonify(paginated(pagination, lambda t: t.to_dict()))


@bp.route('/inventory/transfers/<int:transfer_id>', methods=['GET'])
@login_required
def show_transfer(transfer_id):
    transfer = InventoryTransferService.get_transfer(transfer_id)
    authorize(current_actor(), 'transfer', 'view')
    return jsonify({'data': transfer.to_dict()})


@bp.route('/inventory/transfers', methods=['POST'])
@login_required
def create_transfer():
    """Create a transfer; with the default `completed` status stock moves immediately"""
    actor = current_actor()
    authorize(actor, 'transfer', 'create')

    transfer_request = TransferRequestValidator.validate_create(json_body())
    transfer = InventoryTransferManager().create(actor, transfer_request)
    return jsonify({'data': transfer.to_dict()}), 201


@bp.route('/inventory/transfers/batch', methods=['POST'])
@login_required
def create_transfer_batch():
    actor = current_actor()
    authorize(actor, 'transfer', 'create')

    transfer_requests = TransferRequestValidator.validate_batch(json_body())
    transfers = InventoryTransferManager().create_batch(actor, transfer_requests)
    return jsonify({
        'data': [t.to_dict() for t in transfers],
        'message': f"Created {len(transfers)} inventory transfers",
    }), 201


@bp.route('/inventory/transfers/<int:transfer_id>/status', methods=['PATCH'])
@login_required
def update_transfer_status(transfer_id):
    actor = current_actor()
    authorize(actor, 'transfer', 'update')

    status, notes, notes_given = TransferRequestValidator.validate_status_update(json_body())
    transfer = InventoryTransferManager().update_status(
        actor, transfer_id, status, notes=notes, replace_notes=notes_given
    )
    return jsonify({'data': transfer.to_dict()})


@bp.route('/inventory/transfers/<int:transfer_id>/cancel', methods=['PATCH'])
@login_required
def cancel_transfer(transfer_id):
    actor = current_actor()
    authorize(actor, 'transfer', 'cancel')

    reason = TransferRequestValidator.validate_cancel(json_body())
    transfer = InventoryTransferManager().cancel(actor, transfer_id, reason)
    return jsonify({'data': transfer.to_dict()})
