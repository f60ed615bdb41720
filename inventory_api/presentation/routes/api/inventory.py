"""
Inventory routes - stock records, manual adjustments and the transaction ledger
"""
from flask import Blueprint, jsonify, request
from flask_login import login_required

from inventory_api.business.core.authorization import authorize
from inventory_api.business.core.request_validation import (
    must_exist,
    one_of,
    optional_str,
    raise_if_errors,
    require_int,
    require_json_object,
)
from inventory_api.business.inventory.stock.inventory_manager import ADJUST_ACTIONS, InventoryManager
from inventory_api.data.catalog.product_variant import ProductVariant
from inventory_api.data.core.store import Store
from inventory_api.data.inventory.inventory_transaction import TRANSACTION_TYPES
from inventory_api.logger import get_logger
from inventory_api.presentation.routes.api.helpers import (
    current_actor,
    date_range_args,
    int_arg,
    json_body,
    page_args,
    paginated,
)
from inventory_api.services.inventory.inventory_service import InventoryService

logger = get_logger("inventory_api.routes.inventory")

bp = Blueprint('inventory', __name__)


@bp.route('/inventory', methods=['GET'])
@login_required
def list_inventory():
    authorize(current_actor(), 'inventory', 'view')
    page, per_page = page_args()
    pagination = InventoryService.get_list_data(
        page=page,
        per_page=per_page,
        store_id=int_arg('store_id'),
        product_variant_id=int_arg('product_variant_id'),
        low_stock=request.args.get('low_stock', '').lower() in ('true', '1', 'yes'),
    )
    return jsonify(paginated(pagination, lambda inv: inv.to_dict()))


@bp.route('/inventory/<int:inventory_id>', methods=['GET'])
@login_required
def show_inventory(inventory_id):
    authorize(current_actor(), 'inventory', 'view')
    inventory = InventoryService.get_inventory(inventory_id)
    return jsonify({'data': inventory.to_dict()})


@bp.route('/inventory/adjust', methods=['POST'])
@login_required
def adjust_inventory():
    """Manual add / reduce / set of one variant's stock at one store"""
    actor = current_actor()
    authorize(actor, 'inventory', 'adjust')

    data = require_json_object(json_body())
    errors = {}
    variant_id = require_int(data, 'product_variant_id', errors)
    store_id = require_int(data, 'store_id', errors)
    action = one_of(data, 'action', ADJUST_ACTIONS, errors, required=True)
    min_quantity = 0 if action == 'set' else 1
    quantity = require_int(data, 'quantity', errors, min_value=min_quantity)
    notes = optional_str(data, 'notes', errors, max_length=1000)
    must_exist(ProductVariant, variant_id, 'product_variant_id', errors)
    must_exist(Store, store_id, 'store_id', errors)
    raise_if_errors(errors)

    authorize(actor, 'inventory', 'adjust', (store_id,))
    inventory = InventoryManager().adjust(
        product_variant_id=variant_id,
        store_id=store_id,
        action=action,
        quantity=quantity,
        user_id=actor.user_id,
        notes=notes,
    )
    return jsonify({'data': inventory.to_dict()})


@bp.route('/inventory/<int:inventory_id>/history', methods=['GET'])
@login_required
def inventory_history(inventory_id):
    authorize(current_actor(), 'inventory', 'view')

    errors = {}
    transaction_type = one_of(request.args, 'type', TRANSACTION_TYPES + ('all',), errors)
    raise_if_errors(errors)
    start_date, end_date = date_range_args()
    page, per_page = page_args()

    pagination = InventoryService.get_history(
        inventory_id,
        page=page,
        per_page=per_page,
        transaction_type=transaction_type,
        start_date=start_date,
        end_date=end_date,
    )
    return jsonify(paginated(pagination, lambda entry: entry.to_dict()))


@bp.route('/inventory/transactions', methods=['GET'])
@login_required
def all_transactions():
    authorize(current_actor(), 'inventory', 'view')

    errors = {}
    transaction_type = one_of(request.args, 'type', TRANSACTION_TYPES, errors)
    raise_if_errors(errors)
    start_date, end_date = date_range_args()
    page, per_page = page_args()

    pagination = InventoryService.get_all_transactions(
        page=page,
        per_page=per_page,
        store_id=int_arg('store_id'),
        transaction_type=transaction_type,
        start_date=start_date,
        end_date=end_date,
    )
    return jsonify(paginated(pagination, lambda entry: entry.to_dict()))
