from flask import Blueprint, jsonify
from flask_login import login_required

from inventory_api.business.core.authorization import authorize
from inventory_api.presentation.routes.api.helpers import current_actor
from inventory_api.services.core.store_service import StoreService

bp = Blueprint('stores', __name__)


@bp.route('/stores', methods=['GET'])
@login_required
def list_stores():
    authorize(current_actor(), 'store', 'view')
    return jsonify({'data': [store.to_dict() for store in StoreService.get_all()]})
