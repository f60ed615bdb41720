from __future__ import annotations

from dataclasses import dataclass

from inventory_api.business.core.request_validation import (
    add_error,
    must_exist,
    one_of,
    optional_str,
    raise_if_errors,
    require_int,
    require_json_object,
)
from inventory_api.data.catalog.product_variant import ProductVariant
from inventory_api.data.core.store import Store
from inventory_api.data.inventory.inventory_transfer import (
    STATUS_COMPLETED,
    STATUS_PENDING,
    TRANSFER_STATUSES,
)

NOTES_MAX_LENGTH = 1000
CREATE_STATUSES = (STATUS_PENDING, STATUS_COMPLETED)


@dataclass(frozen=True)
class TransferRequest:
    from_store_id: int
    to_store_id: int
    product_variant_id: int
    quantity: int
    status: str
    notes: str | None = None


class TransferRequestValidator:
    """Turns decoded JSON bodies into TransferRequest values or raises ValidationError."""

    @staticmethod
    def _collect(data: dict, errors: dict, *, prefix: str = '', default_status: str) -> TransferRequest | None:
        def key(field):
            return f"{prefix}{field}"

        from_store_id = require_int(data, 'from_store_id', errors, key=key('from_store_id'))
        to_store_id = require_int(data, 'to_store_id', errors, key=key('to_store_id'))
        variant_id = require_int(data, 'product_variant_id', errors, key=key('product_variant_id'))
        quantity = require_int(data, 'quantity', errors, min_value=1, key=key('quantity'))
        notes = optional_str(data, 'notes', errors, max_length=NOTES_MAX_LENGTH, key=key('notes'))
        status = one_of(data, 'status', CREATE_STATUSES, errors, default=default_status, key=key('status'))

        must_exist(Store, from_store_id, 'from_store_id', errors, key=key('from_store_id'))
        must_exist(Store, to_store_id, 'to_store_id', errors, key=key('to_store_id'))
        must_exist(ProductVariant, variant_id, 'product_variant_id', errors, key=key('product_variant_id'))

        if from_store_id is not None and from_store_id == to_store_id:
            add_error(errors, key('to_store_id'), "The to store id and from store id must be different.")

        if any(k.startswith(prefix) for k in errors):
            return None
        return TransferRequest(
            from_store_id=from_store_id,
            to_store_id=to_store_id,
            product_variant_id=variant_id,
            quantity=quantity,
            status=status,
            notes=notes,
        )

    @classmethod
    def validate_create(cls, payload) -> TransferRequest:
        data = require_json_object(payload)
        errors: dict = {}
        request = cls._collect(data, errors, default_status=STATUS_COMPLETED)
        raise_if_errors(errors)
        return request

    @classmethod
    def validate_batch(cls, payload) -> list[TransferRequest]:
        data = require_json_object(payload)
        items = data.get('transfers')
        if not isinstance(items, list) or not items:
            raise_if_errors({'transfers': ["The transfers field is required and must be a non-empty list."]})

        errors: dict = {}
        requests = []
        for index, item in enumerate(items):
            prefix = f"transfers.{index}."
            if not isinstance(item, dict):
                add_error(errors, f"transfers.{index}", "Each transfer must be an object.")
                continue
            requests.append(cls._collect(item, errors, prefix=prefix, default_status=STATUS_PENDING))
        raise_if_errors(errors)
        return requests

    @staticmethod
    def validate_status_update(payload) -> tuple[str, str | None, bool]:
        """Return (status, notes, notes_given)."""
        data = require_json_object(payload)
        errors: dict = {}
        status = one_of(data, 'status', TRANSFER_STATUSES, errors, required=True)
        notes = optional_str(data, 'notes', errors, max_length=NOTES_MAX_LENGTH)
        raise_if_errors(errors)
        return status, notes, 'notes' in data

    @staticmethod
    def validate_cancel(payload) -> str:
        data = require_json_object(payload)
        errors: dict = {}
        reason = optional_str(data, 'reason', errors, max_length=NOTES_MAX_LENGTH, required=True)
        raise_if_errors(errors)
        return reason
