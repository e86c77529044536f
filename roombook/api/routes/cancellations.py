from flask import Blueprint, request, jsonify
from pydantic import ValidationError as PydanticValidationError
from roombook.errors import ValidationError
from roombook.schemas import CancellationConfirm, CancellationRequest, first_error_message
from roombook.services.cancellation_service import CancellationService

cancellations_bp = Blueprint('cancellations', __name__)

def _parse(schema):
    try:
        return schema.model_validate(request.get_json(silent=True) or {})
    except PydanticValidationError as e:
        raise ValidationError(first_error_message(e))

@cancellations_bp.route('/<booking_id>/cancellation', methods=['POST'])
def request_cancellation(booking_id):
    data = _parse(CancellationRequest)
    result = CancellationService.request_cancellation(booking_id, data.email)
    response = jsonify(result.to_dict())
    if result.retry_after is not None:
        response.headers['Retry-After'] = str(result.retry_after)
    return response, result.status_code

@cancellations_bp.route('/<booking_id>/cancellation/confirm', methods=['POST'])
def confirm_cancellation(booking_id):
    data = _parse(CancellationConfirm)
    result = CancellationService.confirm_cancellation(booking_id, data.token)
    return jsonify(result.to_dict()), result.status_code
