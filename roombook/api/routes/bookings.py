from flask import Blueprint, request, jsonify
from roombook.errors import ValidationError
from roombook.services.availability_service import AvailabilityService
from roombook.services.booking_service import BookingService
from datetime import datetime
from roombook.utils.time_utils import to_utc_naive

bookings_bp = Blueprint('bookings', __name__)

@bookings_bp.route('/', methods=['POST'])
def create_booking():
    data = request.get_json(silent=True)
    result = BookingService.create_booking(data)
    return jsonify(result.to_dict()), result.status_code

@bookings_bp.route('/<booking_id>', methods=['GET'])
def get_booking(booking_id):
    booking = BookingService.get_booking(booking_id)
    return jsonify(booking.to_dict())

@bookings_bp.route('/availability', methods=['GET'])
def get_availability():
    try:
        room_id = int(request.args['room_id'])
        start = to_utc_naive(datetime.fromisoformat(request.args['start']))
        end = to_utc_naive(datetime.fromisoformat(request.args['end']))
        bookings = AvailabilityService.list_bookings(room_id, start, end)
    except (KeyError, ValueError) as e:
        raise ValidationError(f"Invalid availability query: {e}")

    return jsonify({
        'room_id': room_id,
        'start': start.isoformat(),
        'end': end.isoformat(),
        'available': len(bookings) == 0,
        'bookings': [b.to_dict() for b in bookings]
    })
