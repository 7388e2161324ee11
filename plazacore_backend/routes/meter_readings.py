from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from ..errors import InvalidStateError, ValidationError, require_fields
from ..extensions import db
from ..models import Business, MeterReading
from ..models.meter_reading import METER_TYPES
from ..security import ADMIN_ROLES, current_business_id, roles_required
from ..utils.billing import parse_date

meter_bp = Blueprint("meter_readings", __name__)


def _default_rate(meter_type):
    key = "DEFAULT_GAS_RATE" if meter_type == "gas" else "DEFAULT_ELECTRICITY_RATE"
    return current_app.config[key]


def _check_meter_type(meter_type):
    if meter_type not in METER_TYPES:
        raise ValidationError(f"meter_type must be one of: {', '.join(METER_TYPES)}")


@meter_bp.get("/meter-readings")
@jwt_required()
def list_meter_readings():
    query = MeterReading.query
    business_id = current_business_id() or request.args.get('business_id', type=int)
    meter_type = request.args.get('meter_type')
    payment_status = request.args.get('payment_status')

    if business_id:
        query = query.filter(MeterReading.business_id == business_id)
    if meter_type:
        query = query.filter(MeterReading.meter_type == meter_type)
    if payment_status:
        query = query.filter(MeterReading.payment_status == payment_status)

    readings = query.order_by(MeterReading.reading_date.desc(), MeterReading.id.desc()).all()
    return jsonify({"meter_readings": [r.serialize() for r in readings], "count": len(readings)})


@meter_bp.get("/meter-readings/previous")
@roles_required(*ADMIN_ROLES)
def previous_reading():
    """Value the next reading will be measured from."""
    business_id = request.args.get('business_id', type=int)
    meter_type = request.args.get('meter_type', 'electricity')
    if not business_id:
        raise ValidationError("business_id is required")
    _check_meter_type(meter_type)
    last = MeterReading.latest_for(business_id, meter_type)
    return jsonify({
        "business_id": business_id,
        "meter_type": meter_type,
        "previous_reading": float(last.current_reading) if last else 0.0,
        "reading_date": last.reading_date.isoformat() if last else None,
    })


@meter_bp.post("/meter-readings")
@roles_required(*ADMIN_ROLES)
def create_meter_reading():
    data = request.get_json(silent=True) or {}
    require_fields(data, ['business_id', 'meter_type', 'current_reading'])
    _check_meter_type(data['meter_type'])

    if db.session.get(Business, data['business_id']) is None:
        raise ValidationError("Business not found")

    reading = MeterReading.record(
        business_id=data['business_id'],
        meter_type=data['meter_type'],
        current_reading=data['current_reading'],
        rate_per_unit=data.get('rate_per_unit') or _default_rate(data['meter_type']),
        reading_date=parse_date(data['reading_date'], 'reading_date') if data.get('reading_date') else None,
    )
    db.session.commit()
    current_app.logger.info(
        "Meter reading %s: business %s %s units", reading.id, reading.business_id, reading.units_consumed
    )
    return jsonify(reading.serialize()), 201


@meter_bp.post("/meter-readings/sheet")
@roles_required(*ADMIN_ROLES)
def create_reading_sheet():
    """
    Bulk entry for one meter type and date.

    ``readings`` is a list of ``{business_id, current_reading}``; rows with a
    blank reading are skipped. Rows that fail validation are reported and the
    rest are still saved.
    """
    data = request.get_json(silent=True) or {}
    require_fields(data, ['meter_type', 'readings'])
    meter_type = data['meter_type']
    _check_meter_type(meter_type)
    reading_date = parse_date(data['reading_date'], 'reading_date') if data.get('reading_date') else None
    rate = data.get('rate_per_unit') or _default_rate(meter_type)

    created, skipped, errors = [], 0, []
    for row in data['readings']:
        if row.get('current_reading') in (None, ""):
            skipped += 1
            continue
        business = db.session.get(Business, row.get('business_id'))
        if business is None:
            errors.append(f"{row.get('business_id')}: Business not found")
            continue
        try:
            with db.session.begin_nested():
                reading = MeterReading.record(
                    business_id=business.id,
                    meter_type=meter_type,
                    current_reading=row['current_reading'],
                    rate_per_unit=row.get('rate_per_unit') or rate,
                    reading_date=reading_date,
                )
            created.append(reading)
        except ValidationError as e:
            errors.append(f"{business.name}: {e.message}")
    db.session.commit()

    body = {
        "message": f"Saved {len(created)} readings",
        "meter_readings": [r.serialize() for r in created],
        "created": len(created),
        "skipped": skipped,
    }
    if errors:
        body["errors"] = errors
    return jsonify(body), 201


@meter_bp.patch("/meter-readings/<int:reading_id>/status")
@roles_required(*ADMIN_ROLES)
def update_meter_reading_status(reading_id):
    reading = db.get_or_404(MeterReading, reading_id)
    data = request.get_json(silent=True) or {}
    require_fields(data, ['payment_status'])
    reading.set_payment_status(data['payment_status'])
    db.session.commit()
    return jsonify(reading.serialize())


@meter_bp.delete("/meter-readings/<int:reading_id>")
@roles_required(*ADMIN_ROLES)
def delete_meter_reading(reading_id):
    reading = db.get_or_404(MeterReading, reading_id)
    if reading.payments:
        raise InvalidStateError("Readings with recorded payments cannot be deleted")
    db.session.delete(reading)
    db.session.commit()
    return jsonify({"message": "Meter reading deleted"})
