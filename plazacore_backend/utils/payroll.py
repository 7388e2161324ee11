import logging

from ..errors import ValidationError
from ..extensions import db
from ..models import Staff, StaffSalaryRecord
from .billing import to_int

logger = logging.getLogger(__name__)


def generate_monthly_salaries(month, year):
    """Create pending salary records for active staff that have none for the month."""
    month, year = to_int(month, 'month'), to_int(year, 'year')
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")

    existing = {
        staff_id for (staff_id,) in
        db.session.query(StaffSalaryRecord.staff_id).filter_by(month=month, year=year)
    }
    active = Staff.query.filter_by(status='active').order_by(Staff.id.asc()).all()

    created = []
    for member in active:
        if member.id in existing:
            continue
        record = StaffSalaryRecord(
            staff_id=member.id,
            month=month,
            year=year,
            amount=member.salary_amount,
            status='pending',
        )
        db.session.add(record)
        created.append(record)
    db.session.commit()

    if not created:
        return {"success": True, "message": "All salary records already exist", "generated": 0, "records": []}

    logger.info("Generated %d salary records for %02d/%d", len(created), month, year)
    return {
        "success": True,
        "message": f"Generated {len(created)} salary records",
        "generated": len(created),
        "records": [r.serialize() for r in created],
    }
