#!/usr/bin/env python
import sys
import csv
from pathlib import Path
from datetime import date

from plazacore_backend import create_app
from plazacore_backend.errors import ValidationError
from plazacore_backend.extensions import db
from plazacore_backend.models import Business, MeterReading, Staff, TermsCondition


def parse_bool(v):
    if isinstance(v, bool):
        return v
    s = str(v or '').strip().lower()
    return s in ('1', 'true', 'yes', 'y')


def parse_int(v, default=0):
    try:
        return int(float(v))
    except (TypeError, ValueError):
        return default


def parse_float(v, default=0.0):
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def parse_date(v, default=None):
    try:
        return date.fromisoformat(str(v).strip())
    except ValueError:
        return default


def load_csv(path):
    with open(path, newline='', encoding='utf-8-sig') as f:
        return list(csv.DictReader(f))


def import_businesses(rows, dry):
    created = 0
    for r in rows:
        name = (r.get('name') or '').strip()
        if not name:
            continue
        shop = (r.get('shop_number') or '').strip() or None
        # de-dup by name+shop
        if Business.query.filter_by(name=name, shop_number=shop).first():
            continue
        b = Business(
            name=name,
            type=r.get('type') or None,
            contact_person=r.get('contact_person') or None,
            phone=r.get('phone') or None,
            email=r.get('email') or None,
            floor_number=parse_int(r.get('floor_number')),
            shop_number=shop,
            rent_amount=parse_float(r.get('rent_amount')),
            security_deposit=parse_float(r.get('security_deposit')),
            lease_start_date=parse_date(r.get('lease_start_date')),
            lease_end_date=parse_date(r.get('lease_end_date')),
            rent_management=parse_bool(r.get('rent_management')),
            status=r.get('status') or 'active',
        )
        if not dry:
            db.session.add(b)
        created += 1
    if not dry:
        db.session.commit()
    return created


def import_meter_readings(rows, dry):
    """Rows in reading-date order; each row's previous reading comes from the one before it."""
    created = 0
    rows = sorted(rows, key=lambda r: r.get('reading_date') or '')
    for r in rows:
        business = Business.query.filter_by(shop_number=(r.get('shop_number') or '').strip()).first()
        if business is None or r.get('current_reading') in (None, ''):
            continue
        meter_type = r.get('meter_type') or 'electricity'
        rate = r.get('rate_per_unit') or ('150.0' if meter_type == 'gas' else '8.5')
        if not dry:
            try:
                MeterReading.record(
                    business_id=business.id,
                    meter_type=meter_type,
                    current_reading=r['current_reading'],
                    rate_per_unit=rate,
                    reading_date=parse_date(r.get('reading_date'), date.today()),
                )
                db.session.flush()
            except ValidationError as e:
                db.session.rollback()
                print(f'  skipped {business.name}: {e.message}')
                continue
        created += 1
    if not dry:
        db.session.commit()
    return created


def import_staff(rows, dry):
    created = 0
    for r in rows:
        name = (r.get('name') or '').strip()
        if not name:
            continue
        s = Staff(
            name=name,
            phone=r.get('phone') or None,
            designation=r.get('designation') or None,
            category=r.get('category') or 'other',
            salary_amount=parse_float(r.get('salary_amount')),
            joining_date=parse_date(r.get('joining_date')),
            status=r.get('status') or 'active',
        )
        if not dry:
            db.session.add(s)
        created += 1
    if not dry:
        db.session.commit()
    return created


def import_terms(rows, dry):
    created = 0
    for r in rows:
        title = (r.get('title') or '').strip()
        if not title:
            continue
        t = TermsCondition(title=title, description=r.get('description') or None)
        if r.get('effective_date'):
            t.effective_date = parse_date(r['effective_date'], date.today())
        if not dry:
            db.session.add(t)
        created += 1
    if not dry:
        db.session.commit()
    return created


def main():
    if len(sys.argv) < 2:
        print('Usage: python scripts/import_csv.py <folder> [--dry-run]')
        sys.exit(1)
    folder = Path(sys.argv[1])
    dry = ('--dry-run' in sys.argv)
    if not folder.exists():
        print(f'Folder not found: {folder}')
        sys.exit(2)
    files = {
        'businesses.csv': import_businesses,
        'meter_readings.csv': import_meter_readings,
        'staff.csv': import_staff,
        'terms.csv': import_terms,
    }
    app = create_app()
    with app.app_context():
        total = 0
        for name, fn in files.items():
            p = folder / name
            if p.exists():
                rows = load_csv(p)
                count = fn(rows, dry)
                print(f'[{name}] {count} rows processed' + (' (dry-run)' if dry else ''))
                total += count
            else:
                print(f'[{name}] skipped (missing)')
        print(f'Done. {total} total rows.')


if __name__ == '__main__':
    main()
