from flask import Blueprint, jsonify

from ..errors import NotFoundError
from ..security import ADMIN_ROLES, roles_required
from ..utils.reports import REPORTS, all_reports

reports_bp = Blueprint("reports", __name__)


@reports_bp.get("/reports")
@roles_required(*ADMIN_ROLES)
def get_reports():
    return jsonify(all_reports())


@reports_bp.get("/reports/<name>")
@roles_required(*ADMIN_ROLES)
def get_report(name):
    report = REPORTS.get(name)
    if report is None:
        raise NotFoundError(f"Unknown report: {name}", details={"available": sorted(REPORTS)})
    return jsonify(report())
