from .advances import advances_bp
from .auth import auth_bp
from .bills import bills_bp
from .businesses import businesses_bp
from .cron import cron_bp
from .expenses import expenses_bp
from .health import health_bp
from .maintenance import maintenance_bp
from .meter_readings import meter_bp
from .payments import payments_bp
from .reports import reports_bp
from .settings import settings_bp
from .staff import staff_bp

ALL_BLUEPRINTS = (
    health_bp,
    auth_bp,
    businesses_bp,
    bills_bp,
    payments_bp,
    meter_bp,
    advances_bp,
    maintenance_bp,
    staff_bp,
    expenses_bp,
    reports_bp,
    settings_bp,
    cron_bp,
)

__all__ = ["ALL_BLUEPRINTS"]
