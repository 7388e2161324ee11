from plazacore_backend.extensions import db

# Tenants and billing
from .business import Business
from .bill import Bill
from .payment import Payment, PendingPayment, record_business_payment
from .meter_reading import MeterReading
from .advance import Advance
from .maintenance import MaintenanceBill, MaintenancePayment, MaintenanceAdvance, MaintenanceInstalment

# Payroll and expenses
from .staff import Staff, StaffSalaryRecord
from .expense import VariableExpense, FixedExpense, PlazaUtilityBill

# Settings and accounts
from .settings import Information, TermsCondition
from .user import Admin
