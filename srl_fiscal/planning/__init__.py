"""
Planning Module

Fiscal calendar, payment schedule with running balance, and the
standalone installment planner.
"""

from .fiscal_calendar import EventCategory, FiscalEvent, build_fiscal_calendar
from .payment_schedule import ScheduleEntry, build_payment_schedule, monthly_deposit_events
from .installments import InstallmentPlan, calculate_installments

__all__ = [
    "EventCategory",
    "FiscalEvent",
    "build_fiscal_calendar",
    "ScheduleEntry",
    "build_payment_schedule",
    "monthly_deposit_events",
    "InstallmentPlan",
    "calculate_installments",
]
