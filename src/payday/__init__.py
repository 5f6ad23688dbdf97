"""Payroll leave deductions and monthly bank salary disbursement."""

__version__ = "1.0.0"
