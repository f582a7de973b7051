"""Timekeeping package.

HR time tracking: employee records, check-in/check-out with punctuality
rules, absence approval, reports, monthly salary and ledger notifications.
Organized by feature modules with a thin Flask controller layer over
service/repository layers.
"""
