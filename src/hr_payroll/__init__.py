"""HR payroll engine package.

Organized by feature modules (attendance, leave, payroll, employees) with a thin
Flask controller layer over service/repository layers. The derivation rules
(status evaluation, leave day counting, payroll and tax) are pure functions the
services call before anything is written.
"""
