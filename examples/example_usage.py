"""Example: run a month's payroll through the service layer (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

from datetime import date

from dotenv import load_dotenv

from config import load_settings

from hr_payroll.container import build_container
from hr_payroll.core.policy import HrPolicy
from hr_payroll.logging_config import configure_logging


def main():
    load_dotenv(override=False)
    settings = load_settings()
    configure_logging("INFO")

    container = build_container(db_config=settings.DB_CONFIG, policy=HrPolicy.from_settings(settings))
    today = date.today()
    report = container.payroll_service.generate_for_active(month=today.month, year=today.year, generated_by=1)

    for r in report.results:
        net = f"{r.payroll.net_salary:,.2f}" if r.payroll else "-"
        print(f"employee={r.employee_id} outcome={r.outcome.value} net={net} {r.error or ''}")
    print(f"successful={report.successful} failed={report.failed} total={report.total_amount:,.2f}")


if __name__ == "__main__":
    main()
