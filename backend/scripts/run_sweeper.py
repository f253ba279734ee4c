"""Run one overdue plan sweep now, outside of the scheduler."""
import argparse
from datetime import date

from fitcoach.logging_config import setup_logging
from fitcoach.services.overdue_sweeper import OverdueSweeper


def run_sweeper(today=None):
    setup_logging()
    report = OverdueSweeper().run(today=today)
    print(
        f"Sweep complete: {report.plans_found} overdue, {report.plans_completed} completed, "
        f"{report.plans_archived} archived, {report.sessions_skipped} sessions skipped."
    )
    if report.failed_plan_ids:
        print(f"  Failed plans: {', '.join(str(i) for i in report.failed_plan_ids)}")
    return report


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--today", type=date.fromisoformat, help="Reference date (YYYY-MM-DD)")
    args = parser.parse_args()
    run_sweeper(args.today)
