#!/usr/bin/env python3
"""
Fetch a company's users, projects and upcoming calendar events from Bubble
and print a summary.

Usage:
    uv run python src/scripts/fetch_company_snapshot.py <company_id> [--days 14] [--verbose]

Example:
    uv run python src/scripts/fetch_company_snapshot.py 1700000000000x123456789
"""

import argparse
import asyncio
import logging
import sys
from datetime import date, timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.bubble_client import BubbleClient
from core.dates import format_relative_time, is_overdue, utc_now
from core.errors import BubbleError
from services.calendar import fetch_events_for_date_range
from services.company import fetch_company
from services.projects import fetch_projects
from services.users import fetch_users


async def snapshot(company_id: str, days: int) -> int:
    async with BubbleClient() as client:
        company = await fetch_company(company_id, client=client)
        if company is None:
            print(f"Company {company_id} could not be converted")
            return 1

        print(f"Company: {company.name} ({company.id})")
        if company.subscription_status:
            print(f"  Subscription: {company.subscription_status.value} / "
                  f"{company.subscription_plan.value if company.subscription_plan else '-'}")
        print("=" * 80)

        users = await fetch_users(company.id, company_admin_ids=company.admin_ids, client=client)
        print(f"\nUsers: {len(users.items)} (skipped {users.skipped})")
        for user in users.items:
            print(f"  - {user.full_name or user.id} [{user.role.value}]")

        projects = await fetch_projects(company.id, client=client)
        print(f"\nProjects: {len(projects.items)} (skipped {projects.skipped})")
        by_status: dict[str, int] = {}
        for project in projects.items:
            by_status[project.status.value] = by_status.get(project.status.value, 0) + 1
        for status, count in sorted(by_status.items()):
            print(f"  {status}: {count}")

        today = date.today()
        events = await fetch_events_for_date_range(
            company.id, today, today + timedelta(days=days), client=client
        )
        print(f"\nCalendar events (next {days} days): {len(events.items)} (skipped {events.skipped})")
        now = utc_now()
        for event in events.items:
            marker = " (overdue)" if is_overdue(event.end_date, now) else ""
            print(f"  - {event.title}: {format_relative_time(event.start_date, now)}{marker}")

    print("\nDone!")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Print a snapshot of a company's data in the Bubble store"
    )
    parser.add_argument("company_id", help="Bubble unique id of the company")
    parser.add_argument(
        "--days",
        type=int,
        default=14,
        help="How many days of upcoming calendar events to fetch (default: 14)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log store requests")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        sys.exit(asyncio.run(snapshot(args.company_id, args.days)))
    except BubbleError as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
