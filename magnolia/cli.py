#!/usr/bin/env python3
"""
magnolia - Command-line access to portal operations.

Usage:
  magnolia seed
  magnolia schedule --user-id 1
  magnolia schedule --student-id 12345
  magnolia import-slides deck.pptx
  magnolia time-report --course indoc-1
"""

import argparse
import asyncio
import base64
import json
import logging
import sys
from pathlib import Path

from magnolia.analytics import build_time_report, format_duration, summarize_time_report
from magnolia.config import get_log_level
from magnolia.importer import import_presentation
from magnolia.portal import Portal


logger = logging.getLogger(__name__)


def cmd_seed(portal: Portal, args: argparse.Namespace) -> int:
    seeded = portal.ensure_seeded()
    print(f"Seeded: {', '.join(seeded)}" if seeded else "Store already seeded")
    return 0


def cmd_schedule(portal: Portal, args: argparse.Namespace) -> int:
    if args.user_id:
        coro = portal.schedule_for_user(args.user_id)
    elif args.instructor_id:
        coro = portal.scheduler.get_instructor_schedule(args.instructor_id)
    else:
        coro = portal.scheduler.get_student_schedule(args.student_id)
    result = asyncio.run(coro)
    print(json.dumps(result.model_dump(mode="json"), indent=2))
    return 0 if result.success else 1


def cmd_import_slides(portal: Portal, args: argparse.Namespace) -> int:
    payload = base64.b64encode(Path(args.file).read_bytes()).decode("ascii")
    result = import_presentation(payload)
    output = result.model_dump(mode="json")
    output["total_slides"] = result.total_slides
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0 if result.success else 1


def cmd_time_report(portal: Portal, args: argparse.Namespace) -> int:
    df = build_time_report(
        portal.progress,
        portal.courses.all(),
        portal.users.all(),
        course_id=args.course,
        user_id=args.student,
    )
    summary = summarize_time_report(df)
    print(f"Total time:      {format_duration(summary['total_seconds'])}")
    print(f"Average/record:  {format_duration(summary['average_seconds'])}")
    print(f"Students:        {summary['unique_students']}")
    if not df.empty:
        df["time_spent"] = df["time_spent_seconds"].map(format_duration)
        print(df[["user_name", "course_title", "time_spent", "last_viewed_at"]].to_string(index=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Magnolia flight school portal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--db", type=Path, help="Store path (default: ~/.magnolia/portal.db)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("seed", help="Write default users, courses and videos")

    schedule = sub.add_parser("schedule", help="Fetch a flight schedule")
    who = schedule.add_mutually_exclusive_group(required=True)
    who.add_argument("--user-id", help="Portal user ID")
    who.add_argument("--student-id", help="Scheduler student ID")
    who.add_argument("--instructor-id", help="Scheduler instructor ID")

    slides = sub.add_parser("import-slides", help="Extract slides from a .pptx file")
    slides.add_argument("file", help="Path to the .pptx file")

    report = sub.add_parser("time-report", help="Time spent per student and course")
    report.add_argument("--course", help="Only this course ID")
    report.add_argument("--student", help="Only this student's user ID")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    portal = Portal.open(args.db, seed=args.command != "seed")
    handlers = {
        "seed": cmd_seed,
        "schedule": cmd_schedule,
        "import-slides": cmd_import_slides,
        "time-report": cmd_time_report,
    }
    return handlers[args.command](portal, args)


if __name__ == "__main__":
    sys.exit(main())
