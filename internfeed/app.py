import argparse
import dataclasses
from datetime import date, timedelta
from pathlib import Path

from . import __version__
from .env import Settings, load_env
from .logger import get_logger

# Pipeline modules bind the global logger at import time; import them
# inside the commands, after main() has configured it.


def _settings(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    if getattr(args, "db", None):
        settings = dataclasses.replace(settings, db_path=Path(args.db))
    return settings


def cmd_poll(args: argparse.Namespace) -> None:
    from .errors import ReconcileError
    from .pipeline import IngestionPipeline
    from .storage import InternshipStore

    settings = _settings(args)
    store = InternshipStore(settings.db_path)
    pipeline = IngestionPipeline.from_settings(settings, store)
    try:
        result = pipeline.run()
    except ReconcileError as e:
        raise SystemExit(f"Error: {e}")
    finally:
        get_logger().log_metrics_summary()
    print(result.summary())


def cmd_sweep(args: argparse.Namespace) -> None:
    from .cleanup import sweep
    from .storage import InternshipStore

    settings = _settings(args)
    store = InternshipStore(settings.db_path)
    retention_days = settings.retention_days if args.days is None else args.days
    deleted = sweep(store, retention_days=retention_days)
    get_logger().log_metrics_summary()
    print(f"Deleted {deleted} internships")


def cmd_parse(args: argparse.Namespace) -> None:
    from .parser import parse_readme

    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    document = input_path.read_text(encoding="utf-8")
    count = 0
    for posting in parse_readme(document):
        count += 1
        print(f"{posting.date_posted}  {posting.company} | {posting.role} | {posting.location}")
        print(f"  {posting.application_link}")
    print(f"Parsed {count} internships")


def cmd_list(args: argparse.Namespace) -> None:
    from .storage import InternshipStore

    settings = _settings(args)
    store = InternshipStore(settings.db_path)
    days = settings.list_window_days if args.days is None else args.days
    since = date.today() - timedelta(days=days) if days > 0 else None
    if args.company:
        rows = store.search_company(args.company, since=since)
    elif since is None:
        rows = store.all()
    else:
        rows = store.find_by_date_posted_after(since)
    if not rows:
        print("No internships in store.")
        return
    print(f"Found {len(rows)} internships in {settings.db_path}:\n")
    for row in rows:
        print(f"ID: {row.id}")
        print(f"  Company: {row.company}")
        print(f"  Role: {row.role}")
        print(f"  Location: {row.location}")
        print(f"  Link: {row.application_link}")
        print(f"  Posted: {row.date_posted}")
        print()


def cmd_serve(args: argparse.Namespace) -> None:
    from .api import create_app
    from .scheduler import start_background
    from .pipeline import IngestionPipeline
    from .storage import InternshipStore

    settings = _settings(args)
    store = InternshipStore(settings.db_path)
    pipeline = IngestionPipeline.from_settings(settings, store)
    scheduler = None if args.no_schedule else start_background(pipeline, store, settings)
    app = create_app(store, pipeline, list_window_days=settings.list_window_days)
    try:
        app.run(host=args.host, port=args.port, debug=False)
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)


def cmd_schedule(args: argparse.Namespace) -> None:
    from .scheduler import run_blocking
    from .pipeline import IngestionPipeline
    from .storage import InternshipStore

    settings = _settings(args)
    store = InternshipStore(settings.db_path)
    pipeline = IngestionPipeline.from_settings(settings, store)
    run_blocking(pipeline, store, settings)


def main():
    load_env()
    settings = Settings.from_env()
    get_logger(level=settings.log_level, log_dir=settings.log_dir)

    parser = argparse.ArgumentParser(prog="internfeed", description="Internship feed: poll, store and serve internship postings")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    db_help = "Path to SQLite database (default: INTERNFEED_DB or data/internships.db)"

    pol = subparsers.add_parser("poll", help="Fetch the README once and store new internships")
    pol.add_argument("--db", help=db_help)
    pol.set_defaults(func=cmd_poll)

    swp = subparsers.add_parser("sweep", help="Delete internships older than the retention horizon")
    swp.add_argument("--db", help=db_help)
    swp.add_argument("--days", type=int, help="Retention horizon in days (default: INTERNFEED_RETENTION_DAYS or 90)")
    swp.set_defaults(func=cmd_sweep)

    prs = subparsers.add_parser("parse", help="Parse a local README file and print the internships found")
    prs.add_argument("--input", required=True, help="Path to README markdown")
    prs.set_defaults(func=cmd_parse)

    lst = subparsers.add_parser("list", help="List stored internships")
    lst.add_argument("--db", help=db_help)
    lst.add_argument("--days", type=int, help="Only postings newer than N days (0 = all)")
    lst.add_argument("--company", help="Case-insensitive company substring")
    lst.set_defaults(func=cmd_list)

    srv = subparsers.add_parser("serve", help="Serve the query API with polling and cleanup in the background")
    srv.add_argument("--db", help=db_help)
    srv.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    srv.add_argument("--port", type=int, default=8080, help="Port (default: 8080)")
    srv.add_argument("--no-schedule", action="store_true", help="Serve only; do not poll or sweep")
    srv.set_defaults(func=cmd_serve)

    sch = subparsers.add_parser("schedule", help="Run polling and cleanup in the foreground")
    sch.add_argument("--db", help=db_help)
    sch.set_defaults(func=cmd_schedule)

    args = parser.parse_args()

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
