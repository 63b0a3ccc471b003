"""epictrac CLI entry point"""

import argparse
import json
import logging
import os
import sys

from .storage.cascade import cascade_close, close_eligible_epics
from .storage.config import get_log_level
from .storage.database import get_database, initialize_database
from .storage.epic_service import EpicService
from .storage.errors import StoreError
from .storage.issue_service import IssueService


def init_project():
    """Initialize .epictrac directory, configuration and tables"""
    database = initialize_database()
    print(f"Initialized epictrac at {database.url}")


def serve(host: str = "127.0.0.1", port: int = 8080, reload: bool = False):
    """Start the epictrac server"""
    import uvicorn

    os.environ["EPICTRAC_HOST"] = host
    os.environ["EPICTRAC_PORT"] = str(port)

    uvicorn.run(
        "epictrac.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )


def format_epic_status(status) -> str:
    marker = "✓" if status.eligible_for_close else "○"
    return (
        f"{marker} {status.epic.id} [P{status.epic.priority}] {status.epic.title} "
        f"({status.closed_children}/{status.total_children} children closed)"
    )


def epic_status(eligible_only: bool = False, as_json: bool = False):
    """Print open epics with their child completion"""
    statuses = EpicService(get_database()).list_eligible_epics()
    if eligible_only:
        statuses = [status for status in statuses if status.eligible_for_close]

    if as_json:
        print(json.dumps([status.to_dict() for status in statuses], indent=2))
        return

    if not statuses:
        print("No epics eligible for closure" if eligible_only else "No open epics")
        return
    for status in statuses:
        print(format_epic_status(status))


def epic_close_eligible(dry_run: bool = False, as_json: bool = False):
    """Close every epic whose children are all closed"""
    database = get_database()
    closed = close_eligible_epics(EpicService(database), IssueService(database), actor="cli", dry_run=dry_run)

    if as_json:
        print(json.dumps([status.epic.id for status in closed]))
        return

    if not closed:
        print("No epics eligible for closure")
        return
    verb = "Would close" if dry_run else "Closed"
    for status in closed:
        print(f"{verb} {status.epic.id}: {status.epic.title}")


def close(issue_id: str, reason: str = "", cascade: bool = True) -> int:
    """Close an issue and, with cascade, parent epics that become eligible"""
    database = get_database()
    issues = IssueService(database)
    if cascade:
        closed = cascade_close(EpicService(database), issues, issue_id, reason=reason, actor="cli")
    else:
        issue = issues.close_issue(issue_id, reason=reason, actor="cli")
        closed = [issue.id] if issue else None

    if closed is None:
        print(f"Issue {issue_id} not found", file=sys.stderr)
        return 1

    print(f"Closed {closed[0]}")
    for epic_id in closed[1:]:
        print(f"Auto-closed epic {epic_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="epictrac - epic closure for dependency-aware issue tracking")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Init command
    subparsers.add_parser("init", help="Initialize epictrac in current directory")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start epictrac server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    # Epic commands
    epic_parser = subparsers.add_parser("epic", help="Epic management")
    epic_subparsers = epic_parser.add_subparsers(dest="epic_command", help="Epic commands")

    status_parser = epic_subparsers.add_parser("status", help="Show open epics and child completion")
    status_parser.add_argument("--eligible-only", action="store_true", help="Only show epics that can close")
    status_parser.add_argument("--json", action="store_true", help="Output JSON")

    close_eligible_parser = epic_subparsers.add_parser("close-eligible", help="Close epics whose children are all closed")
    close_eligible_parser.add_argument("--dry-run", action="store_true", help="Show what would close")
    close_eligible_parser.add_argument("--json", action="store_true", help="Output JSON")

    # Close command
    close_parser = subparsers.add_parser("close", help="Close an issue")
    close_parser.add_argument("issue_id", help="Issue to close")
    close_parser.add_argument("--reason", default="", help="Reason for closing")
    close_parser.add_argument("--no-cascade", action="store_true", help="Do not auto-close parent epics")

    return parser


def main(argv=None) -> int:
    """Main CLI entry point"""
    logging.basicConfig(level=get_log_level(), format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "init":
            init_project()
        elif args.command == "serve":
            serve(args.host, args.port, args.reload)
        elif args.command == "epic" and args.epic_command == "status":
            epic_status(args.eligible_only, args.json)
        elif args.command == "epic" and args.epic_command == "close-eligible":
            epic_close_eligible(args.dry_run, args.json)
        elif args.command == "close":
            return close(args.issue_id, args.reason, not args.no_cascade)
        else:
            parser.print_help()
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
