from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from shiptrack.app import (
    archive_shipment,
    build_reconciliation_job,
    create_user,
    poll_carrier_updates,
    register_shipment,
)
from shiptrack.config import ConfigurationError, configure_logging, get_schedule_config
from shiptrack.domain.model import Carrier, ShipmentStatus, UserRole
from shiptrack.scheduler import run_schedule

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track shipments against carrier status")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("poll", help="Run one reconciliation cycle and exit")

    schedule = subparsers.add_parser("schedule", help="Poll carriers on a fixed schedule")
    schedule.add_argument(
        "--interval-minutes",
        type=int,
        help="Minutes between polls (defaults to config)",
    )
    schedule.add_argument(
        "--max-runs",
        type=int,
        help="Stop after this many cycles",
    )

    serve = subparsers.add_parser("serve", help="Serve the HTTP poll trigger")
    serve.add_argument("--host", type=str, default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    user = subparsers.add_parser("user", help="User management commands")
    user_sub = user.add_subparsers(dest="user_command", required=True)
    user_create = user_sub.add_parser("create", help="Create a user")
    user_create.add_argument(
        "--email",
        type=str,
        help="Address that receives status-change mail",
    )
    user_create.add_argument(
        "--role",
        type=UserRole,
        choices=list(UserRole),
        default=UserRole.USER,
    )

    shipment = subparsers.add_parser("shipment", help="Shipment management commands")
    shipment_sub = shipment.add_subparsers(dest="shipment_command", required=True)
    shipment_add = shipment_sub.add_parser("add", help="Register a shipment")
    shipment_add.add_argument("--owner", type=str, required=True, help="Owner user id")
    shipment_add.add_argument(
        "--carrier",
        type=Carrier,
        choices=list(Carrier),
        required=True,
    )
    shipment_add.add_argument("--tracking-number", type=str, required=True)
    shipment_add.add_argument(
        "--status",
        type=ShipmentStatus,
        choices=list(ShipmentStatus),
        default=ShipmentStatus.CREATED,
    )
    shipment_archive = shipment_sub.add_parser(
        "archive", help="Stop reconciling a shipment"
    )
    shipment_archive.add_argument("shipment_id", type=str)
    shipment_archive.add_argument(
        "--restore",
        action="store_true",
        help="Put an archived shipment back into reconciliation",
    )

    return parser.parse_args(list(argv))


def _serve(host: str, port: int) -> None:
    import uvicorn  # noqa: PLC0415

    uvicorn.run("shiptrack.api:app", host=host, port=port)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "schedule":
            schedule_config = get_schedule_config()
            if parsed_args.interval_minutes is not None:
                if parsed_args.interval_minutes < 1:
                    raise ValueError("Interval must be at least one minute")  # noqa: TRY301
                schedule_config = replace(
                    schedule_config, interval_minutes=parsed_args.interval_minutes
                )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "poll":
            summary = poll_carrier_updates()
            log.info("Carrier poll finished: %s", summary.as_dict())
        elif parsed_args.command == "schedule":
            run_schedule(
                build_reconciliation_job,
                schedule_config,
                max_runs=parsed_args.max_runs,
            )
        elif parsed_args.command == "serve":
            _serve(parsed_args.host, parsed_args.port)
        elif parsed_args.command == "user" and parsed_args.user_command == "create":
            user = create_user(
                email=parsed_args.email,
                role=parsed_args.role,
            )
            log.info("Created user %s", user.uid)
        elif parsed_args.command == "shipment" and parsed_args.shipment_command == "add":
            shipment = register_shipment(
                owner_uid=parsed_args.owner,
                carrier=parsed_args.carrier,
                tracking_number=parsed_args.tracking_number,
                status=parsed_args.status,
            )
            log.info("Registered shipment %s", shipment.id)
        elif parsed_args.command == "shipment" and parsed_args.shipment_command == "archive":
            archive_shipment(parsed_args.shipment_id, archived=not parsed_args.restore)
            log.info(
                "Shipment %s %s",
                parsed_args.shipment_id,
                "restored" if parsed_args.restore else "archived",
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error in %s command", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point: load ``.env`` and install the SIGINT handler."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
