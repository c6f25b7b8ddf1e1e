import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

"""
nfcu-fetch - Main Entry Point

This script serves as the command-line interface (CLI) for nfcu-fetch.
It logs into Navy Federal's mobile-banking API, runs one query (or a
transfer) and prints the JSON result.

Usage:
    python main.py summary --export      # Account summary, also saved to CSV
    python main.py member                # Member profile
    python main.py details 1234567890    # Details of one account
    python main.py scheduled --ach       # Scheduled transfers including ACH
    python main.py transfer FROM TO 25   # Immediate internal transfer

Credentials are taken from --access-number/--password, or from the
configuration (config.yaml or NFCU_FETCH_ACCESS_NUMBER / NFCU_FETCH_PASSWORD).
A stored session cookie (--cookie or NFCU_FETCH_COOKIE) skips the login.

Dependencies:
- playwright: HTTP transport for the API.
- nfcu_fetch.*: Internal modules for the API client.
"""
from nfcu_fetch.config import Config, settings
from nfcu_fetch.errors import TransportError
from nfcu_fetch.models import Account, ApiResult
from nfcu_fetch.nfcu import NavyFederalSession, accounts_from_summary
from nfcu_fetch.utils import CSVWriter

COMMANDS = ["summary", "member", "config", "details", "scheduled", "transfer-accounts", "transfer"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="nfcu-fetch - Navy Federal mobile-banking API client")
    parser.add_argument("--config", type=Path, help="Path to a YAML configuration file")
    parser.add_argument("--access-number", help="Access number (overrides config)")
    parser.add_argument("--password", help="Password (overrides config)")
    parser.add_argument("--cookie", help="Reuse an existing session cookie instead of logging in")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (verbose logging including response bodies)"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="Summary of all accounts")
    summary.add_argument("--export", action="store_true", help="Save the accounts to accounts.csv")

    sub.add_parser("member", help="Profile of the logged-in member")
    sub.add_parser("config", help="Post-authentication app configuration")

    details = sub.add_parser("details", help="Details of one account")
    details.add_argument("account_id")

    scheduled = sub.add_parser("scheduled", help="Scheduled transfers")
    scheduled.add_argument("--ach", action="store_true", help="Include ACH transfers")

    sub.add_parser("transfer-accounts", help="Accounts available for transfers")

    transfer = sub.add_parser("transfer", help="Transfer money between your accounts today")
    transfer.add_argument("from_account_id")
    transfer.add_argument("to_account_id")
    transfer.add_argument("amount", type=float)
    transfer.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    return parser


def export_accounts(accounts, config: Config) -> Optional[Path]:
    """Save accounts to <output_path>/nfcu/accounts.csv."""
    writer = CSVWriter(config.output_path / "nfcu")
    rows = [a.to_csv_row() for a in accounts]
    return writer.write(rows, "accounts.csv", fieldnames=Account.CSV_FIELDS)


def print_result(result: ApiResult):
    print(json.dumps(result.data, indent=2, default=str))
    if result.error:
        print(f"Request failed (HTTP {result.status_code}, status {result.api_status})", file=sys.stderr)


async def run(args, config: Config) -> int:
    async with NavyFederalSession(cookie=args.cookie, config=config) as session:
        if not session.session_token:
            access_number = args.access_number or config.access_number
            password = args.password or config.password
            if not access_number or not password:
                print("No credentials given. Use --access-number/--password or the configuration file.", file=sys.stderr)
                return 2

            login = await session.login(access_number, password)
            if login.error:
                print_result(login)
                return 1
            print("Logged in.", file=sys.stderr)

        if args.command == "summary":
            result = await session.get_account_summary()
            if args.export and result.success:
                accounts = accounts_from_summary(result)
                path = export_accounts(accounts, config)
                if path:
                    print(f"Saved {len(accounts)} accounts to {path}", file=sys.stderr)
        elif args.command == "member":
            result = await session.get_member_summary()
        elif args.command == "config":
            result = await session.get_post_auth_config()
        elif args.command == "details":
            result = await session.get_account_details(args.account_id)
        elif args.command == "scheduled":
            result = await session.get_scheduled_transfers(include_ach=args.ach)
        elif args.command == "transfer-accounts":
            result = await session.get_transfer_accounts()
        else:
            if not args.yes:
                answer = input(f"Transfer {args.amount:.2f} from {args.from_account_id} to {args.to_account_id}? [y/N] ")
                if answer.strip().lower() not in ("y", "yes"):
                    print("Transfer cancelled.", file=sys.stderr)
                    return 1
            result = await session.transfer_now(args.from_account_id, args.to_account_id, args.amount)

        print_result(result)
        return 1 if result.error else 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = Config.load(args.config) if args.config else settings
    if args.debug:
        config = config.model_copy(update={"debug": True})

    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return asyncio.run(run(args, config))
    except TransportError as e:
        print(f"Error talking to Navy Federal: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
