"""
Command-line helper for poking the Nordigen API by hand.

Credentials are read from the environment (or a ``.env`` file):

    export NORDIGEN_SECRET_ID=...
    export NORDIGEN_SECRET_KEY=...
    python -m nordigen_client institutions PT
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel

from .config import get_settings
from .core import CreateRequisitionOptional, NordigenClient, NordigenError, Token

logger = logging.getLogger("nordigen_client.cli")


def _dump(payload: Any) -> str:
    if isinstance(payload, BaseModel):
        return payload.model_dump_json(indent=2)
    if isinstance(payload, list):
        return json.dumps(
            [item.model_dump(mode="json") if isinstance(item, BaseModel) else item for item in payload],
            indent=2,
            ensure_ascii=False,
        )
    return json.dumps(payload, indent=2, ensure_ascii=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nordigen_client", description="Nordigen API helper.")
    parser.add_argument("--access-token", help="Use this access token instead of requesting a new one.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log request/response audits.")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("token", help="Issue a new access/refresh token pair.")

    institutions = sub.add_parser("institutions", help="List institutions for a country.")
    institutions.add_argument("country")

    create = sub.add_parser("requisition-create", help="Create a requisition and print its link.")
    create.add_argument("institution_id")
    create.add_argument("redirect_url")
    create.add_argument("--reference")
    create.add_argument("--user-language")

    get = sub.add_parser("requisition-get", help="Show a requisition.")
    get.add_argument("requisition_id")

    delete = sub.add_parser("requisition-delete", help="Delete a requisition.")
    delete.add_argument("requisition_id")

    transactions = sub.add_parser("transactions", help="List transactions of an account.")
    transactions.add_argument("account_id")
    transactions.add_argument("--from", dest="date_from", type=date.fromisoformat)
    transactions.add_argument("--to", dest="date_to", type=date.fromisoformat)
    transactions.add_argument("--pending", action="store_true", help="Include pending transactions.")
    return parser


async def _resolve_token(client: NordigenClient, access_token: Optional[str]) -> Token:
    if access_token:
        return Token(access=access_token, access_expires=0, refresh="", refresh_expires=0)
    settings = get_settings()
    if not settings.has_credentials:
        raise SystemExit("NORDIGEN_SECRET_ID and NORDIGEN_SECRET_KEY must be set (or pass --access-token).")
    return await client.new_token(settings.secret_id, settings.secret_key)


async def run(args: argparse.Namespace) -> Any:
    async with NordigenClient.from_settings(get_settings()) as client:
        if args.command == "token":
            return await _resolve_token(client, None)

        client.token = await _resolve_token(client, args.access_token)

        if args.command == "institutions":
            return await client.list_institutions(args.country)
        if args.command == "requisition-create":
            optional = CreateRequisitionOptional(reference=args.reference, user_language=args.user_language)
            return await client.create_requisition(args.redirect_url, args.institution_id, optional)
        if args.command == "requisition-get":
            return await client.get_requisition(args.requisition_id)
        if args.command == "requisition-delete":
            return await client.delete_requisition(args.requisition_id)
        if args.command == "transactions":
            if args.pending:
                return await client.get_transactions(args.account_id, args.date_from, args.date_to)
            return await client.get_booked_transactions(args.account_id, args.date_from, args.date_to)
    raise SystemExit(f"unknown command {args.command!r}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=logging.DEBUG if args.verbose else settings.log_level)

    try:
        result = asyncio.run(run(args))
    except NordigenError as exc:
        logger.debug("Request failed", exc_info=True)
        print(str(exc), file=sys.stderr)
        return 1

    print(_dump(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
