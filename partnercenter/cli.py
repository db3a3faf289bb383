"""Command-line wrapper around the Partner Center client.

Credentials come from the environment (see ``partnercenter.config``).

    partnercenter customers list --size 20
    partnercenter orders create --customer-id <id> --file order.json
    partnercenter --admin users roles --customer-id <id> --user-id <id>
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from .config import load_settings
from .core.api import (
    CreateOrderRequest,
    CreateUserRequest,
    PartnerCenterConnectionFactory,
    PartnerCenterError,
)
from .core.transformer import PayloadTransformer


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="partnercenter", description="Microsoft Partner Center helper")
    parser.add_argument("--admin", action="store_true",
                        help="Use the admin agent credentials (app+user access)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="cmd")

    tok = sub.add_parser("token", help="Acquire an access grant and show its expiry")
    tok.add_argument("--show-token", action="store_true")

    cust = sub.add_parser("customers").add_subparsers(dest="action")
    cl = cust.add_parser("list")
    cl.add_argument("--size", type=int)
    cl.add_argument("--domain-prefix")
    cg = cust.add_parser("get")
    cg.add_argument("--customer-id", required=True)

    orders = sub.add_parser("orders").add_subparsers(dest="action")
    ol = orders.add_parser("list")
    ol.add_argument("--customer-id", required=True)
    og = orders.add_parser("get")
    og.add_argument("--customer-id", required=True)
    og.add_argument("--order-id", required=True)
    oc = orders.add_parser("create")
    oc.add_argument("--customer-id", required=True)
    oc.add_argument("--file", required=True, help="JSON order payload")

    users = sub.add_parser("users").add_subparsers(dest="action")
    ul = users.add_parser("list")
    ul.add_argument("--customer-id", required=True)
    ul.add_argument("--size", type=int)
    ug = users.add_parser("get")
    ug.add_argument("--customer-id", required=True)
    ug.add_argument("--user-id", required=True)
    uc = users.add_parser("create")
    uc.add_argument("--customer-id", required=True)
    uc.add_argument("--file", required=True, help="JSON user payload")
    ud = users.add_parser("delete")
    ud.add_argument("--customer-id", required=True)
    ud.add_argument("--user-id", required=True)
    ur = users.add_parser("roles")
    ur.add_argument("--customer-id", required=True)
    ur.add_argument("--user-id")

    subs = sub.add_parser("subscriptions").add_subparsers(dest="action")
    sl = subs.add_parser("list")
    sl.add_argument("--customer-id", required=True)
    sg = subs.add_parser("get")
    sg.add_argument("--customer-id", required=True)
    sg.add_argument("--subscription-id", required=True)

    return parser


def _print_json(data: Any) -> None:
    print(json.dumps(PayloadTransformer.to_payload(data), indent=2, default=str))


def _read_payload(path: str, target: type) -> Any:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return PayloadTransformer.from_payload(target, data)


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if not args.cmd:
        parser.print_help()
        return 0
    if args.cmd != "token" and not getattr(args, "action", None):
        parser.error(f"'{args.cmd}' requires an action")

    try:
        config = load_settings()
        factory = PartnerCenterConnectionFactory.from_settings(config)
        if args.admin:
            config.require_admin_credentials()
            connection = factory.create_admin_connection(config.admin_username, config.admin_password)
        else:
            connection = factory.create_connection()

        if args.cmd == "token":
            grant = connection.access_grant
            output = {
                "provider_user_id": connection.provider_user_id,
                "expire_time": grant.expire_time,
                "scope": grant.scope,
            }
            if args.show_token:
                output["access_token"] = grant.access_token
            _print_json(output)
            return 0

        api = connection.get_api()
        if args.cmd == "customers":
            if args.action == "list":
                if args.domain_prefix:
                    page = api.customers.search_customers(args.domain_prefix, args.size).body
                else:
                    page = api.customers.get_customer_list(args.size).body
                _print_json(page.items)
            elif args.action == "get":
                _print_json(api.customers.get_customer_by_id(args.customer_id).body)
        elif args.cmd == "orders":
            if args.action == "list":
                _print_json(api.orders.get_customer_orders(args.customer_id).body.items)
            elif args.action == "get":
                _print_json(api.orders.get_by_id(args.customer_id, args.order_id).body)
            elif args.action == "create":
                request = _read_payload(args.file, CreateOrderRequest)
                _print_json(api.orders.create_order(args.customer_id, request).body)
        elif args.cmd == "users":
            if args.action == "list":
                first = api.users.get_customer_users(args.customer_id, args.size).body
                _print_json(list(api.users.iterate_items(first)))
            elif args.action == "get":
                _print_json(api.users.get_user(args.customer_id, args.user_id).body)
            elif args.action == "create":
                request = _read_payload(args.file, CreateUserRequest)
                _print_json(api.users.create_user(args.customer_id, request).body)
            elif args.action == "delete":
                api.users.delete_user(args.customer_id, args.user_id)
                print(f"[users] User '{args.user_id}' deleted", file=sys.stderr)
            elif args.action == "roles":
                if args.user_id:
                    roles = api.users.get_user_roles(args.customer_id, args.user_id).body
                else:
                    roles = api.users.get_all_roles(args.customer_id).body
                _print_json(roles.items)
        elif args.cmd == "subscriptions":
            if args.action == "list":
                _print_json(api.subscriptions.get_customer_subscriptions(args.customer_id).body.items)
            elif args.action == "get":
                _print_json(api.subscriptions.get_by_id(args.customer_id, args.subscription_id).body)
    except (PartnerCenterError, ValueError, OSError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
