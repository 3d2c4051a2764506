"""CLI client for a running second_thought API.

Usage:
  poetry run second-thought health
  poetry run second-thought analyze "Noise Cancelling Headphones" 249.99 --original-price 399 --urgency "Only 3 left"
  poetry run second-thought cooldown start user-1 "Noise Cancelling Headphones" 249.99 --url https://shop.example/p/1
  poetry run second-thought cooldown list user-1 --expired
  poetry run second-thought profile set --user-id user-1 --goal "Emergency fund" --savings-goal 5000
"""
import argparse
import json
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def _product_from_args(args: argparse.Namespace) -> dict:
    product = {
        "name": args.name,
        "price": args.price,
        "currency": args.currency,
        "url": args.url,
        "urgencyIndicators": args.urgency or [],
    }
    if args.original_price is not None:
        product["originalPrice"] = args.original_price
    if args.category:
        product["category"] = args.category
    return product


def _analyze(client: httpx.Client, product: dict, user_id: str | None) -> dict:
    body = {"product": product}
    if user_id:
        body["userId"] = user_id
    r = client.post("/analyze", json=body)
    r.raise_for_status()
    return r.json()


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_analyze(client: httpx.Client, args: argparse.Namespace) -> int:
    print_json(_analyze(client, _product_from_args(args), args.user_id))
    return 0


def cmd_extract(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {
        "url": args.url,
        "name": args.name,
        "priceText": args.price_text,
        "originalPriceText": args.original_price_text,
        "urgencyTexts": args.urgency or [],
    }
    r = client.post("/extract", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_cooldown_start(client: httpx.Client, args: argparse.Namespace) -> int:
    product = _product_from_args(args)
    analysis = _analyze(client, product, args.user_id)["analysis"]
    r = client.post(
        "/cooldowns", json={"userId": args.user_id, "product": product, "analysis": analysis}
    )
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_cooldown_check(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/cooldowns", params={"userId": args.user_id, "productUrl": args.url})
    r.raise_for_status()
    data = r.json()
    if data.get("coolDown") is None:
        print(f"No active cool-down for {args.url}")
        return 0
    print(data["coolDown"]["formattedTime"])
    print_json(data)
    return 0


def cmd_cooldown_list(client: httpx.Client, args: argparse.Namespace) -> int:
    if args.expired:
        r = client.get("/cooldowns/expired", params={"userId": args.user_id, "limit": args.limit})
    else:
        r = client.get("/cooldowns", params={"userId": args.user_id})
    r.raise_for_status()
    cool_downs = r.json()["coolDowns"]
    state = "expired" if args.expired else "active"
    print(f"Found {len(cool_downs)} {state} cool-downs")
    for cd in cool_downs:
        print(f"  {cd['id']}  {cd['productInfo']['name']}  ({cd['formattedTime']})")
    return 0


def cmd_cooldown_cancel(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.delete(f"/cooldowns/{args.cooldown_id}")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_profile_get(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/profiles/{args.user_id}")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_profile_set(client: httpx.Client, args: argparse.Namespace) -> int:
    body: dict = {}
    if args.user_id:
        body["userId"] = args.user_id
    if args.savings_goal is not None:
        body["savingsGoal"] = args.savings_goal
    if args.monthly_budget is not None:
        body["monthlyBudget"] = args.monthly_budget
    if args.goal:
        body["financialGoals"] = args.goal
    if args.spending_threshold is not None:
        body["spendingThreshold"] = args.spending_threshold
    if args.cooldown is not None:
        body["coolDownEnabled"] = args.cooldown
    r = client.post("/profiles", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def _add_product_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("name", help="Product name")
    p.add_argument("price", type=float, help="Current price")
    p.add_argument("--url", default="https://example.com/product", help="Product page URL")
    p.add_argument("--currency", default="USD", help="ISO currency code (default: USD)")
    p.add_argument("--original-price", type=float, default=None, help="Claimed original price")
    p.add_argument("--category", default=None, help="Product category")
    p.add_argument("--urgency", action="append", help="Urgency text seen on the page (repeatable)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Call the second_thought API routers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default="http://localhost:8000",
        help="API base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Request timeout in seconds (default: 60)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    # health
    subparsers.add_parser("health", help="GET / health check")

    # analyze
    p = subparsers.add_parser("analyze", help="POST /analyze")
    _add_product_args(p)
    p.add_argument("--user-id", default=None, help="Analyze with this user's profile")

    # extract
    p = subparsers.add_parser("extract", help="POST /extract")
    p.add_argument("url", help="Product page URL")
    p.add_argument("--name", default=None, help="Scraped title text")
    p.add_argument("--price-text", default=None, help='Scraped price text (e.g. "$1,234.56")')
    p.add_argument("--original-price-text", default=None, help="Scraped strikethrough price text")
    p.add_argument("--urgency", action="append", help="Scraped urgency text (repeatable)")

    # cooldown
    cooldown = subparsers.add_parser("cooldown", help="Cool-down routes (/cooldowns)")
    cooldown_sub = cooldown.add_subparsers(dest="cooldown_cmd", required=True)
    p = cooldown_sub.add_parser("start", help="POST /analyze then POST /cooldowns")
    p.add_argument("user_id", help="User ID")
    _add_product_args(p)
    p = cooldown_sub.add_parser("check", help="GET /cooldowns?productUrl=")
    p.add_argument("user_id", help="User ID")
    p.add_argument("url", help="Product page URL")
    p = cooldown_sub.add_parser("list", help="GET /cooldowns or /cooldowns/expired")
    p.add_argument("user_id", help="User ID")
    p.add_argument("--expired", action="store_true", help="List expired instead of active")
    p.add_argument("--limit", type=int, default=10, help="Max expired results (default: 10)")
    p = cooldown_sub.add_parser("cancel", help="DELETE /cooldowns/{id}")
    p.add_argument("cooldown_id", help="Cool-down ID")

    # profile
    profile = subparsers.add_parser("profile", help="Profile routes (/profiles)")
    profile_sub = profile.add_subparsers(dest="profile_cmd", required=True)
    p = profile_sub.add_parser("get", help="GET /profiles/{user_id}")
    p.add_argument("user_id", help="User ID")
    p = profile_sub.add_parser("set", help="POST /profiles")
    p.add_argument("--user-id", default=None, help="User ID (omit to create a new profile)")
    p.add_argument("--savings-goal", type=float, default=None)
    p.add_argument("--monthly-budget", type=float, default=None)
    p.add_argument("--goal", action="append", help="Financial goal (repeatable)")
    p.add_argument("--spending-threshold", type=float, default=None)
    p.add_argument("--cooldown", action=argparse.BooleanOptionalAction, default=None,
                   help="Enable or disable cool-down suggestions")
    return parser


HANDLERS = {
    "health": cmd_health,
    "analyze": cmd_analyze,
    "extract": cmd_extract,
    "cooldown": {
        "start": cmd_cooldown_start,
        "check": cmd_cooldown_check,
        "list": cmd_cooldown_list,
        "cancel": cmd_cooldown_cancel,
    },
    "profile": {
        "get": cmd_profile_get,
        "set": cmd_profile_set,
    },
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    base_url = args.base_url.rstrip("/")

    handler = HANDLERS[args.command]
    if isinstance(handler, dict):
        handler = handler[getattr(args, f"{args.command}_cmd")]

    try:
        with httpx.Client(base_url=base_url, timeout=args.timeout) as client:
            return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json(), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
