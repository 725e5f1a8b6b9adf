import argparse
import json
import logging
import sys

from aggregation import top_categories
from client import ApiClient
from config import Config
from dashboard import THEMES, Dashboard
from errors import TrackerError
from local_store import LocalStore
from utils import format_currency, format_signed


def build_dashboard(config: Config) -> Dashboard:
    return Dashboard(
        ApiClient(config.api_base),
        LocalStore(config.state_file),
        symbol=config.currency_symbol,
    )


def _filter_args() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--type", choices=["all", "income", "expense"], default="all")
    parent.add_argument("--category", dest="filter_category", default="all", help="Exact category, or 'all'")
    parent.add_argument("--from", dest="start", help="Start date (YYYY-MM-DD), inclusive")
    parent.add_argument("--to", dest="end", help="End date (YYYY-MM-DD), inclusive")
    parent.add_argument("--search", default="", help="Text to find in category or note")
    parent.add_argument("--offline", action="store_true", help="Use the local cache only")
    return parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="finance-tracker", description="Personal income/expense tracker")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)
    filters = _filter_args()

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--port", type=int)

    sub.add_parser("summary", parents=[filters], help="Totals, budget and insights")
    sub.add_parser("list", parents=[filters], help="List transactions")

    add = sub.add_parser("add", help="Record a transaction")
    add.add_argument("type", choices=["income", "expense"])
    add.add_argument("amount")
    add.add_argument("--category", default="")
    add.add_argument("--date", help="YYYY-MM-DD, defaults to today")
    add.add_argument("--note", default="")
    add.add_argument("--method", default="", help="Payment method, defaults to Cash")

    delete = sub.add_parser("delete", help="Delete a transaction by id")
    delete.add_argument("id")

    budget = sub.add_parser("budget", help="Show or set the monthly budget")
    budget.add_argument("amount", nargs="?")

    item = sub.add_parser("item", help="Manage recurring budget items")
    item_sub = item.add_subparsers(dest="action", required=True)
    item_add = item_sub.add_parser("add")
    item_add.add_argument("name")
    item_add.add_argument("amount")
    item_sub.add_parser("list")
    for action in ("toggle", "remove"):
        p = item_sub.add_parser(action)
        p.add_argument("number", type=int, help="Item number as shown by 'item list'")

    chart = sub.add_parser("chart", parents=[filters], help="Write a chart as PNG")
    chart.add_argument("kind", choices=["donut", "line", "bar"])
    chart.add_argument("output")
    chart.add_argument("--width", type=int, default=480)
    chart.add_argument("--height", type=int, default=300)

    rollup = sub.add_parser("rollup", help="Total and count for one category, across all transactions")
    rollup.add_argument("name", nargs="?", default="all")
    rollup.add_argument("--offline", action="store_true", help="Use the local cache only")

    theme = sub.add_parser("theme", help="Show or set the theme")
    theme.add_argument("name", nargs="?", choices=THEMES)

    imp = sub.add_parser("import", help="Upload transactions from a JSON file")
    imp.add_argument("file")

    sub.add_parser("push", help="Upload locally cached transactions")
    return parser


def _refresh(dashboard: Dashboard, args) -> None:
    if not args.offline:
        warning = dashboard.refresh()
        if warning:
            print(f"warning: {warning}", file=sys.stderr)


def _prepare(dashboard: Dashboard, args) -> None:
    _refresh(dashboard, args)
    dashboard.set_filters(
        type=args.type,
        category=args.filter_category,
        start=args.start,
        end=args.end,
        search=args.search,
    )


def _print_summary(dashboard: Dashboard) -> None:
    view = dashboard.view()
    sym = dashboard.symbol
    print(f"Income:  {format_currency(view.totals.income, sym)}")
    print(f"Expense: {format_currency(view.totals.expense, sym)}")
    print(f"Balance: {format_currency(view.totals.balance, sym)}")
    status = view.budget_status
    print(f"Budget:  {status.label} - {status.message} ({status.progress:.0f}%)")
    if view.budget.items:
        print(f"Items:   {format_currency(view.budget.paid_total(), sym)} paid, "
              f"{format_currency(view.budget.unpaid_total(), sym)} unpaid")
    for name, value in top_categories(view.rollup):
        print(f"  {name:<20} {format_currency(value, sym)}")
    for line in view.insights:
        print(f"* {line}")


def _print_list(dashboard: Dashboard) -> None:
    rows = dashboard.view().transactions
    if not rows:
        print("No transactions match your filters.")
        return
    for t in rows:
        amount = t.amount if t.is_income else -t.amount
        note = f"  {t.note}" if t.note else ""
        print(f"{t.date}  {format_signed(amount, dashboard.symbol):>14}  {t.category}{note}  [{t.id}]")


def _print_items(dashboard: Dashboard) -> None:
    items = dashboard.budget.budget.items
    if not items:
        print("No budget items.")
    for n, item in enumerate(items, start=1):
        mark = "x" if item.paid else " "
        print(f"{n:>2}. [{mark}] {item.name:<20} {format_currency(item.amount, dashboard.symbol)}")


def run(args, dashboard: Dashboard) -> int:
    sym = dashboard.symbol
    if args.command == "summary":
        _prepare(dashboard, args)
        _print_summary(dashboard)
    elif args.command == "list":
        _prepare(dashboard, args)
        _print_list(dashboard)
    elif args.command == "add":
        result = dashboard.add_transaction(args.type, args.amount, args.category, args.date, args.note, args.method)
        where = "" if result.remote else " (saved locally, server unavailable)"
        print(f"Transaction added{where}: {result.record.id}")
    elif args.command == "delete":
        result = dashboard.delete_transaction(args.id)
        if result.warning:
            print(f"warning: {result.warning}", file=sys.stderr)
        print("Deleted")
    elif args.command == "budget":
        if args.amount is not None:
            dashboard.budget.set_total(args.amount)
            print("Budget updated")
        print(f"Budget: {format_currency(dashboard.budget.budget.total, sym)}")
    elif args.command == "item":
        if args.action == "add":
            dashboard.budget.add_item(args.name, args.amount)
        elif args.action == "toggle":
            dashboard.budget.toggle_item(args.number - 1)
        elif args.action == "remove":
            dashboard.budget.remove_item(args.number - 1)
        _print_items(dashboard)
    elif args.command == "chart":
        _prepare(dashboard, args)
        view = dashboard.view(args.width, args.height)
        getattr(view, args.kind).render_png(args.output)
        print(f"Wrote {args.kind} chart to {args.output}")
    elif args.command == "rollup":
        _refresh(dashboard, args)
        total, count = dashboard.category_summary(args.name)
        print(f"{args.name}: {format_currency(total, sym)} across {count} transactions")
    elif args.command == "theme":
        if args.name:
            dashboard.set_theme(args.name)
        print(f"Theme: {dashboard.state.theme}")
    elif args.command == "import":
        with open(args.file, "r", encoding="utf-8") as f:
            records = json.load(f)
        if isinstance(records, dict):
            records = records.get("transactions", [])
        result = dashboard.api.import_transactions(records)
        dashboard.refresh()
        print(f"Imported {result['inserted']} of {result['total']} ({result['skipped']} skipped)")
    elif args.command == "push":
        result = dashboard.push_local()
        print(f"Pushed {result['inserted']} of {result['total']} ({result['skipped']} skipped)")
    return 0


def main(argv=None, dashboard: Dashboard = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = Config()

    if args.command == "serve":
        from app import create_app
        create_app(config=config).run(port=args.port or config.port, debug=config.debug)
        return 0

    dashboard = dashboard or build_dashboard(config)
    try:
        return run(args, dashboard)
    except TrackerError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
