"""Command-line entry point."""
import sys
import argparse
from datetime import datetime
from decimal import Decimal, InvalidOperation

from spendlens.analysis.models import AnalysisSnapshot, Category, ExpenseRecord, Source
from spendlens.config.manager import Config, ConfigManager
from spendlens.config.settings import get_settings
from spendlens.orchestrator.processor import AnalysisOrchestrator, AnalysisOutcome
from spendlens.storage import SQLiteExpenseStore, SQLiteSnapshotStore, reset_all_data
from spendlens.utils.exceptions import SpendLensError
from spendlens.utils.formatting import format_currency, format_date, format_percent
from spendlens.utils.logger import configure_logging

FALLBACK_BANNER = "AI analysis unavailable, showing rule-based insights."


def _print_snapshot(snapshot: AnalysisSnapshot, currency_code: str) -> None:
    """Print one snapshot."""
    print(f"\n{format_date(snapshot.period_start)} – {format_date(snapshot.period_end)}")
    print(snapshot.summary)

    if snapshot.top_categories:
        print("\nTop categories:")
        for item in snapshot.top_categories:
            print(f"  {item.category.display_name:<15} {format_currency(item.total, currency_code):>12}")

    if snapshot.deltas:
        print("\nChanges vs previous period:")
        for delta in snapshot.deltas:
            print(f"  {delta.category.display_name:<15} {format_percent(delta.delta_pct):>8}")

    if snapshot.recurring_merchants:
        print(f"\nRecurring merchants: {', '.join(snapshot.recurring_merchants)}")

    if snapshot.insights:
        print("\nInsights:")
        for insight in snapshot.insights:
            print(f"  • {insight}")


def _print_history(snapshots: list) -> None:
    """Print formatted table of stored snapshots."""
    if not snapshots:
        print("No analyses found.")
        return

    print(f"\nTotal: {len(snapshots)} analyses")
    print(f"{'Created At':<20} {'Period':<28} {'Summary'}")
    print("-" * 90)

    for snapshot in snapshots:
        period = f"{snapshot.period_start:%Y-%m-%d} – {snapshot.period_end:%Y-%m-%d}"
        print(f"{snapshot.created_at.strftime('%Y-%m-%d %H:%M:%S'):<20} {period:<28} {snapshot.summary}")


def _parse_expense(args: argparse.Namespace) -> ExpenseRecord:
    try:
        amount = Decimal(args.amount)
    except InvalidOperation as e:
        raise SpendLensError(f"Invalid amount: {args.amount}") from e
    if not amount.is_finite() or amount < 0:
        raise SpendLensError(f"Amount must be a non-negative number: {args.amount}")

    category = None
    if args.category:
        category = Category.from_string(args.category)
        if category is None:
            raise SpendLensError(f"Unknown category: {args.category}")

    try:
        date = datetime.strptime(args.date, "%Y-%m-%d") if args.date else datetime.now()
    except ValueError as e:
        raise SpendLensError(f"Invalid date (expected YYYY-MM-DD): {args.date}") from e

    return ExpenseRecord(
        title=args.title,
        amount=amount,
        date=date,
        merchant=args.merchant,
        category=category,
        source=Source.MANUAL
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SpendLens spending analysis")
    parser.add_argument("--no-ai", action="store_true", help="Use rule-based insights only")
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Run a manual analysis and keep history")
    analyze.add_argument("--days", type=int, default=30, help="Window length in days (default: 30)")

    subparsers.add_parser("auto", help="Run the 7-day auto analysis")

    add = subparsers.add_parser("add", help="Add an expense and refresh the auto analysis")
    add.add_argument("--title", required=True)
    add.add_argument("--amount", required=True)
    add.add_argument("--date", help="YYYY-MM-DD (default: now)")
    add.add_argument("--merchant")
    add.add_argument("--category", help="Category name or alias, e.g. groceries")

    subparsers.add_parser("history", help="List stored analyses, newest first")
    subparsers.add_parser("reset", help="Delete all expenses and analyses")
    return parser


def _load_config(config_manager: ConfigManager, no_ai: bool) -> Config:
    config = config_manager.load_config()
    if no_ai:
        config.use_ai = False
    return config


def main(argv=None):
    """Main entry point for the SpendLens CLI."""
    args = _build_parser().parse_args(argv)

    settings = get_settings()
    logger = configure_logging(settings.log_level, settings.log_max_file_size_mb, settings.log_backup_count)

    try:
        config_manager = ConfigManager()
        config = _load_config(config_manager, args.no_ai)
        db_path = config_manager.resolve_database_path(config)
        expense_store = SQLiteExpenseStore(db_path)
        snapshot_store = SQLiteSnapshotStore(db_path)

        if args.command == "history":
            _print_history(snapshot_store.fetch_all())
            return

        if args.command == "reset":
            removed = reset_all_data(expense_store, snapshot_store)
            print(f"✓ Deleted {removed} expenses and all analyses")
            return

        orchestrator = AnalysisOrchestrator(
            expense_store,
            snapshot_store,
            settings=settings,
            on_fallback=lambda: print(FALLBACK_BANNER)
        )

        if args.command == "add":
            expense_store.insert(_parse_expense(args))
            result = orchestrator.run_auto_analysis(config)
        elif args.command == "auto":
            result = orchestrator.run_auto_analysis(config)
        else:
            result = orchestrator.run_analysis(args.days, config)

        _print_snapshot(result.snapshot, config.currency_code)
        if result.outcome == AnalysisOutcome.USED_AI:
            print("\n(insights generated by AI)")

    except SpendLensError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
