"""Command-line entry point."""
import argparse
import sys
from decimal import Decimal
from pathlib import Path

from uangku.config.manager import Config, ConfigManager
from uangku.config.settings import get_settings
from uangku.llm.models import RawInput, TransactionRecord
from uangku.orchestrator.processor import ExtractionOrchestrator, TransactionLedger
from uangku.utils.logger import configure_logging, set_session_context
from uangku.utils.exceptions import ConfigError, UangkuError
from uangku.utils.transaction_store import TransactionStore

# Commands that call the model and so need an API key.
MODEL_COMMANDS = ("add", "insights")


def format_amount(amount: Decimal) -> str:
    """Render an amount the way the dashboard shows it, e.g. ``Rp 50.000``."""
    sign = "-" if amount < 0 else ""
    amount = abs(Decimal(amount)).quantize(Decimal("0.01"))
    whole = int(amount)
    grouped = f"{whole:,}".replace(",", ".")
    cents = int((amount - whole) * 100)
    if cents:
        grouped += f",{cents:02d}"
    return f"Rp {sign}{grouped}"


def _print_record(record: TransactionRecord) -> None:
    sign = "+" if record.is_income else "-"
    print(
        f"{record.id:<14} {record.date:<10} {sign} {format_amount(record.amount):<16} "
        f"{record.category:<14} {record.merchant}"
    )
    if record.summary:
        print(f"{'':<14} {record.summary}")


def add_command(orchestrator: ExtractionOrchestrator, text: str, file: str, mime: str) -> None:
    """Extract one transaction from text and/or a receipt file and record it."""
    raw = RawInput.from_path(file, text=text, mime_type=mime) if file else RawInput(text=text)
    record = orchestrator.add_transaction(raw)
    print("✓ Transaction recorded")
    _print_record(record)


def list_command(orchestrator: ExtractionOrchestrator) -> None:
    records = orchestrator.ledger.snapshot()
    if not records:
        print("No transactions yet.")
        return
    print(f"\nTotal: {len(records)} transactions")
    print(f"{'ID':<14} {'Date':<10}   {'Amount':<16} {'Category':<14} Merchant")
    print("-" * 80)
    for record in records:
        _print_record(record)


def summary_command(orchestrator: ExtractionOrchestrator) -> None:
    snapshot = orchestrator.summary()
    print(f"Income:  {format_amount(snapshot.total_income)}")
    print(f"Expense: {format_amount(snapshot.total_expense)}")
    print(f"Balance: {format_amount(snapshot.balance)}")
    if not snapshot.category_totals:
        print("\nNo expense data yet.")
        return
    print("\nExpenses by category:")
    for category, amount in sorted(snapshot.category_totals.items(), key=lambda item: -item[1]):
        print(f"  {category or 'Uncategorized':<20} {format_amount(amount)}")


def insights_command(orchestrator: ExtractionOrchestrator) -> None:
    print(orchestrator.generate_insights())


def remove_command(orchestrator: ExtractionOrchestrator, record_id: int) -> None:
    if orchestrator.ledger.remove(record_id):
        print(f"✓ Removed transaction {record_id}")
    else:
        print(f"No transaction with id {record_id}")


def reset_command(orchestrator: ExtractionOrchestrator) -> None:
    removed = orchestrator.ledger.reset()
    print(f"✓ Cleared {removed} transactions")


def _build_orchestrator(config: Config) -> ExtractionOrchestrator:
    settings = get_settings()
    store = TransactionStore(Path(config.data_dir) / settings.database_file)
    ledger = TransactionLedger(config.session_id, store)
    return ExtractionOrchestrator(config, ledger=ledger)


def _load_and_validate_config(require_credentials: bool) -> Config:
    """Load configuration and stop with ConfigError if it cannot run the command."""
    config_manager = ConfigManager()
    config = config_manager.load_config()

    is_valid, message = config_manager.validate_config(config, require_credentials)
    if not is_valid:
        raise ConfigError(f"Invalid configuration: {message}")
    return config


def main(argv=None):
    """Main entry point for UangKu."""
    parser = argparse.ArgumentParser(description="UangKu - AI personal finance ledger")
    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Record a transaction from text or a receipt")
    add_parser.add_argument("--text", "-t", help="Description, e.g. 'Makan di McD 50rb'")
    add_parser.add_argument("--file", "-f", help="Receipt image or PDF")
    add_parser.add_argument("--mime", help="Media type of --file (guessed from the name if omitted)")

    subparsers.add_parser("list", help="List recorded transactions, newest first")
    subparsers.add_parser("summary", help="Show income, expense, balance and category totals")
    subparsers.add_parser("insights", help="Ask the AI for financial insights")

    remove_parser = subparsers.add_parser("remove", help="Remove a transaction by id")
    remove_parser.add_argument("id", type=int)

    subparsers.add_parser("reset", help="Delete all transactions in this session")

    args = parser.parse_args(argv)

    settings = get_settings()
    try:
        config = _load_and_validate_config(args.command in MODEL_COMMANDS)
        logger = configure_logging(
            config.log_level,
            Path(config.data_dir) / settings.logs_dir,
            settings.log_max_file_size_mb,
            settings.log_backup_count
        )
        set_session_context(config.session_id)
        logger.debug(f"Running command '{args.command}' with model {config.model_name}")

        orchestrator = _build_orchestrator(config)

        if args.command == "add":
            add_command(orchestrator, args.text, args.file, args.mime)
        elif args.command == "list":
            list_command(orchestrator)
        elif args.command == "summary":
            summary_command(orchestrator)
        elif args.command == "insights":
            insights_command(orchestrator)
        elif args.command == "remove":
            remove_command(orchestrator, args.id)
        elif args.command == "reset":
            reset_command(orchestrator)
    except UangkuError as e:
        print(f"✗ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
