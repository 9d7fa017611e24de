"""Console report of indexing progress and proposal-fee accounting.

Usage:
    python -m src.query.report
    python -m src.query.report --address 0xabc... --from-batch 100 --to-batch 200
"""

import argparse
import sys
from asyncio import run

from rich.console import Console
from rich.table import Table

from src.data.status.models import Checkpoint
from src.query.accounting import AccountingList
from src.query.errors import QueryValidationError
from src.query.service import BatchQueryService


def status_table(checkpoint: Checkpoint) -> Table:
    table = Table(title="Indexer Status")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right", style="green")

    table.add_row("Indexed L1 block", f"{checkpoint.indexed_l1_block:,}")
    table.add_row("Proposed batch", f"{checkpoint.proposed_batch_id:,}")
    table.add_row("Proposed block", f"{checkpoint.proposed_block_id:,}")
    table.add_row("Proved batch", f"{checkpoint.proved_batch_id:,}")
    table.add_row("Proved block", f"{checkpoint.proved_block_id:,}")
    return table


def accounting_table(accounting: AccountingList) -> Table:
    """Render one direction of an accounting result, one row per counterparty."""
    table = Table(title=f"{accounting.operation.value.capitalize()} ({accounting.total_fee})")
    table.add_column("Address", style="cyan")
    table.add_column("Batches", justify="right", style="magenta")
    table.add_column("Fee", justify="right", style="green")

    for info in sorted(
        accounting.addresses.values(), key=lambda i: i.total_fee_wei, reverse=True
    ):
        table.add_row(info.address, f"{len(info.batches):,}", info.total_fee)
    return table


async def main(
    database_url: str | None,
    address: str | None,
    from_batch: int | None,
    to_batch: int | None,
    *,
    check_integrity: bool = False,
) -> int:
    """Print the report.

    Returns:
        Process exit code
    """
    console = Console()
    service = BatchQueryService.from_url(database_url)
    try:
        console.print(status_table(await service.status()))

        if address is None:
            return 0

        if from_batch is None or to_batch is None:
            console.print("[red]--from-batch and --to-batch are required with --address[/red]")
            return 1

        try:
            result = await service.accounting(
                address,
                from_batch,
                to_batch,
                check_integrity=check_integrity,
            )
        except QueryValidationError as e:
            console.print(f"[red]{e}[/red]")
            return 1

        console.print(accounting_table(result.debit))
        console.print(accounting_table(result.credit))
        return 0
    finally:
        await service.close()


def cli() -> None:
    """Command-line interface entry point."""
    parser = argparse.ArgumentParser(
        description="Report batch indexer status and accounting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Indexing progress only
  python -m src.query.report

  # Accounting for an address over a batch range
  python -m src.query.report --address 0xabc... --from-batch 100 --to-batch 200
        """,
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL (default: DATABASE_URL or DB_FILENAME)",
    )
    parser.add_argument("--address", default=None, help="Address to account for")
    parser.add_argument("--from-batch", type=int, default=None, help="First batch id")
    parser.add_argument("--to-batch", type=int, default=None, help="Last batch id")
    parser.add_argument(
        "--check-integrity",
        action="store_true",
        help="Fail unless every batch in the range is indexed",
    )
    args = parser.parse_args()

    exit_code = run(
        main(
            args.database_url,
            args.address,
            args.from_batch,
            args.to_batch,
            check_integrity=args.check_integrity,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    cli()
