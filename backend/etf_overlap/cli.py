import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .comparison import detect_for_text, ingest_fund
from .errors import HoldingsInputError
from .models import ComparisonSet
from .overlap import OverlapResult, analyze_overlap

logger = logging.getLogger(__name__)
console = Console()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="etf-overlap",
        description="Find the securities shared by several ETFs",
    )
    sub = p.add_subparsers(dest="command")

    # --- analyze ---
    analyze = sub.add_parser("analyze", help="Analyze overlap between holdings files")
    analyze.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Text files with one ETF's pasted holdings table each",
    )
    analyze.add_argument(
        "--name",
        action="append",
        default=[],
        help="ETF name for the matching file (repeatable, defaults to the file name)",
    )
    analyze.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    # --- serve ---
    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")
    serve.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    return p


def load_comparison(files: list[Path], names: list[str]) -> ComparisonSet:
    """Ingest each file as one ETF, auto-detecting its columns."""
    comparison = ComparisonSet(id="cli", name="Command line")

    for position, path in enumerate(files):
        name = names[position] if position < len(names) else path.stem.upper()
        text = path.read_text()
        try:
            _, mapping = detect_for_text(text)
            logger.debug(f"Detected columns for {path}: {mapping}")
            ingest_fund(
                comparison,
                name,
                text,
                mapping.ticker_index,
                mapping.amount_index,
                mapping.description_index,
            )
        except HoldingsInputError as e:
            raise HoldingsInputError(f"{path}: {e}") from e

    return comparison


def render_overlap(comparison: ComparisonSet, result: OverlapResult) -> None:
    stats = Table(title="Overlap Analysis")
    stats.add_column("Total Unique Holdings", justify="right")
    stats.add_column("Overlapping Holdings", justify="right")
    stats.add_column("Overlap Percentage", justify="right")
    stats.add_row(
        str(result.unique_ticker_count),
        str(result.overlapping_ticker_count),
        f"{result.overlap_percentage:.1f}%",
    )
    console.print(stats)

    if not result.overlapping_tickers:
        return

    shared = Table(title="Shared Holdings")
    shared.add_column("Ticker", style="bold")
    for fund in comparison.funds:
        shared.add_column(fund.name, justify="right")

    for ticker in result.overlapping_tickers:
        weights = ["" for _ in comparison.funds]
        for entry in result.ticker_index[ticker]:
            weights[entry.fund_index] = f"{entry.holding.amount:.2f}%"
        shared.add_row(ticker, *weights)

    console.print(shared)


def _run_analyze(args: argparse.Namespace) -> None:
    missing = [str(path) for path in args.files if not path.is_file()]
    if missing:
        console.print(f"[red]File not found: {', '.join(missing)}[/red]")
        sys.exit(1)

    comparison = load_comparison(args.files, args.name)
    for fund in comparison.funds:
        console.print(f"[green]{fund.name}[/green]: {len(fund.holdings)} holdings")

    if len(comparison.funds) < 2:
        console.print("[yellow]Add at least two ETFs to see overlap.[/yellow]")
        return

    render_overlap(comparison, analyze_overlap(comparison.funds))


def _run_serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("etf_overlap.main:app", host=args.host, port=args.port)


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        if args.command == "analyze":
            _run_analyze(args)
        elif args.command == "serve":
            _run_serve(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled.[/yellow]")
        sys.exit(1)
    except HoldingsInputError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
