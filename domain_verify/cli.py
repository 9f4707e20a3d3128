"""Domain Verify CLI - progressively check whether domain names are registered."""

import argparse
import asyncio
import json
import logging
from contextlib import aclosing

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from domain_verify.config import VerifierConfig
from domain_verify.events import format_sse, stream_events
from domain_verify.models import FastCheckResult, VerificationResult, VerificationStatus
from domain_verify.validation import InvalidDomainError, validate_domain
from domain_verify.verifier import ProgressiveVerifier

console = Console()

STATUS_STYLES = {
    VerificationStatus.AVAILABLE: "bold green",
    VerificationStatus.LIKELY_AVAILABLE: "green",
    VerificationStatus.CHECKING: "yellow",
    VerificationStatus.LIKELY_TAKEN: "red",
    VerificationStatus.TAKEN: "bold red",
}

AVAILABLE_STATUSES = (VerificationStatus.AVAILABLE, VerificationStatus.LIKELY_AVAILABLE)
TAKEN_STATUSES = (VerificationStatus.TAKEN, VerificationStatus.LIKELY_TAKEN)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def format_layer_line(result: VerificationResult) -> Text:
    """One-line progress summary for a completed layer."""
    line = Text()
    line.append(f"[layer {result.layer}] ", style="dim")
    line.append(result.domain, style="bold")
    line.append("  ")
    line.append(result.status.value, style=STATUS_STYLES.get(result.status, ""))
    line.append(f"  {result.confidence}%")
    if result.evidence:
        line.append(f"  {result.evidence[-1]}", style="dim")
    return line


def display_results(
    results: list[VerificationResult],
    output_console: Console | None = None,
) -> None:
    """Display final results to the terminal using rich."""
    out = output_console or console

    table = Table(title="Domain Verification Results", show_lines=False)
    table.add_column("Domain", style="bold")
    table.add_column("Layer", justify="right")
    table.add_column("Status")
    table.add_column("Confidence", justify="right")
    table.add_column("Registrar")
    table.add_column("Price/yr", justify="right")

    for r in results:
        table.add_row(
            r.domain,
            str(r.layer),
            Text(r.status.value, style=STATUS_STYLES.get(r.status, "")),
            f"{r.confidence}%",
            r.registrar or "",
            f"${r.pricing.registration:.2f}",
        )

    out.print(table)

    available = sum(1 for r in results if r.status in AVAILABLE_STATUSES)
    taken = sum(1 for r in results if r.status in TAKEN_STATUSES)

    summary = Text()
    summary.append(f"Total: {len(results)}", style="bold")
    summary.append(" | ")
    summary.append(f"Available: {available}", style="bold green")
    summary.append(" | ")
    summary.append(f"Taken: {taken}", style="red")
    out.print(summary)


def display_alternates(fast_result: FastCheckResult, output_console: Console | None = None) -> None:
    """Show unchecked alternate-TLD suggestions for a fast check."""
    out = output_console or console
    if not fast_result.alternates:
        return

    table = Table(title=f"Alternates for {fast_result.result.domain} (unchecked)")
    table.add_column("Domain", style="bold")
    table.add_column("Score", justify="right")
    for alt in fast_result.alternates:
        table.add_row(alt.domain, str(alt.score))
    out.print(table)


async def run_progressive(
    domains: list[str],
    verifier: ProgressiveVerifier,
    max_layer: int = 3,
    output_console: Console | None = None,
) -> list[VerificationResult]:
    """Stream each domain's layers to the console, stopping after max_layer."""
    out = output_console or console
    finals: list[VerificationResult] = []

    for domain in domains:
        last: VerificationResult | None = None
        async with aclosing(verifier.verify_progressive(domain)) as layers:
            async for result in layers:
                out.print(format_layer_line(result))
                last = result
                if result.layer >= max_layer:
                    break
        if last is not None:
            finals.append(last)

    return finals


async def run_json(
    domains: list[str],
    verifier: ProgressiveVerifier,
    max_layer: int = 3,
    output_console: Console | None = None,
) -> None:
    """Write each domain's event stream as SSE frames.

    A stream cut short at max_layer still ends with a done frame.
    """
    out = output_console or console
    for domain in domains:
        async with aclosing(stream_events(domain, verifier)) as events:
            async for event in events:
                out.out(format_sse(event), end="", highlight=False)
                if event.get("type") == "layer" and event.get("layer", 0) >= max_layer:
                    out.out(format_sse({"type": "done"}), end="", highlight=False)
                    break


async def run_fast(domains: list[str], verifier: ProgressiveVerifier) -> list[FastCheckResult]:
    return [await verifier.verify_fast(domain) for domain in domains]


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Progressively verify whether domain names are registered."
    )
    parser.add_argument("domains", nargs="+", help="Domain names to verify (e.g., example.com)")
    parser.add_argument(
        "--fast",
        action="store_true",
        help="Run layers 1 and 2 only (DNS + HTTP, no WHOIS) and suggest alternate TLDs",
    )
    parser.add_argument(
        "--max-layer",
        type=int,
        choices=(1, 2, 3),
        default=3,
        help="Stop after this verification layer (default: 3)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit progressive results as Server-Sent Events frames",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    verifier = ProgressiveVerifier(VerifierConfig.from_env())

    if args.json and not args.fast:
        # Validation happens inside the stream so bad input becomes an error event
        asyncio.run(run_json(args.domains, verifier, args.max_layer))
        return

    domains: list[str] = []
    for item in args.domains:
        try:
            domains.append(validate_domain(item))
        except InvalidDomainError as exc:
            parser.error(f"{item!r}: {exc}")

    if args.fast:
        fast_results = asyncio.run(run_fast(domains, verifier))
        if args.json:
            payload = [
                {**f.result.to_dict(), "alternates": [a.to_dict() for a in f.alternates]}
                for f in fast_results
            ]
            console.out(json.dumps(payload, indent=2), highlight=False)
            return
        display_results([f.result for f in fast_results])
        for f in fast_results:
            display_alternates(f)
        return

    results = asyncio.run(run_progressive(domains, verifier, args.max_layer))
    display_results(results)


if __name__ == "__main__":
    main()
