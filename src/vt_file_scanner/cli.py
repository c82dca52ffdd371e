"""Interactive command-line entry point.

Prompts for a file (unless one is given on the command line), uploads it to
VirusTotal, polls the analysis and prints the engine counts.

Usage:
    export VIRUSTOTAL_API_KEY=your-key   # or put it in .env
    vt-scan
    vt-scan suspicious.pdf --max-wait 300
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from vt_file_scanner import __version__
from vt_file_scanner.config import DEFAULT_POLL_INTERVAL, ScannerConfig
from vt_file_scanner.exceptions import VTScannerError
from vt_file_scanner.verdicts import ScanVerdict
from vt_file_scanner.virustotal.client import VirusTotalClient
from vt_file_scanner.virustotal.models import AnalysisResult

logger = logging.getLogger("vt_file_scanner.cli")

DEFAULT_FILENAME = "sample_input.txt"
RULE = "=" * 40


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="vt-scan",
        description="Upload a file to VirusTotal and wait for the scan verdict.",
    )
    ap.add_argument(
        "file",
        nargs="?",
        help=f"File to scan. Prompted for when omitted (Enter selects {DEFAULT_FILENAME}).",
    )
    ap.add_argument(
        "--poll-interval",
        type=float,
        default=DEFAULT_POLL_INTERVAL,
        metavar="SECONDS",
        help="Seconds between status polls (default: %(default)s)",
    )
    ap.add_argument(
        "--max-wait",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Give up if the analysis is still queued after this long (default: wait forever)",
    )
    ap.add_argument("--env-file", help="Read VIRUSTOTAL_API_KEY from this file")
    ap.add_argument("--json", action="store_true", help="Print the verdict as JSON")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log HTTP activity to stderr")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def prompt_for_filename() -> str:
    """Ask for a filename on stdin. Empty input selects the default file."""
    prompt = f"Enter filename (or press Enter for {DEFAULT_FILENAME}): "
    filename = input(prompt).rstrip("\r\n")
    return filename or DEFAULT_FILENAME


def print_verdict(verdict: ScanVerdict) -> None:
    if verdict.stats is None:
        print("Scan Complete (stats not available)")
        return
    print("Scan Complete:")
    print(f" - Harmless: {verdict.harmless}")
    print(f" - Malicious: {verdict.malicious}")


async def run_scan(
    client: VirusTotalClient,
    file_path: Path,
    poll_interval: float | None = None,
    max_wait: float | None = None,
) -> ScanVerdict:
    """Upload, then poll, printing progress between the steps."""

    def _on_pending(result: AnalysisResult) -> None:
        print("Waiting for scan to complete...")

    async with client:
        print("Uploading file to VirusTotal...")
        upload = await client.upload_file_async(file_path)
        print(f"File uploaded successfully. Analysis ID: {upload.analysis_id}\n")

        print("Retrieving scan results...")
        return await client.wait_for_analysis_async(
            upload.analysis_id,
            poll_interval=poll_interval,
            max_wait=max_wait,
            on_pending=_on_pending,
        )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    print(RULE)
    print("  VirusTotal File Scanner")
    print(f"{RULE}\n")

    if args.file:
        filename = args.file
    else:
        try:
            filename = prompt_for_filename()
        except EOFError:
            print("\nError: Failed to read input.", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            print("\nInterrupted.", file=sys.stderr)
            return 130

    file_path = Path(filename)
    print(f"\nChecking if file exists: {file_path}")
    if not file_path.is_file():
        print(f"Error: File '{filename}' not found.", file=sys.stderr)
        return 1
    print("File found. Starting VirusTotal scan...\n")

    try:
        config = ScannerConfig(
            poll_interval=args.poll_interval,
            max_wait=args.max_wait,
            env_file=args.env_file,
        )
        client = VirusTotalClient(config)
        verdict = asyncio.run(run_scan(client, file_path))
    except VTScannerError as e:
        logger.debug("Scan failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        body = e.details.get("response_body")
        if body:
            print(f"Response: {body}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130

    if args.json:
        print(json.dumps(verdict.to_dict(), indent=2))
    else:
        print_verdict(verdict)

    print(f"\n{RULE}")
    print("  Scan complete!")
    print(RULE)
    return 0
