"""Basic file scanning with the VirusTotal API, without the interactive CLI.

Uploads a file and polls until the analysis completes.
Requires VIRUSTOTAL_API_KEY (environment or .env).

Usage:
    export VIRUSTOTAL_API_KEY=your-key
    python examples/basic_file_scan.py suspicious.pdf
"""

import sys

from vt_file_scanner import ScannerConfig, VirusTotalClient

client = VirusTotalClient(ScannerConfig(max_wait=600))

# Scan a file from the command line, or this script itself
file_path = sys.argv[1] if len(sys.argv) > 1 else __file__

print(f"Scanning: {file_path}")
result = client.scan_file(file_path, on_pending=lambda r: print(f"  status: {r.status}"))

print(f"Verdict: {result.verdict.value}")
print(f"Category: {result.category.value}")
print(f"Safe: {result.is_safe}")
print(f"Duration: {result.duration_ms}ms")
print(f"Analysis ID: {result.analysis_id}")

if result.stats:
    print("\nEngine results:")
    for name, count in result.stats.to_dict().items():
        print(f"  {name}: {count}")
else:
    print("\nStats not available.")
