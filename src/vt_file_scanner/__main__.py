"""Allow ``python -m vt_file_scanner``."""

import sys

from vt_file_scanner.cli import main

sys.exit(main())
