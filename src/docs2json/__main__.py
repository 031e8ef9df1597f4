"""Entry point for ``python -m docs2json``."""

import sys

from docs2json.cli import main

sys.exit(main())
