"""Allow ``python -m iEdit``."""

import sys

from .cli import main

sys.exit(main())
