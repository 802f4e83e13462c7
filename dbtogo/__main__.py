"""Allow ``python -m dbtogo``."""

import sys

from .cli import main

sys.exit(main())
