"""Allow ``python -m ci_alert``."""

import sys

from ci_alert.cli import main

sys.exit(main())
