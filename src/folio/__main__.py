"""Allow ``python -m folio build SOURCE OUTPUT``."""

import sys

from folio.cli import main

sys.exit(main())
