"""Entry point for ``python -m treewatch``."""

import sys

from .cli import main


sys.exit(main())
