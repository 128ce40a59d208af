"""Allow ``python -m hpgl_distiller``."""

import sys

from hpgl_distiller.scripts.distill import main

sys.exit(main())
