from __future__ import annotations

import sys

from logdispatch.interface.cli.app import main

sys.exit(main())
