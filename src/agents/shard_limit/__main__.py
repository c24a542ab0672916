"""Allow ``python -m src.agents.shard_limit``."""

import sys

from src.agents.shard_limit.cli import main

sys.exit(main())
