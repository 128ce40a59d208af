"""Cross-cutting utilities (lowest dependency layer).

    - Input acquisition, output sinks and YAML (fs)
    - Unified logging (logging_config)

No module in utils/ may import from upper layers (hpgl, motion, output, ...).
"""

from . import fs
from . import logging_config
from .logging_config import push_context, setup_logging

__all__ = ["fs", "logging_config", "push_context", "setup_logging"]
