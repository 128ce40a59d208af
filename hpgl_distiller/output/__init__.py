"""
Output module.

Writes the initialisation string and distilled commands to a byte sink,
applying pacing delays.
"""

from hpgl_distiller.output.emitter import Emitter

__all__ = ["Emitter"]
