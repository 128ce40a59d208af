"""
Motion timing.

Estimates how long the cutting head needs for each move so emission can
be throttled to the device's physical speed.
"""

from hpgl_distiller.motion.timing import FALLBACK_DISTANCE, MotionTimer, PenPosition

__all__ = ["FALLBACK_DISTANCE", "MotionTimer", "PenPosition"]
