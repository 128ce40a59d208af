"""
HPGL Distiller Package.

Strips an HPGL command stream down to the commands a simple two-axis
cutting device (vinyl cutter) understands.  Everything else (pen width,
line types, character sets, labels) is dropped.

Subpackages:
    hpgl: Tokenizer, command tokens and the accept-set classifier
    motion: Head travel-time estimation used to pace emission
    geometry: Bounding-box normalisation pass
    output: Emitter writing distilled commands to a byte sink
    configs: Distiller configuration loading and validation
    utils: Input acquisition, YAML and logging helpers
    scripts: Command-line entry point
"""

__version__ = "1.0.0"

__all__ = ["hpgl", "motion", "geometry", "output", "configs", "utils", "__version__"]
