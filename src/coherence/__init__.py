"""Coherence verification engine.

Checks that every package produced by a build depends on the exact versions
of its sibling packages that the same build produced, and grades each
mismatch as a warning or an error according to the enforced behavior flags.
"""

__version__ = "1.0.0"
