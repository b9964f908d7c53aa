"""Exceptions raised by chordsense.

Only invalid configuration is an error. Silence, too few notes and
unmatched note sets are ordinary outcomes reported as empty results.
"""


class ConfigurationError(ValueError):
    """Invalid sample rate, buffer shape or pipeline configuration."""
