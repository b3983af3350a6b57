"""Building blocks for a kubectl plugin manager: warnings, upgrade checks,
install argument checks and manifest platform validation."""

__version__ = "0.1.0"