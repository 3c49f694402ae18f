# SPDX-License-Identifier: MIT
"""quicksheet - searchable physics formulas and constants that learn from use."""

from quicksheet._version import __version__

__all__ = ["__version__"]
