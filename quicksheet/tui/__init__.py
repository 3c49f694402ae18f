# SPDX-License-Identifier: MIT
"""Interactive textual front end for quicksheet."""
