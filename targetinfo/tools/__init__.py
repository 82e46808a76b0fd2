# SPDX-License-Identifier: MIT
"""External tools."""
