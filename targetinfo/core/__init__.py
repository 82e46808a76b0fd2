# SPDX-License-Identifier: MIT
"""Core resolver: probes, parsing, caching and file planning."""
