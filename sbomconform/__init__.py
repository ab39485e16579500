"""Conformance checks for SPDX 2.3 SBOMs against the Google, EO and SPDX specs."""

__version__ = "0.1.0"