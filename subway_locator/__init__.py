"""Subway station locator: KRIC coordinate conversion and nearest-station lookup."""

__version__ = "0.1.0"
