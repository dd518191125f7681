"""
Universal Automation Manager — JSON-driven tasks and profiles on top of
the host's package managers.
"""

__version__ = "0.1.0"
