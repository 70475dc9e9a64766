"""
Reporter - leveled logging for Régisseur.
"""

from regisseur.reporter.system_reporter import SystemReporter, create_reporter

__all__ = ["SystemReporter", "create_reporter"]
