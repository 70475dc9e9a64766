"""
Régisseur - process lifecycle engine.

Starts an application in phases, waits for a termination signal and
shuts it down gracefully.
"""

from regisseur.lifecycle import Engine, ExitSignal, Server, new_engine

__version__ = "0.1.0"
__all__ = ["Engine", "ExitSignal", "Server", "new_engine"]
