"""
Resilience helpers for lifecycle calls.

- Timeout Protection: bounds blocking load/defer/start/stop calls
"""

from regisseur.resilience.timeout import (
    TimeoutCall,
    TimeoutError,
    call_with_timeout,
)

__all__ = [
    "TimeoutCall",
    "TimeoutError",
    "call_with_timeout",
]
