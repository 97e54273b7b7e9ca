# =============================================================================
# taskhub_core/network/__init__.py
# Connectivity checks for TaskHub
# =============================================================================

from .connectivity import (
    ConnectivityProbe,
    ConnectionState,
    ConnectionStatus,
)

__all__ = [
    "ConnectivityProbe",
    "ConnectionState",
    "ConnectionStatus",
]
