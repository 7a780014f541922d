"""MundoDraft API - live draft companion backend.

This package provides a hexagonal architecture implementation that serves
reconciled League of Legends draft views to the browser front end.

Layers:
- application: Use cases and port interfaces
- infrastructure: Adapters for the remote draft service
- api: REST and WebSocket endpoints
"""

__version__ = "1.0.0"
