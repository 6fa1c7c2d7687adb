"""Inventory application package.

Key APIs:
- ``InventoryClient``: reads raw property payloads from the System service.
"""

from .client import InventoryClient
