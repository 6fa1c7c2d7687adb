"""Inventory service: consumer of the System properties API."""
