"""Tests for the system properties services.

Unit tests cover configuration, the property table, the System service
endpoints and the contract tooling. ``tests/contract`` holds the consumer
pacts for the Inventory client and their verification against the System
service.
"""
