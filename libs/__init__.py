"""Shared libraries for the system properties services.

Subpackages:
- ``libs.common``: configuration, logging and metrics.
- ``libs.contract``: consumer-driven contract builders, the stand-in server
  and provider verification.

Notes:
- Avoid service-specific logic; keep modules cohesive and broadly useful.
"""
