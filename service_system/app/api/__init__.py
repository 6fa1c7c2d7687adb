"""API subpackage for the System service.

The router exposes the property listing, key lookup and version endpoints.
Transport layer remains thin and delegates to ``PropertyTable``.
"""
