"""Consumer-driven contract tests.

The Inventory pacts are exercised twice: against the stand-in server from
the consumer side, and replayed against the real System service from the
provider side. Both sides share the definitions in ``system_pacts``.
"""
