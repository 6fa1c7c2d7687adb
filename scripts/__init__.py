"""Utility scripts for the system properties services.

Scripts include:
- ``run_contract_tests.py``: run the contract suite and keep pact files.
- ``verify_provider.py``: replay a pact file against a running System service.
"""
