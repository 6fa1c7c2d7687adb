"""System properties service.

Layout:
- ``app.api``: HTTP endpoints for the property resource.
- ``app.properties``: the read-only property table the endpoints serve.
- ``app.main``: application factory and operational endpoints.
"""
