"""Testing utilities for wren dispatchers.

Usage::

    from wren.testing import TestClient

    async with TestClient(dispatcher) as client:
        response = await client.get("/users/42")
        assert response.status == 200
"""

from wren.testing.client import TestClient

__all__ = ["TestClient"]
