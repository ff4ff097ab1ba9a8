"""Test utilities for md-negotiate applications::

    from mdnegotiate.testing import TestClient
"""

from mdnegotiate.testing.client import TestClient

__all__ = ["TestClient"]
