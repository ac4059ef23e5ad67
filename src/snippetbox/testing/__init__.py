"""Test utilities for snippetbox applications.

    from snippetbox.testing import TestClient
"""

from snippetbox.testing.client import TestClient

__all__ = ["TestClient"]
