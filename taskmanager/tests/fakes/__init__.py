"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakeTaskRepositoryPort: In-memory task persistence with call recording
- FakeTaskManagementPort: Captured management operations
"""

from .management import FakeTaskManagementPort
from .store import FakeTaskRepositoryPort

__all__ = [
    "FakeTaskManagementPort",
    "FakeTaskRepositoryPort",
]
