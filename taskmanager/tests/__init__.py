"""Test suite for the task manager.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Integration tests for adapter implementations
   - Tests against real SQLite files and an in-process aiohttp server
   - Validates adapter behavior and error handling

3. fakes/: Port implementations for testing
   - In-memory TaskRepositoryPort and TaskManagementPort
   - Used by core unit tests
"""
