"""External adapters for the task manager.

This package contains all external dependencies (SQLite, PostgreSQL, HTTP
server, pydantic validation) and provides implementations of the core port
interfaces.

Adapter Organization:

- store/: Adapters for task persistence (in-memory, SQLite, PostgreSQL)
- http/: HTTP transport mapping requests onto TaskManagementPort
- cli/: Command-line interface for task management
- schemas.py: Request validation and wire representation shared by transports
"""
