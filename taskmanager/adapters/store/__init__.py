"""Task repository adapters for persistence and querying.

Implementations support multiple backends:
- In-memory (process lifetime, no setup)
- SQLite (zero-config, single-file)
- PostgreSQL (distributed, scalable)
"""
