"""HTTP transport adapters.

Provides the REST API for clients:
- Create tasks
- List and fetch tasks
- Mark tasks completed
"""
