"""Command-line interface adapters.

Maps interactive commands (create, list, show, complete) onto
TaskManagementPort operations.
"""
