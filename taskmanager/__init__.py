"""Task manager: a minimal task-tracking backend.

Clients create tasks, list them and mark them complete. Business rules live
in taskmanager.core; storage backends and transports live in
taskmanager.adapters and are wired together in taskmanager.main.
"""

__version__ = "0.1.0"
