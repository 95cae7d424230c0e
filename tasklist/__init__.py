"""Single-user task list with filtering, sorting and edit history."""

__version__ = "1.0.0"
