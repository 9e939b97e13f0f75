"""Task Tracker API: personal tasks with filtering, sorting and pagination."""

__version__ = "1.0.0"
