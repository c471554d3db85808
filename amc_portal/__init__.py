"""AMC Portal: task, notification and activity tracking."""

__version__ = "1.0.0"
