"""repo-manager: fetch, export, analyze and batch-edit GitHub repositories."""

__version__ = "0.1.0"
