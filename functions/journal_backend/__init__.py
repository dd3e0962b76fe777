"""
Backend package for the school journaling API.

This package provides a FastAPI application over a pluggable store
(in-memory, SQL or Firestore) so the same handlers can run as a
long-running service or behind the ``api`` cloud function in main.py.
"""
