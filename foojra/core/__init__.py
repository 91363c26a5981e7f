"""
Core utilities shared across the Foojra backend.

This package hosts configuration (env vars, data directory, token settings),
logging setup, password hashing and small helpers such as timestamps.
Repositories and services depend on these primitives instead of reading the
environment or importing FastAPI directly.
"""
