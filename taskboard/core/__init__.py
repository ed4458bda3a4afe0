"""
Core utilities shared across the Taskboard API.

This package hosts configuration (env vars, data paths, behaviour switches)
and password helpers. Services depend on these primitives instead of reading
the environment or hashing on their own.
"""
