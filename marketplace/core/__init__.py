"""
Core utilities shared across the marketplace backend.

This package hosts configuration, logging setup, password hashing and the
request rate limiter. Services and routers depend on these primitives rather
than reading the environment or hashing on their own.
"""
