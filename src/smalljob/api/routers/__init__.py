"""API routers package.

Manifesto:
    Each router module owns one API surface and delegates to the
    scheduler core for everything that is not HTTP translation.
"""
