"""API middleware package.

Manifesto:
    Cross-cutting concerns such as request IDs and error mapping belong in
    middleware so routers stay focused on the scheduler commands.
"""
