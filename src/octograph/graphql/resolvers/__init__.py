"""Root field handlers and nested field resolvers for the GitHub schema.

Handlers delegate to the per-request loaders in the execution context and
never call the data source directly, except where a lookup has no natural
cache key.
"""
