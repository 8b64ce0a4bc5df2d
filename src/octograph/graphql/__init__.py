"""GitHub GraphQL schema: types, root query, handlers and loaders."""
