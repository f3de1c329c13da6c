"""GraphQL schema, types and resolvers for the bookshelf API."""
