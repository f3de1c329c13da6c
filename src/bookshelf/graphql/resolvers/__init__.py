"""Resolver package for the GraphQL schema.

Query, mutation and relationship field resolvers live in sibling modules,
grouped by the entity they serve.
"""
