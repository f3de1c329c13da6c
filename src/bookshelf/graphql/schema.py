"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter

from ..config import settings
from ..database.store import EntityStore
from ..logging import get_logger, set_request_context
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)

# Create the GraphQL schema
schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    This ensures that all type references can be resolved and catches
    circular reference errors early, so a broken schema fails at startup
    instead of on the first request.

    Raises:
        Exception: If the schema is invalid or has unresolved types
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        # Introspection catches most lazy type resolution issues
        from graphql import get_introspection_query, graphql_sync

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


def build_context(store: EntityStore, **extra: Any) -> dict[str, Any]:
    """Build the execution context resolvers expect."""
    return {"store": store, **extra}


# Create the GraphQL router for FastAPI integration
def create_graphql_router(store: EntityStore) -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI bound to one entity store.

    The GraphiQL IDE is served outside production environments only.
    """

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        set_request_context(request.headers.get("x-request-id"))
        return build_context(store, request=request)

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphiql=settings.environment.lower() not in ("production", "prod"),
        context_getter=get_context,
    )
