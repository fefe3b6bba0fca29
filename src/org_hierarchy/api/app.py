from typing import Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from org_hierarchy.api.dependencies import HandlerDep, ServiceDep, lifespan
from org_hierarchy.config import configure_logging, settings
from org_hierarchy.dto import (
    CacheInfoResponse,
    EventResponse,
    FilterResponse,
    FlatListResponse,
    HealthCheckResponse,
    HierarchyChangedRequest,
    InvalidationResponse,
    PathResponse,
    StatisticsResponse,
    TreeResponse,
    UnitContextResponse,
    UnitResponse,
)
from org_hierarchy.protocols import HierarchySource


def create_app(source: HierarchySource | None = None) -> FastAPI:
    """Create the API application.

    Args:
        source: Hierarchy source to serve. If None, the lifespan loads the
            one configured in settings.

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Organizational Hierarchy API",
        description="Cached organizational unit hierarchy: trees, paths, filters and statistics",
        version="0.1.0",
        lifespan=lifespan,
    )
    if source is not None:
        app.state.hierarchy_source = source

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root(service: ServiceDep) -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Organizational Hierarchy API",
            "version": "0.1.0",
            "cache_ttl": service.cache.default_ttl,
            "endpoints": {
                "hierarchy": "/hierarchy",
                "cache": "/cache",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return handler.health_check()

    @app.get("/hierarchy/tree", response_model=TreeResponse)
    def get_tree(handler: HandlerDep, root_id: int | None = None) -> TreeResponse:
        """Get the full hierarchy tree or the subtree rooted at ``root_id``."""
        return handler.get_tree(root_id)

    @app.get("/hierarchy/flat", response_model=FlatListResponse)
    def get_flat_list(handler: HandlerDep, root_id: int | None = None) -> FlatListResponse:
        """Get every unit in pre-order."""
        return handler.get_flat_list(root_id)

    @app.get("/hierarchy/statistics", response_model=StatisticsResponse)
    def get_statistics(handler: HandlerDep, root_id: int | None = None) -> StatisticsResponse:
        """Get unit counts, active counts, height and per-type counts."""
        return handler.get_statistics(root_id)

    @app.get("/hierarchy/filter", response_model=FilterResponse)
    def filter_tree(
        handler: HandlerDep,
        unit_type: str = Query(..., alias="type", min_length=1),
        root_id: int | None = None,
    ) -> FilterResponse:
        """Get the tree pruned to units of one type and their ancestors."""
        return handler.filter_by_type(unit_type, root_id)

    @app.get("/hierarchy/units/{unit_id}", response_model=UnitResponse)
    def get_unit(handler: HandlerDep, unit_id: int) -> UnitResponse:
        """Get a single unit."""
        return handler.get_unit(unit_id)

    @app.get("/hierarchy/units/{unit_id}/path", response_model=PathResponse)
    def get_path(handler: HandlerDep, unit_id: int) -> PathResponse:
        """Get the units from the root down to ``unit_id``."""
        return handler.get_path(unit_id)

    @app.get("/hierarchy/units/{unit_id}/context", response_model=UnitContextResponse)
    def get_unit_context(handler: HandlerDep, unit_id: int) -> UnitContextResponse:
        """Get a unit with its ancestors and descendants."""
        return handler.get_unit_context(unit_id)

    @app.post("/hierarchy/events", response_model=EventResponse)
    def publish_change(handler: HandlerDep, request: HierarchyChangedRequest) -> EventResponse:
        """Publish a hierarchy change so affected cache entries are invalidated."""
        return handler.publish_change(request)

    @app.get("/cache/info", response_model=CacheInfoResponse)
    def get_cache_info(handler: HandlerDep) -> CacheInfoResponse:
        """Get cache diagnostics."""
        return handler.get_cache_info()

    @app.delete("/cache", response_model=InvalidationResponse)
    def clear_cache(handler: HandlerDep) -> InvalidationResponse:
        """Clear all entries from the cache."""
        return handler.clear_cache()

    @app.delete("/cache/hierarchy", response_model=InvalidationResponse)
    def invalidate_hierarchy(handler: HandlerDep) -> InvalidationResponse:
        """Drop cached trees and statistics."""
        return handler.invalidate_hierarchy()

    @app.delete("/cache/units/{unit_id}", response_model=InvalidationResponse)
    def invalidate_unit(handler: HandlerDep, unit_id: int) -> InvalidationResponse:
        """Drop cache entries scoped to one unit."""
        return handler.invalidate_unit(unit_id)

    @app.post("/cache/sweep", response_model=InvalidationResponse)
    def sweep_expired(handler: HandlerDep) -> InvalidationResponse:
        """Remove expired cache entries."""
        return handler.sweep_expired()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    configure_logging()
    uvicorn.run(
        "org_hierarchy.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
