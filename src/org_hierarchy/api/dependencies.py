"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from org_hierarchy.cache import HierarchyCache
from org_hierarchy.events import EventDispatcher
from org_hierarchy.handlers import HierarchyHandler
from org_hierarchy.repositories import StaticHierarchySource
from org_hierarchy.services import HierarchyService

logger = logging.getLogger(__name__)


def get_hierarchy_service(request: Request) -> HierarchyService:
    """Dependency injection for HierarchyService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The HierarchyService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "hierarchy_service", None)
    if service is None:
        raise RuntimeError("HierarchyService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> HierarchyHandler:
    """Dependency injection for HierarchyHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The HierarchyHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "hierarchy_handler", None)
    if handler is None:
        raise RuntimeError("HierarchyHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Source (data access) - taken from app.state.hierarchy_source when the
       app factory was given one, else loaded from settings
    2. Cache and dispatcher - created explicitly
    3. Service (business logic) - stored in app.state.hierarchy_service
    4. Handler (HTTP endpoints) - stored in app.state.hierarchy_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None
    """
    source = getattr(app.state, "hierarchy_source", None) or StaticHierarchySource.create()
    cache = HierarchyCache()
    dispatcher = EventDispatcher()

    hierarchy_service = HierarchyService.create(
        source=source,
        cache=cache,
        dispatcher=dispatcher,
    )
    hierarchy_handler = HierarchyHandler(hierarchy_service=hierarchy_service)

    app.state.hierarchy_source = source
    app.state.hierarchy_service = hierarchy_service
    app.state.hierarchy_handler = hierarchy_handler

    logger.info("Hierarchy service initialized")
    logger.info("Cache TTL: %ss, unit matching: %s", cache.default_ttl, cache.unit_match)

    yield

    cache.invalidate_all()
    del app.state.hierarchy_handler
    del app.state.hierarchy_service
    logger.info("Hierarchy service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[HierarchyHandler, Depends(get_handler)]
ServiceDep = Annotated[HierarchyService, Depends(get_hierarchy_service)]
