"""Feature modules.

Each subpackage that exposes a ``router`` is mounted under /api/v1.
Subpackages without one (such as users) only provide models and
repositories to the others.
"""

import pkgutil
from importlib import import_module

import structlog
from fastapi import APIRouter


logger = structlog.get_logger()


def discover_modules() -> list[APIRouter]:
    """Import every feature package and collect its router, in name order."""
    routers: list[APIRouter] = []

    for info in sorted(pkgutil.iter_modules(__path__), key=lambda info: info.name):
        if not info.ispkg or info.name.startswith("_"):
            continue
        module = import_module(f"{__name__}.{info.name}")
        router = getattr(module, "router", None)
        if isinstance(router, APIRouter):
            routers.append(router)
            logger.debug("module_loaded", module=info.name, prefix=router.prefix)

    return routers
