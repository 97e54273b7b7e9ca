# =============================================================================
# taskhub_core/hub.py
# Wiring: one object holding the session, gateway, repositories and services
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from taskhub_core.auth import LocalSessionCache, SessionManager
from taskhub_core.config import Settings, get_settings
from taskhub_core.data import CollectionGateway
from taskhub_core.data.supabase_client import get_supabase_client
from taskhub_core.logging import get_logger
from taskhub_core.network import ConnectivityProbe
from taskhub_core.repositories import ProductRepository, TaskRepository
from taskhub_core.services import ProductService, TaskService

logger = get_logger(__name__)


@dataclass
class TaskHub:
    """All core components, built once per process."""
    settings: Settings
    session: SessionManager
    gateway: CollectionGateway
    tasks: TaskRepository
    products: ProductRepository
    probe: ConnectivityProbe
    task_service: TaskService
    product_service: ProductService

    @classmethod
    async def create(cls, settings: Optional[Settings] = None, client=None) -> TaskHub:
        """
        Build the component graph and restore the cached session.

        Args:
            settings: Runtime settings (default: get_settings())
            client: Supabase AsyncClient (default: the shared cached client)
        """
        settings = settings or get_settings()
        if client is None:
            client = await get_supabase_client(settings)

        session = SessionManager(client, LocalSessionCache(settings.session_cache_path), settings)
        session.restore()

        gateway = CollectionGateway(client, session, settings)
        tasks = TaskRepository(gateway, settings.tasks_table)
        products = ProductRepository(gateway, settings.products_table)
        probe = ConnectivityProbe(settings)

        logger.info("TaskHub core initialized")
        return cls(
            settings=settings,
            session=session,
            gateway=gateway,
            tasks=tasks,
            products=products,
            probe=probe,
            task_service=TaskService(tasks, probe, settings),
            product_service=ProductService(products, probe, settings),
        )

    async def close(self) -> None:
        """Stop background work and auth listeners."""
        await self.probe.stop_monitoring()
        self.session.close()


_hub: Optional[TaskHub] = None


async def get_hub() -> TaskHub:
    """
    Get the global TaskHub instance.

    Returns:
        TaskHub singleton
    """
    global _hub
    if _hub is None:
        _hub = await TaskHub.create()
    return _hub
