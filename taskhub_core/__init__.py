"""
TaskHub core: Supabase-backed data access and session layer for the TaskHub
task/product app.

    from taskhub_core import TaskHub

    hub = await TaskHub.create()
    await hub.session.login("ana@example.com", "secret")
    tasks = await hub.tasks.list()
"""

__version__ = "1.0.0"

from .hub import TaskHub, get_hub

__all__ = ["TaskHub", "get_hub", "__version__"]
