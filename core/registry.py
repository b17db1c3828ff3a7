"""
Module Registry.

Keeps the console's feature modules by name and drives them through the
application lifecycle: activation on registration, router mounting,
async startup in the lifespan, and shutdown.
"""
import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Type

from core.app_context import AppContext
from core.interface import IAppModule

if TYPE_CHECKING:
    from fastapi import FastAPI

logger = logging.getLogger(__name__)


class ModuleRegistry:
    """
    Name-keyed collection of IAppModule instances.

    One registry per application instance; ``create_app`` builds a fresh one
    so test apps never share modules.
    """

    def __init__(self) -> None:
        self._modules: Dict[str, IAppModule] = {}
        self._context: Optional[AppContext] = None

    def set_context(self, context: AppContext) -> None:
        """Context handed to modules registered from now on."""
        self._context = context

    def register(self, module: IAppModule) -> bool:
        """
        Add a module and activate it with the current context.

        A failing ``on_entry`` is logged and recorded in the event log; the
        module stays registered so ``/api/status`` can report it.

        Returns:
            bool: False when a module with the same name is already present.
        """
        name = module.get_module_name()
        if name in self._modules:
            logger.warning(f"Module '{name}' is already registered; ignoring duplicate")
            return False

        self._modules[name] = module
        logger.info(f"Registered module '{name}'")

        if self._context is not None:
            try:
                module.on_entry(self._context)
            except Exception as e:
                logger.error(f"Module '{name}' failed to activate: {e}")
                self._context.log_event(f"Module '{name}' activation failed: {e}", "ERROR")
            else:
                self._context.log_event(f"Module '{name}' activated", "SUCCESS")

        return True

    def register_class(self, module_class: Type[IAppModule]) -> bool:
        """Instantiate ``module_class`` with no arguments and register it."""
        try:
            module = module_class()
        except Exception as e:
            logger.error(f"Could not construct {module_class.__name__}: {e}")
            return False
        return self.register(module)

    def unregister(self, name: str) -> bool:
        """Shut a module down and drop it. Returns False for unknown names."""
        module = self._modules.pop(name, None)
        if module is None:
            logger.warning(f"Cannot unregister '{name}': not registered")
            return False

        try:
            module.on_shutdown()
        except Exception as e:
            logger.error(f"Module '{name}' raised during shutdown: {e}")
        logger.info(f"Unregistered module '{name}'")
        return True

    def get_module(self, name: str) -> Optional[IAppModule]:
        return self._modules.get(name)

    def get_all_modules(self) -> List[IAppModule]:
        return list(self._modules.values())

    def get_module_names(self) -> List[str]:
        return list(self._modules)

    def get_statuses(self) -> Dict[str, dict]:
        """``get_status()`` per module; a raising module is reported as ``error``."""
        statuses: Dict[str, dict] = {}
        for name, module in self._modules.items():
            try:
                statuses[name] = module.get_status()
            except Exception as e:
                logger.error(f"Status check failed for module '{name}': {e}")
                statuses[name] = {"status": "error", "details": {"error": str(e)}}
        return statuses

    def include_api_routers(self, app: "FastAPI", prefix: str = "/api") -> List[str]:
        """
        Mount every module router on ``app`` under ``prefix``.

        Returns:
            List[str]: Names of the modules whose routers were mounted.
        """
        mounted: List[str] = []
        for name, module in self._modules.items():
            router = module.get_api_router()
            if router is None:
                continue
            app.include_router(router, prefix=prefix)
            mounted.append(name)
            if self._context is not None:
                self._context.log_event(
                    f"Registered API router for module: {name} at {prefix}", "LOADER"
                )
        return mounted

    async def async_startup_all(self) -> None:
        """Await each module's ``async_startup``; failures are logged, not raised."""
        for name, module in self._modules.items():
            try:
                await module.async_startup()
            except Exception as e:
                logger.error(f"Module '{name}' async startup failed: {e}")
            else:
                logger.debug(f"Module '{name}' async startup completed")

    def shutdown_all(self) -> None:
        """Unregister every module, calling its shutdown hook."""
        for name in list(self._modules):
            self.unregister(name)
        logger.info("All modules shut down")
