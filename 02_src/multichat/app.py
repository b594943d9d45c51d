"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .config import Settings
from .llm import ProviderSet
from .logging_config import get_logger
from .orchestration import IStageCoordinator, StageCoordinator
from .registry import AgentRegistry, IAgentRegistry

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def registry(self) -> IAgentRegistry:
        ...

    @property
    def coordinator(self) -> IStageCoordinator:
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        registry: IAgentRegistry | None = None,
        providers: ProviderSet | None = None,
    ):
        self._settings = settings or Settings.from_env()

        # Injected components win over the defaults built in start()
        self._registry: IAgentRegistry | None = registry
        self._providers: ProviderSet | None = providers
        self._coordinator: IStageCoordinator | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Registry (static configuration)
        if self._registry is None:
            self._registry = AgentRegistry()
        logger.info("Agent registry loaded with %d agents", len(self._registry.selectable()))

        # 2. Providers (clients are created lazily per producer)
        if self._providers is None:
            self._providers = ProviderSet(self._settings)

        # 3. StageCoordinator (depends on registry + providers)
        self._coordinator = StageCoordinator(self._registry, self._providers)
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        self._coordinator = None
        logger.info("Application stopped")

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> IAgentRegistry:
        """Get registry instance."""
        if self._registry is None:
            raise RuntimeError("Application not started")
        return self._registry

    @property
    def coordinator(self) -> IStageCoordinator:
        """Get stage coordinator instance."""
        if self._coordinator is None:
            raise RuntimeError("Application not started")
        return self._coordinator
