# ============================================================================
# CLAUDE CONTEXT - PANEL_REGISTRY
# ============================================================================
# STATUS: Registry - Request-scoped panel registry
# PURPOSE: Map panel ids to Panel instances and assemble the client bootstrap
# EXPORTS: PanelRegistry
# DEPENDENCIES: util_logger, core.models.bootstrap, flyout.tokens
# ============================================================================
"""
Panel registry.

Holds the panels registered during request setup. The registry is a plain
object owned by the request (no module-level state), so two requests never
see each other's panels.

Registering an id that is already present replaces the earlier panel
(last-write-wins) and logs a warning.

Exports:
    PanelRegistry: Registry of Panel instances keyed by id
"""

from typing import Dict, Iterator, List, Optional, TYPE_CHECKING

from config import FlyoutConfig, get_config
from core.models.bootstrap import ClientBootstrap, PanelClientConfig
from flyout.tokens import TokenIssuer
from util_logger import LoggerFactory, ComponentType

if TYPE_CHECKING:
    from flyout.panel import Panel


class PanelRegistry:
    """
    Registry for the panels of one request.

    Example:
        registry = PanelRegistry()
        Panel("products", "Edit Product", action_prefix="products",
              handler=handler, registry=registry)

        registry.get("products")  # -> Panel
        bootstrap = registry.build_bootstrap(token_issuer)
    """

    def __init__(self, config: Optional[FlyoutConfig] = None):
        self.config = config or get_config().flyout
        self._panels: Dict[str, "Panel"] = {}
        self.logger = LoggerFactory.create_logger(ComponentType.REGISTRY, "PanelRegistry")

    def register(self, panel: "Panel") -> "Panel":
        """
        Register a panel under its id.

        Args:
            panel: Panel instance

        Returns:
            The panel (unchanged)
        """
        existing = self._panels.get(panel.id)
        if existing is not None and existing is not panel:
            self.logger.warning(
                f"Panel '{panel.id}' already registered "
                f"(prefix={existing.action_prefix!r}), overwriting "
                f"(prefix={panel.action_prefix!r})"
            )
            # Keep registration order stable for the replaced id
            self._panels.pop(panel.id)

        self._panels[panel.id] = panel
        self.logger.debug(f"Registered panel: '{panel.id}'")
        return panel

    def get(self, panel_id: str) -> Optional["Panel"]:
        """
        Get panel by id.

        Returns:
            Panel or None if not registered
        """
        return self._panels.get(panel_id)

    def has(self, panel_id: str) -> bool:
        return panel_id in self._panels

    def ids(self) -> List[str]:
        """Registered panel ids in registration order."""
        return list(self._panels.keys())

    def panels(self) -> List["Panel"]:
        return list(self._panels.values())

    def clear(self) -> None:
        self._panels.clear()

    def __len__(self) -> int:
        return len(self._panels)

    def __contains__(self, panel_id: object) -> bool:
        return panel_id in self._panels

    def __iter__(self) -> Iterator["Panel"]:
        return iter(list(self._panels.values()))

    # ------------------------------------------------------------------
    # Client bootstrap
    # ------------------------------------------------------------------

    def build_client_config(self, token_issuer: TokenIssuer) -> Dict[str, PanelClientConfig]:
        """
        Client config for every panel with an action prefix.

        Args:
            token_issuer: Issues the per-prefix token

        Returns:
            Mapping panel id -> PanelClientConfig
        """
        configs: Dict[str, PanelClientConfig] = {}
        for panel in self._panels.values():
            if not panel.action_prefix:
                continue
            configs[panel.id] = panel.client_config(token_issuer.issue(panel.action_prefix))
        return configs

    def build_bootstrap(self, token_issuer: TokenIssuer, messages=None) -> ClientBootstrap:
        """
        Page-level bundle: endpoint, per-panel config and i18n strings.

        Args:
            token_issuer: Issues the per-prefix token
            messages: Optional ClientMessages override (defaults to config)
        """
        if messages is None:
            messages = get_config().client.messages
        return ClientBootstrap(
            ajax_url=self.config.ajax_url,
            flyouts=self.build_client_config(token_issuer),
            i18n=messages,
        )
