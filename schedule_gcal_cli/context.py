"""Shared CLI context with lazy-initialized dependencies."""

from schedule_gcal.config import SyncConfig
from schedule_gcal.models.settings import SyncSettings
from schedule_gcal.processing.reconciler import StateCallback
from schedule_gcal.service import ScheduleSyncService
from schedule_gcal.storage.settings_store import SettingsStore
from schedule_gcal.storage.vault import FileSystemVault


class CLIContext:
    """Shared context with lazy-initialized dependencies for CLI commands.

    Usage:
        ctx = CLIContext()
        async with ctx.build_service() as service:
            await service.sync_all()
    """

    def __init__(self, verbose: bool = False, quiet: bool = False):
        """Initialize CLI context.

        Args:
            verbose: If True, enable info logging
            quiet: If True, suppress non-error output
        """
        self.verbose = verbose
        self.quiet = quiet

        # Lazy-loaded dependencies
        self._config: SyncConfig | None = None
        self._store: SettingsStore | None = None
        self._vault: FileSystemVault | None = None

    @property
    def config(self) -> SyncConfig:
        """Get configuration (lazy-loaded)."""
        if self._config is None:
            self._config = SyncConfig.from_env()
        return self._config

    @property
    def store(self) -> SettingsStore:
        """Get settings store (lazy-loaded)."""
        if self._store is None:
            self._store = SettingsStore(self.config.settings_path)
        return self._store

    @property
    def vault(self) -> FileSystemVault:
        """Get document vault (lazy-loaded)."""
        if self._vault is None:
            self._vault = FileSystemVault(self.config.vault_dir)
        return self._vault

    def load_settings(self) -> SyncSettings:
        return self.store.load()

    def build_service(self, on_state: StateCallback | None = None) -> ScheduleSyncService:
        """Create a sync service; use it as an async context manager."""
        return ScheduleSyncService(
            self.store, self.vault, config=self.config, on_state=on_state
        )


# Global context instance (set by Typer callback)
_ctx: CLIContext | None = None


def get_context() -> CLIContext:
    """Get the current CLI context.

    Returns:
        The global CLI context instance

    Raises:
        RuntimeError: If context not initialized
    """
    if _ctx is None:
        raise RuntimeError("CLI context not initialized. This should not happen.")
    return _ctx


def set_context(ctx: CLIContext) -> None:
    """Set the global CLI context.

    Args:
        ctx: The CLI context instance to set
    """
    global _ctx
    _ctx = ctx
