"""
Users Store Factory following Black Box Design principles.

This factory:
- Constructs the users store based on configuration
- Wires the hasher and watcher together
- Returns only the store (hiding implementation)
"""

import logging
from typing import Optional

from .config.provider import ConfigProvider
from .modules.hasher import get_hasher
from .modules.users import FileUserPasswdStore
from .modules.users.listeners import RefreshListener
from .modules.watcher import WatcherService

logger = logging.getLogger(__name__)


class StoreFactory:
    """
    Factory for building the users store.

    This is the composition root that:
    - Creates the hasher and watcher
    - Wires them together via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        watcher_service: Optional[WatcherService] = None,
        listener: Optional[RefreshListener] = None,
    ) -> FileUserPasswdStore:
        """
        Build the users store.

        Args:
            config_provider: Configuration provider
            watcher_service: Optional running watcher service to reuse
            listener: Optional refresh listener

        Returns:
            FileUserPasswdStore ready to verify passwords

        Raises:
            ValueError: If the configured hasher is unknown
            FatalLoadError: If the users file cannot be read
            FatalParseError: If the users file is inconsistent
        """
        store_config = config_provider.get_store_config()
        hasher = get_hasher(store_config.hasher)

        if not store_config.watch:
            logger.info(f"Building users store for {store_config.users_file} without file watching")
            return FileUserPasswdStore(store_config.users_file, hasher=hasher, listener=listener)

        owns_watcher_service = watcher_service is None
        if owns_watcher_service:
            watcher_service = WatcherService()
            watcher_service.start()

        logger.info(f"Building users store for {store_config.users_file} with file watching")
        try:
            return FileUserPasswdStore(
                store_config.users_file,
                hasher=hasher,
                listener=listener,
                watcher_service=watcher_service,
                owns_watcher_service=owns_watcher_service,
            )
        except Exception:
            if owns_watcher_service:
                watcher_service.stop()
            raise
