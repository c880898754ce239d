from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

from elasticsearch import Elasticsearch
from pydantic import BaseModel, Field

from larasearch.Cache.CacheStore import CacheStore
from larasearch.Connection import ClientInterface, Connection
from larasearch.Exceptions import ConnectionNotConfiguredException
from larasearch.Log.LogManager import get_log_manager


logger = logging.getLogger(__name__)


class LoggingConfig(BaseModel):
    """Transport logging settings of a connection."""
    
    enabled: bool = False
    channel: Optional[str] = None
    level: str = 'info'


class ConnectionConfig(BaseModel):
    """Validated settings of a single search connection."""
    
    servers: List[str] = Field(default_factory=lambda: ['http://localhost:9200'])
    index: Optional[str] = None
    api_key: Optional[str] = None
    cloud_id: Optional[str] = None
    verify_certs: bool = True
    timeout: int = 30
    report_queries: bool = True
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ClientFactory:
    """Creates Elasticsearch clients from connection settings."""
    
    TRANSPORT_LOGGER = 'elastic_transport'
    
    def create_client(self, config: ConnectionConfig) -> ClientInterface:
        """
        Build a client for the given connection settings.
        
        When transport logging is enabled, the client's transport logger is
        routed into the configured log channel.
        """
        params: Dict[str, Any] = {'request_timeout': config.timeout}
        
        if not config.verify_certs:
            params['verify_certs'] = False
        
        if config.cloud_id:
            params['cloud_id'] = config.cloud_id
        else:
            params['hosts'] = config.servers
        
        if config.api_key:
            params['api_key'] = config.api_key
        
        if config.logging.enabled:
            get_log_manager().route(self.TRANSPORT_LOGGER, config.logging.channel, config.logging.level)
        
        return Elasticsearch(**params)


class ConnectionManager:
    """
    Resolves named connections from configuration.
    
    Connections are created on first use and reused afterwards. All
    connections created by a manager share its cache store.
    
    Usage:
        manager = ConnectionManager({
            'default': 'default',
            'connections': {'default': {'servers': ['http://localhost:9200']}},
        })
        
        manager.connection().where('status', 'active').get()
    """
    
    def __init__(
        self,
        config: Dict[str, Any],
        client_factory: Optional[ClientFactory] = None,
        cache: Optional[CacheStore] = None
    ) -> None:
        self._config = config
        self._factory = client_factory or ClientFactory()
        self._cache = cache
        self._connections: Dict[str, Connection] = {}
    
    def connection(self, name: Optional[str] = None) -> Connection:
        """
        Get a connection instance.
        
        Args:
            name: Connection name, the default connection when omitted
            
        Raises:
            ConnectionNotConfiguredException: If the name is not configured
        """
        name = name or self.get_default_connection()
        
        if name not in self._connections:
            self._connections[name] = self._make_connection(name)
        
        return self._connections[name]
    
    def _make_connection(self, name: str) -> Connection:
        settings = self._config.get('connections', {}).get(name)
        
        if settings is None:
            raise ConnectionNotConfiguredException(name)
        
        config = ConnectionConfig.model_validate(settings)
        logger.debug(f"Creating Elasticsearch connection '{name}'")
        
        return Connection(
            self._factory.create_client(config),
            self._cache,
            config.index,
            config.report_queries
        )
    
    def get_default_connection(self) -> str:
        return self._config.get('default', 'default')
    
    def set_default_connection(self, name: str) -> None:
        self._config['default'] = name
    
    def purge(self, name: Optional[str] = None) -> None:
        """Forget a resolved connection so the next call recreates it."""
        self._connections.pop(name or self.get_default_connection(), None)
    
    def get_connections(self) -> Dict[str, Connection]:
        return dict(self._connections)


connection_manager_instance: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """Get the global connection manager, configured from ``config.elasticsearch``."""
    global connection_manager_instance
    if connection_manager_instance is None:
        from config import elasticsearch as elasticsearch_config
        
        connection_manager_instance = ConnectionManager({
            'default': elasticsearch_config.DEFAULT_CONNECTION,
            'connections': elasticsearch_config.CONNECTIONS,
        })
    return connection_manager_instance


def set_connection_manager(manager: Optional[ConnectionManager]) -> None:
    """Replace the global connection manager."""
    global connection_manager_instance
    connection_manager_instance = manager
