from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Protocol, Union
import json
import logging

from larasearch.Cache.CacheStore import CacheStore
from larasearch.Query.Builder import Builder
from larasearch.Reporting.QueryReporter import QueryReporter, SentryQueryReporter
from larasearch.Scopes.Scope import GlobalScope
from larasearch.Scopes.NamedScopeResolver import ScopeSelector


logger = logging.getLogger(__name__)


class ClientInterface(Protocol):
    """The subset of the Elasticsearch client used by a connection."""
    
    def search(self, **kwargs: Any) -> Any: ...
    
    def count(self, **kwargs: Any) -> Any: ...
    
    def index(self, **kwargs: Any) -> Any: ...


class Connection:
    """
    A search cluster connection.
    
    Binds an Elasticsearch client, an optional cache store and a default
    index, and creates query builders for them. The client and the cache
    are injected and may be shared between connections.
    
    Common builder methods are available directly on the connection; each
    call starts a new query:
    
        connection.where('status', 'active').take(5).get()
    """
    
    QUERY_CATEGORY = 'search.query'
    
    def __init__(
        self,
        client: ClientInterface,
        cache: Optional[CacheStore] = None,
        index: Optional[str] = None,
        report_queries: bool = True,
        reporter: Optional[QueryReporter] = None
    ) -> None:
        self.client = client
        self.cache = cache
        self.index_name = index
        self.report_queries = report_queries
        self.reporter: QueryReporter = reporter or SentryQueryReporter()
    
    def get_client(self) -> ClientInterface:
        return self.client
    
    def get_cache(self) -> Optional[CacheStore]:
        return self.cache
    
    def get_index(self) -> Optional[str]:
        return self.index_name
    
    def new_query(self) -> Builder:
        """
        Create a new query builder on this connection.
        
        Returns:
            Builder preset with the connection's default index
        """
        return Builder(self).index(self.index_name)
    
    # Client calls
    
    def search(self, index: Optional[str], body: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send a search request.
        
        Args:
            index: Index to search, the default index when None
            body: Request body
            
        Returns:
            The raw search response
        """
        index = index or self.index_name
        self._before_request(index, body)
        return self._body(self.client.search(index=index, body=body))
    
    def count(self, index: Optional[str], body: Dict[str, Any]) -> Dict[str, Any]:
        """Send a count request."""
        index = index or self.index_name
        self._before_request(index, body)
        return self._body(self.client.count(index=index, body=body))
    
    def insert(self, document: Dict[str, Any], index: Optional[str] = None, id: Optional[str] = None) -> Dict[str, Any]:
        """
        Index a single document.
        
        Args:
            document: Document source
            index: Target index, the default index when None
            id: Document ID; generated by the cluster when omitted
        """
        index = index or self.index_name
        self._before_request(index, document)
        return self._body(self.client.index(index=index, document=document, id=id))
    
    def _before_request(self, index: Optional[str], body: Dict[str, Any]) -> None:
        logger.debug(f"Sending request to index '{index}'")
        
        if self.report_queries:
            self.report_query(body)
    
    @staticmethod
    def _body(response: Any) -> Dict[str, Any]:
        return getattr(response, 'body', response)
    
    def report_query(self, query: Dict[str, Any]) -> None:
        """
        Report an outgoing request body to the observability side channel.
        
        Reporting is best effort: serialization or transport failures are
        logged and never interrupt the request.
        """
        try:
            data = json.loads(json.dumps(query))
            self.reporter.report(self.QUERY_CATEGORY, data)
        except Exception as e:
            logger.debug(f"Failed to report search query: {e}")
    
    # Builder forwarding
    
    def index(self, index: str) -> Builder:
        return self.new_query().index(index)
    
    def where(self, field: str, value: Any) -> Builder:
        return self.new_query().where(field, value)
    
    def where_in(self, field: str, values: Iterable[Any]) -> Builder:
        return self.new_query().where_in(field, values)
    
    def where_not(self, field: str, value: Any) -> Builder:
        return self.new_query().where_not(field, value)
    
    def where_between(self, field: str, start: Any = None, end: Any = None) -> Builder:
        return self.new_query().where_between(field, start, end)
    
    def where_exists(self, field: str) -> Builder:
        return self.new_query().where_exists(field)
    
    def where_missing(self, field: str) -> Builder:
        return self.new_query().where_missing(field)
    
    def order_by(self, field: str, direction: str = 'asc') -> Builder:
        return self.new_query().order_by(field, direction)
    
    def take(self, limit: int) -> Builder:
        return self.new_query().take(limit)
    
    def skip(self, offset: int) -> Builder:
        return self.new_query().skip(offset)
    
    def scopes(self, scopes: ScopeSelector) -> Builder:
        return self.new_query().scopes(scopes)
    
    def with_global_scope(self, identifier: str, scope: GlobalScope) -> Builder:
        return self.new_query().with_global_scope(identifier, scope)
    
    def without_global_scope(self, scope: Union[str, Any]) -> Builder:
        return self.new_query().without_global_scope(scope)
    
    def without_global_scopes(self, scopes: Optional[Iterable[Union[str, Any]]] = None) -> Builder:
        return self.new_query().without_global_scopes(scopes)
    
    def get(self) -> Any:
        return self.new_query().get()
    
    def first(self) -> Any:
        return self.new_query().first()
    
    def __repr__(self) -> str:
        return f"<Connection(index={self.index_name!r}, report_queries={self.report_queries})>"
