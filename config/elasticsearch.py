from __future__ import annotations

"""
Elasticsearch Connection Configuration

Define the search clusters the application connects to. Each connection
names its servers, the default index for queries built on it, and whether
outgoing queries are reported as Sentry breadcrumbs.
"""

import os
from typing import Dict, Any


# Connection used when a model or caller does not name one
DEFAULT_CONNECTION = os.getenv('ELASTICSEARCH_CONNECTION', 'default')

CONNECTIONS: Dict[str, Dict[str, Any]] = {
    'default': {
        'servers': os.getenv('ELASTICSEARCH_HOSTS', 'http://localhost:9200').split(','),
        'index': os.getenv('ELASTICSEARCH_INDEX'),
        'api_key': os.getenv('ELASTICSEARCH_API_KEY'),
        'cloud_id': os.getenv('ELASTICSEARCH_CLOUD_ID'),
        'verify_certs': os.getenv('ELASTICSEARCH_VERIFY_CERTS', 'true').lower() == 'true',
        'timeout': int(os.getenv('ELASTICSEARCH_TIMEOUT', '30')),
        'report_queries': os.getenv('ELASTICSEARCH_REPORT_QUERIES', 'true').lower() == 'true',
        'logging': {
            'enabled': os.getenv('ELASTICSEARCH_LOGGING_ENABLED', 'false').lower() == 'true',
            'channel': os.getenv('ELASTICSEARCH_LOGGING_CHANNEL', 'elasticsearch'),
            'level': os.getenv('ELASTICSEARCH_LOGGING_LEVEL', 'info'),
        },
    },
}
