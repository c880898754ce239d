from __future__ import annotations

import os
from typing import Dict, Any

# Default logging channel
default = os.getenv('LOG_CHANNEL', 'stderr')

channels: Dict[str, Dict[str, Any]] = {
    'stderr': {
        'driver': 'stderr',
        'level': os.getenv('LOG_LEVEL', 'debug'),
        'formatter': 'laravel',
    },
    
    'single': {
        'driver': 'single',
        'path': 'storage/logs/larasearch.log',
        'level': os.getenv('LOG_LEVEL', 'debug'),
    },
    
    'daily': {
        'driver': 'daily',
        'path': 'storage/logs/larasearch.log',
        'level': os.getenv('LOG_LEVEL', 'debug'),
        'days': 14,
    },
    
    'json': {
        'driver': 'single',
        'path': 'storage/logs/json.log',
        'level': os.getenv('LOG_LEVEL', 'debug'),
        'formatter': 'json',
    },
    
    'elasticsearch': {
        'driver': 'daily',
        'path': 'storage/logs/elasticsearch.log',
        'level': os.getenv('ELASTICSEARCH_LOGGING_LEVEL', 'info'),
        'days': 7,
    },
}
