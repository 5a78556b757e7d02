"""
Domain Definitions

Each domain module contains the environments and endpoints of one API.
This isolation keeps adding or removing an API a single-file operation.

To add a new domain:
1. Create domains/newdomain.py with NEWDOMAIN_ENVIRONMENT and NEWDOMAIN_ENDPOINTS
2. Export it here
"""

from .jsonplaceholder import (
    JSONPLACEHOLDER_ENDPOINTS,
    JSONPLACEHOLDER_ENVIRONMENT,
    create_jsonplaceholder_client,
    create_jsonplaceholder_configuration,
)

__all__ = [
    "JSONPLACEHOLDER_ENDPOINTS",
    "JSONPLACEHOLDER_ENVIRONMENT",
    "create_jsonplaceholder_client",
    "create_jsonplaceholder_configuration",
]
