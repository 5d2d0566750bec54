"""
Service context for log lines.

Identifies which ticket-service replica wrote a line: ``name@env:instance``.
"""

import os
import socket
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'ticket-service')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostnames are short ids; fall back to pid for local runs
    instance = os.getenv('HOSTNAME') or socket.gethostname() or ''
    if not instance or deploy_env == 'local_dev':
        instance = str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance[:12]}'
