"""
Service context extraction for logging.

Identifies the emitting process so interleaved logs from several
workers can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'food-ordering')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')

    # Container hostnames are the short container id under docker/k8s
    instance = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())

    return f'{service_name}@{deploy_env}:{instance}'
