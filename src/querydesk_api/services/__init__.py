from .query import WarehouseService, ClusterService, to_http
from .health import HealthService


__all__ = [
    "WarehouseService",
    "ClusterService",
    "HealthService",
    "to_http",
]
