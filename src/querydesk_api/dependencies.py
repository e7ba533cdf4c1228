from fastapi import Request

from querydesk_api.container import Container
from querydesk_api.services import WarehouseService, ClusterService, HealthService


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_warehouse_service(request: Request) -> WarehouseService:
    return get_container(request).warehouse


def get_cluster_service(request: Request) -> ClusterService:
    return get_container(request).cluster


def get_health_service(request: Request) -> HealthService:
    return get_container(request).health
