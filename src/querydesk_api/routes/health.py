from fastapi import APIRouter, Depends
from typing import Annotated

from querydesk_api.dependencies import get_health_service
from querydesk_api.services import HealthService

router = APIRouter()

HealthSvc = Annotated[HealthService, Depends(get_health_service)]


@router.get("/health")
async def health_check(service: HealthSvc):
    return service.health_check()
