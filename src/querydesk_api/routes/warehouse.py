from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from typing import Annotated

from querydesk_api.dependencies import get_warehouse_service
from querydesk_api.models.query import ExecuteRequest
from querydesk_api.models.response import ErrorResponse, SuccessResponse
from querydesk_api.services import WarehouseService

router = APIRouter(prefix="/snowflake", tags=["snowflake"])

WarehouseSvc = Annotated[WarehouseService, Depends(get_warehouse_service)]

RESPONSES = {
    200: {"model": SuccessResponse},
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _reply(result) -> JSONResponse:
    status_code, body = result
    return JSONResponse(status_code=status_code, content=body)


# Sync handlers: FastAPI runs them in its thread pool, keeping driver calls off the event loop.
@router.get("/test-connection", responses=RESPONSES)
def test_connection(service: WarehouseSvc):
    return _reply(service.test_connection())


@router.post("/execute", responses=RESPONSES)
def execute_query(payload: ExecuteRequest, service: WarehouseSvc):
    return _reply(service.execute(payload.query))


@router.get("/schemas", responses=RESPONSES)
def list_schemas(service: WarehouseSvc):
    return _reply(service.schemas())


@router.get("/tables", responses=RESPONSES)
def list_tables(service: WarehouseSvc):
    return _reply(service.tables())
