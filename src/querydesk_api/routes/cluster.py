from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from typing import Annotated

from querydesk_api.dependencies import get_cluster_service
from querydesk_api.models.query import ExecuteRequest
from querydesk_api.models.response import ErrorResponse, SuccessResponse
from querydesk_api.services import ClusterService

router = APIRouter(prefix="/eks", tags=["eks"])

ClusterSvc = Annotated[ClusterService, Depends(get_cluster_service)]

RESPONSES = {
    200: {"model": SuccessResponse},
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _reply(result) -> JSONResponse:
    status_code, body = result
    return JSONResponse(status_code=status_code, content=body)


@router.get("/test-connection", responses=RESPONSES)
def test_connection(service: ClusterSvc):
    return _reply(service.test_connection())


@router.post("/execute", responses=RESPONSES)
def execute_query(payload: ExecuteRequest, service: ClusterSvc):
    return _reply(service.execute(payload.query, payload.queryType))


@router.get("/namespaces", responses=RESPONSES)
def list_namespaces(service: ClusterSvc):
    return _reply(service.namespaces())


@router.get("/namespaces/{namespace}/pods", responses=RESPONSES)
def list_namespace_pods(namespace: str, service: ClusterSvc):
    return _reply(service.namespace_pods(namespace))
