# apps/api/rest/root_routes.py
from fastapi import APIRouter, Request
from pydantic import BaseModel


class ServiceInfo(BaseModel):
    service: str
    version: str


router = APIRouter()


@router.get("/", response_model=ServiceInfo, summary="Service name and version")
async def service_info(request: Request):
    return ServiceInfo(service=request.app.title, version=request.app.version)
