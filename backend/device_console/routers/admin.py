from fastapi import APIRouter, Depends

from ..auth import AccessGateway, get_gateway, get_registry, require_admin
from ..errors import error_response
from ..models import Device
from ..registry import DeviceRegistry
from ..schemas import (
    AdminLoginRequest,
    AdminLoginResponse,
    BlockDeviceRequest,
    DeviceStats,
    SuccessResponse,
)

router = APIRouter()


@router.post("/login", response_model=AdminLoginResponse)
def login(body: AdminLoginRequest, gateway: AccessGateway = Depends(get_gateway)):
    result = gateway.authorize_login(body.password)
    if not result.ok:
        return error_response(result)
    return AdminLoginResponse(token=result.value.session_token)


@router.get("/devices", response_model=list[Device], dependencies=[Depends(require_admin)])
def list_devices(search: str | None = None, status: str = "all",
                 registry: DeviceRegistry = Depends(get_registry)):
    result = registry.list_devices(search=search, status=status)
    if not result.ok:
        return error_response(result)
    return result.value


@router.post("/block-device", response_model=SuccessResponse, dependencies=[Depends(require_admin)])
def block_device(body: BlockDeviceRequest, registry: DeviceRegistry = Depends(get_registry)):
    result = registry.set_blocked(body.device_id, body.block)
    if not result.ok:
        return error_response(result)
    return SuccessResponse()


@router.get("/stats", response_model=DeviceStats, dependencies=[Depends(require_admin)])
def stats(registry: DeviceRegistry = Depends(get_registry)):
    result = registry.stats()
    if not result.ok:
        return error_response(result)
    return DeviceStats(**result.value)
