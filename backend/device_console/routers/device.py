from typing import Any

from fastapi import APIRouter, Body, Depends
from pydantic import ValidationError

from ..auth import AccessGateway, get_gateway, get_registry
from ..errors import ErrorKind, error_response
from ..registry import DeviceRegistry
from ..schemas import DeviceSigninRequest, DeviceSigninResponse

router = APIRouter()


@router.post("/signin", response_model=DeviceSigninResponse)
def signin(body: dict[str, Any] = Body(...),
           gateway: AccessGateway = Depends(get_gateway),
           registry: DeviceRegistry = Depends(get_registry)):
    # Mot de passe d'abord, sur le corps brut
    authorized = gateway.authorize_device(body.get("password"))
    if not authorized.ok:
        return error_response(authorized)

    try:
        request = DeviceSigninRequest.model_validate(body)
    except ValidationError:
        return error_response(ErrorKind.INVALID_REQUEST)

    resolved = registry.resolve_or_create(request.identity())
    if not resolved.ok:
        return error_response(resolved)

    device, created = resolved.value
    message = "New device registered and signed in" if created else "Device signin successful"
    return DeviceSigninResponse(message=message, device_id=device.id)
