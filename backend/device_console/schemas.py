from pydantic import BaseModel, ConfigDict, Field


class DeviceSigninRequest(BaseModel):
    """Body sent by a device on every signin."""
    password: str | None = None
    hostname: str | None = None
    os: str | None = None
    arch: str | None = None
    cpu: str | None = None
    mac_address: str | None = None
    disk_serial: str | None = None
    system_uuid: str | None = None
    motherboard_serial: str | None = None
    cpu_id: str | None = None

    def identity(self) -> dict:
        return self.model_dump(exclude={"password"})


class DeviceSigninResponse(BaseModel):
    success: bool = True
    message: str
    device_id: int


class AdminLoginRequest(BaseModel):
    password: str | None = None


class AdminLoginResponse(BaseModel):
    token: str


class BlockDeviceRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device_id: int = Field(alias="deviceId")
    block: bool


class SuccessResponse(BaseModel):
    success: bool = True


class DeviceStats(BaseModel):
    total: int
    active: int
    blocked: int
