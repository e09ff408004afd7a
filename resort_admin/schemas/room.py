from pydantic import BaseModel, ConfigDict, Field, StrictBool


class RoomCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    room_number: str = Field(..., alias="roomNumber", min_length=1, max_length=20)
    capacity: int = Field(..., ge=1)
    price: float = Field(..., gt=0)
    amenities: list[str] = Field(default_factory=list)
    image_paths: list[str] = Field(default_factory=list, alias="imagePaths")
    panoramic_image_path: str | None = Field(default=None, alias="panoramicImagePath")


class RoomUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, min_length=1, max_length=100)
    room_number: str | None = Field(default=None, alias="roomNumber", min_length=1, max_length=20)
    capacity: int | None = Field(default=None, ge=1)
    price: float | None = Field(default=None, gt=0)
    amenities: list[str] | None = None
    image_paths: list[str] | None = Field(default=None, alias="imagePaths")
    panoramic_image_path: str | None = Field(default=None, alias="panoramicImagePath")
    is_active: StrictBool | None = Field(default=None, alias="isActive")
