"""Product schemas for API requests and responses."""
from datetime import datetime
from typing import Annotated, Any, Optional

from bson import ObjectId
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from suq.models.product import OBJECT_ID_PATTERN, ProductStatus
from suq.schemas.auth import UserResponse

_http_url = TypeAdapter(HttpUrl)


def _object_id_to_str(value: Any) -> Any:
    return str(value) if isinstance(value, ObjectId) else value


ObjectIdStr = Annotated[str, BeforeValidator(_object_id_to_str)]
SellerId = Annotated[
    str, BeforeValidator(_object_id_to_str), Field(pattern=OBJECT_ID_PATTERN)
]


def _check_image_urls(images: Optional[list[str]]) -> Optional[list[str]]:
    # Validate as http(s) URLs but keep the caller's spelling
    for url in images or []:
        try:
            _http_url.validate_python(url)
        except PydanticValidationError:
            raise ValueError(f"Invalid image URL: {url}") from None
    return images


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        use_enum_values=True,
        str_strip_whitespace=True,
    )


class ProductCreate(_RequestModel):
    """Schema for creating a new product."""

    name: str = Field(..., min_length=1, max_length=100, description="Product name")
    description: Optional[str] = Field(None, max_length=1000)
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Price, zero allowed")
    images: list[str] = Field(..., min_length=1, description="Image URLs, at least one")
    seller_id: SellerId
    status: Optional[ProductStatus] = None
    category: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=100)

    @field_validator("images")
    @classmethod
    def check_images(cls, images):
        return _check_image_urls(images)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ProductUpdate(_RequestModel):
    """Schema for updating a product (all fields optional, nulls ignored)."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    images: Optional[list[str]] = Field(None, min_length=1)
    seller_id: Optional[SellerId] = None
    status: Optional[ProductStatus] = None
    category: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=100)

    @field_validator("images")
    @classmethod
    def check_images(cls, images):
        return _check_image_urls(images)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ProductResponse(BaseModel):
    """Schema for product responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: ObjectIdStr = Field(..., alias="_id")
    name: str
    description: Optional[str] = None
    price: float
    images: list[str] = []
    seller_id: ObjectIdStr
    status: ProductStatus = ProductStatus.AVAILABLE
    category: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class DiscoverResponse(BaseModel):
    """Home page discovery feed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    new_arrivals: list[ProductResponse]
    top_ranked: list[ProductResponse]
    top_sellers: list[ProductResponse]


class SalesStats(BaseModel):
    """Counts and revenue over a seller's sales."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sold_count: int
    reserved_count: int
    revenue: float


class OrderSummaryResponse(BaseModel):
    """A seller's reserved and sold listings."""

    sales: list[ProductResponse]
    stats: SalesStats


class SellerDashboardResponse(BaseModel):
    """The signed-in seller and their listings."""

    user: UserResponse
    products: list[ProductResponse]
