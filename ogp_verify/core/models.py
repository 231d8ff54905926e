from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal


Platform = Literal["twitter", "facebook", "discord"]

# Display limits per platform: (label, max title length, max description length)
PLATFORM_LIMITS = {
    "twitter": ("Twitter", 70, 200),
    "facebook": ("Facebook", 100, 300),
    "discord": ("Discord", 256, 2048),
}


class VerificationRequest(BaseModel):
    url: str = Field(..., description="The URL of the page whose OGP tags should be verified.")


class OGPData(BaseModel):
    """Raw og:* tag values. An empty string means the tag was not found."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str = ""
    image: str = ""
    url: str = ""
    type: str = ""
    site_name: str = ""
    image_width: str = ""
    image_height: str = ""
    image_alt: str = ""


class ValidationChecks(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_title: bool
    has_description: bool
    has_image: bool
    image_valid: bool
    url_valid: bool


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool = Field(..., description="True only when errors is empty.")
    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    checks: ValidationChecks


class PlatformPreview(BaseModel):
    """How a page is displayed on one platform, after truncation."""
    model_config = ConfigDict(frozen=True)

    platform: Platform
    title: str
    description: str
    image: str
    is_valid: bool
    warnings: List[str] = Field(default_factory=list)
    title_length: int = Field(..., description="Length of the displayed title.")
    desc_length: int = Field(..., description="Length of the displayed description.")
    max_title_len: int
    max_desc_len: int


class PlatformPreviews(BaseModel):
    model_config = ConfigDict(frozen=True)

    twitter: PlatformPreview
    facebook: PlatformPreview
    discord: PlatformPreview


class VerificationResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="The URL that was verified.")
    ogp_data: OGPData
    validation: ValidationResult
    previews: PlatformPreviews
    timestamp: str = Field(..., description="ISO-8601 time the verification completed.")


class HealthStatus(BaseModel):
    status: str
    timestamp: str


def is_displayable(response: VerificationResponse) -> bool:
    """Every response that parsed can be rendered; there is no extra rule."""
    return True
