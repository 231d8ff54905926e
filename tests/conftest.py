import copy

import pytest

from ogp_verify.core.models import VerificationResponse


def _preview(platform, max_title_len, max_desc_len):
    return {
        "platform": platform,
        "title": "Test Title",
        "description": "Test Description",
        "image": "https://example.com/image.jpg",
        "is_valid": True,
        "warnings": [],
        "title_length": 10,
        "desc_length": 16,
        "max_title_len": max_title_len,
        "max_desc_len": max_desc_len,
    }


SAMPLE_PAYLOAD = {
    "url": "https://example.com",
    "ogp_data": {
        "title": "Test Title",
        "description": "Test Description",
        "image": "https://example.com/image.jpg",
        "url": "https://example.com",
        "type": "website",
        "site_name": "Test Site",
        "image_width": "1200",
        "image_height": "630",
        "image_alt": "Test Image",
    },
    "validation": {
        "is_valid": True,
        "warnings": [],
        "errors": [],
        "checks": {
            "has_title": True,
            "has_description": True,
            "has_image": True,
            "image_valid": True,
            "url_valid": True,
        },
    },
    "previews": {
        "twitter": _preview("twitter", 70, 200),
        "facebook": _preview("facebook", 100, 300),
        "discord": _preview("discord", 256, 2048),
    },
    "timestamp": "2024-01-01T00:00:00Z",
}


@pytest.fixture
def sample_payload():
    """A complete verification result as the server would send it."""
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def sample_response(sample_payload):
    return VerificationResponse.model_validate(sample_payload)
