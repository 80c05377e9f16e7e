import pytest

from product_gallery.schemas import ProductImageCreate, ProductImageReorder, ProductImageUpdate
from product_gallery.validation import format_validation_errors, validate_payload


def test_valid_create_payload():
    result = validate_payload(ProductImageCreate, {"productId": 9, "url": "https://x/a.jpg", "rotation": 180})

    assert result.ok is True
    assert result.value.product_id == 9
    assert result.value.rotation == 180
    assert result.value.model_fields_set == {"product_id", "url", "rotation"}


def test_snake_case_keys_are_accepted():
    result = validate_payload(ProductImageCreate, {"product_id": 9, "url": "https://x/a.jpg", "is_primary": True})

    assert result.ok is True
    assert result.value.is_primary is True


@pytest.mark.parametrize(
    "payload, field",
    [
        ({"productId": -1, "url": "https://x/a.jpg"}, "productId"),
        ({"productId": 9, "url": "/relative/a.jpg"}, "url"),
        ({"productId": 9, "url": "https://x/a.jpg", "height": -5}, "height"),
        ({"productId": 9, "url": "https://x/a.jpg", "rotation": 360}, "rotation"),
    ],
)
def test_invalid_create_payload(payload, field):
    result = validate_payload(ProductImageCreate, payload)

    assert result.ok is False
    assert [error["field"] for error in result.errors] == [field]


def test_update_has_no_product_id():
    result = validate_payload(ProductImageUpdate, {"url": "https://x/a.jpg", "productId": 3})

    assert result.ok is True
    assert not hasattr(result.value, "product_id")


def test_reorder_accepts_zero():
    result = validate_payload(ProductImageReorder, {"newOrder": 0})

    assert result.ok is True
    assert result.value.new_order == 0


def test_format_drops_request_location_prefix():
    details = format_validation_errors([
        {"loc": ("body", "url"), "msg": "Field required", "type": "missing"},
        {"loc": ("path", "image_id"), "msg": "Input should be greater than 0", "type": "greater_than"},
    ])

    assert details == [
        {"field": "url", "message": "Field required", "type": "missing"},
        {"field": "image_id", "message": "Input should be greater than 0", "type": "greater_than"},
    ]
