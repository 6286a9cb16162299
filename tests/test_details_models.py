"""Tests for category-specific details validation."""

from datetime import datetime

import pytest

from backend.errors import BadRequestError
from backend.models.details_models import subcategory_fields, validate_details


class TestValidateDetails:
    def test_valid_crop_details(self):
        out = validate_details("Crops", "Grains & Cereals", {
            "cropType": "Maize",
            "quantity": "100",
            "unit": "bags",
            "pricePerUnit": 50000,
            "harvestDate": "2026-03-01T00:00:00Z",
            "organic": True,
        })
        assert out["quantity"] == 100.0
        assert out["harvestDate"] == datetime(2026, 3, 1)
        assert out["harvestDate"].tzinfo is None

    def test_blank_values_are_dropped(self):
        out = validate_details("Crops", "Root Crops", {
            "cropType": "Cassava", "quantity": 5, "unit": "bags", "pricePerUnit": 1000, "variety": "  ",
        })
        assert "variety" not in out

    def test_missing_required_field(self):
        with pytest.raises(BadRequestError) as exc:
            validate_details("Crops", "Vegetables", {"cropType": "Tomato", "unit": "crates", "pricePerUnit": 10})
        assert "quantity: required for Vegetables" in exc.value.extra["errors"]

    def test_field_not_used_by_subcategory(self):
        with pytest.raises(BadRequestError) as exc:
            validate_details("Crops", "Vegetables", {
                "cropType": "Tomato", "quantity": 1, "unit": "crates", "pricePerUnit": 10, "grade": "Grade A",
            })
        assert "grade: not used for Vegetables" in exc.value.extra["errors"]

    def test_unknown_key_rejected(self):
        with pytest.raises(BadRequestError):
            validate_details("Livestock", "Cattle", {"animalType": "Cow", "quantity": 2, "horsepower": 9})

    def test_enum_checked(self):
        with pytest.raises(BadRequestError):
            validate_details("Livestock", "Cattle", {"animalType": "Cow", "quantity": 2, "sex": "Unknown"})

    def test_non_positive_quantity(self):
        with pytest.raises(BadRequestError):
            validate_details("Agricultural Inputs", "Fertilizers", {"productName": "NPK", "quantity": 0, "unit": "kg"})

    def test_unknown_category(self):
        with pytest.raises(BadRequestError) as exc:
            validate_details("Minerals", "Gold", {})
        assert exc.value.message == "Invalid category"

    def test_service_coverage_from_comma_list(self):
        out = validate_details("Agricultural Services", "Land Preparation", {
            "serviceType": "Ploughing", "priceModel": "Per Acre", "coverage": "Masaka, Mpigi ,",
        })
        assert out["coverage"] == ["Masaka", "Mpigi"]


def test_subcategory_fields_lookup():
    rules = subcategory_fields("Equipment & Tools", "Tractors & Machinery")
    assert "yearOfManufacture" in rules["fields"]
    assert rules["required"] == ["equipmentType", "condition"]
    assert subcategory_fields("Crops", "Nope") == {"fields": [], "required": []}
