"""Tests for the channel form registry and entry validation."""

import pytest

from hub.lib.errors import ConfigError, UnknownChannelError, ValidationError
from hub.reporting.channels import (
    build_entry_record,
    channel_ids,
    get_channel,
    is_data_channel,
    load_yaml,
    registry_as_dict,
    validate_entry,
)


class TestRegistry:
    def test_channels_in_display_order(self):
        assert channel_ids() == [
            "sales-campaign",
            "recurring-sales",
            "lead-generation",
            "abandoned-cart",
            "media-engagement",
        ]

    def test_field_order(self):
        assert get_channel("sales-campaign").field_names == ["product", "orders", "orderValue"]
        assert get_channel("recurring-sales").field_names == ["product", "orders", "revenue", "teamMember"]

    def test_progress_fields(self):
        assert get_channel("sales-campaign").progress_field == "orderValue"
        assert get_channel("lead-generation").progress_field == "value"
        assert get_channel("media-engagement").progress_field == "value"

    def test_media_engagement_has_no_product(self):
        assert get_channel("media-engagement").get_field("product") is None

    def test_unknown_channel(self):
        assert not is_data_channel("analytics")
        with pytest.raises(UnknownChannelError) as exc:
            get_channel("analytics")
        assert exc.value.message == "Unknown channel: analytics"

    def test_registry_as_dict(self):
        channels = registry_as_dict()
        assert len(channels) == 5
        assert channels[0]["fields"][0] == {
            "name": "product", "label": "Product", "kind": "product-select",
            "required": True, "prefix": None, "suffix": None,
        }

    def test_load_yaml_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_yaml(tmp_path / "missing.yaml")

    def test_load_yaml_rejects_bad_progress_field(self, tmp_path):
        path = tmp_path / "forms.yaml"
        path.write_text(
            "channels:\n"
            "  - id: x\n"
            "    progress_field: revenue\n"
            "    fields:\n"
            "      - {name: orders, kind: number}\n"
        )
        with pytest.raises(ConfigError):
            load_yaml(path)

    def test_load_yaml_rejects_unknown_kind(self, tmp_path):
        path = tmp_path / "forms.yaml"
        path.write_text(
            "channels:\n"
            "  - id: x\n"
            "    progress_field: orders\n"
            "    fields:\n"
            "      - {name: orders, kind: slider}\n"
        )
        with pytest.raises(ConfigError):
            load_yaml(path)


class TestValidateEntry:
    def test_missing_field_names_its_label(self):
        with pytest.raises(ValidationError) as exc:
            validate_entry("sales-campaign", {"product": "Widget", "orders": 2, "date": "2024-01-01"})
        assert exc.value.message == "Order Value is required"
        assert exc.value.field == "orderValue"

    def test_missing_date(self):
        with pytest.raises(ValidationError) as exc:
            validate_entry("media-engagement", {"orders": 1, "value": 2})
        assert exc.value.message == "Date is required"

    def test_blank_string_is_missing(self):
        with pytest.raises(ValidationError):
            validate_entry("media-engagement", {"orders": " ", "value": 2, "date": "2024-01-01"})

    def test_zero_is_present(self):
        schema = validate_entry("media-engagement", {"orders": 0, "value": 0, "date": "2024-01-01"})
        assert schema.id == "media-engagement"

    def test_partial_checks_only_supplied_keys(self):
        validate_entry("sales-campaign", {"orders": 5}, partial=True)
        with pytest.raises(ValidationError):
            validate_entry("sales-campaign", {"orders": ""}, partial=True)
        with pytest.raises(ValidationError):
            validate_entry("sales-campaign", {"date": None}, partial=True)

    def test_unknown_channel(self):
        with pytest.raises(UnknownChannelError):
            validate_entry("nope", {})


class TestBuildEntryRecord:
    def test_full_record(self):
        record = build_entry_record("recurring-sales", {
            "date": "2024-01-01", "product": " Plan ", "orders": "3",
            "revenue": 40, "teamMember": "Ann",
        })
        assert record == {
            "channel": "recurring-sales", "date": "2024-01-01", "product": "Plan",
            "orders": 3.0, "revenue": 40.0, "teamMember": "Ann",
        }

    def test_unknown_keys_are_dropped(self):
        record = build_entry_record("media-engagement", {
            "date": "2024-01-01", "orders": 1, "value": 2, "product": "Widget", "bogus": "x",
        })
        assert "product" not in record
        assert "bogus" not in record

    def test_non_numeric_becomes_zero(self):
        record = build_entry_record("media-engagement", {"date": "2024-01-01", "orders": "abc", "value": 2})
        assert record["orders"] == 0.0

    def test_date_stored_zero_padded(self):
        record = build_entry_record("media-engagement", {"date": " 2024-02-01 ", "orders": 1, "value": 2})
        assert record["date"] == "2024-02-01"

    @pytest.mark.parametrize("value", ["2024-2-1", "2024-13-01", "yesterday"])
    def test_bad_date_rejected(self, value):
        with pytest.raises(ValidationError) as exc:
            build_entry_record("media-engagement", {"date": value, "orders": 1, "value": 2})
        assert exc.value.message == "Date must be YYYY-MM-DD"
        assert exc.value.field == "date"

    def test_partial_bad_date_rejected(self):
        with pytest.raises(ValidationError):
            build_entry_record("sales-campaign", {"date": "2024-1-5"}, partial=True)

    def test_partial_record_has_no_channel(self):
        record = build_entry_record("sales-campaign", {"orders": 9, "channel": "media-engagement"}, partial=True)
        assert record == {"orders": 9.0}
