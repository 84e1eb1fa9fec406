"""Tests for CSV export."""

import csv
import io
from datetime import date

from hub.reporting.export import (
    ANALYTICS_HEADERS,
    channel_columns,
    export_analytics_csv,
    export_channel_csv,
    export_filename,
)


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


class TestAnalyticsExport:
    def test_empty_input(self):
        assert export_analytics_csv([]) == ""

    def test_header_plus_one_row_per_entry(self, widget_entries):
        text = export_analytics_csv(widget_entries)
        lines = text.split("\n")
        assert len(lines) == 3
        assert lines[0] == "Date,Channel,Product,Revenue/Value,Orders,Team Member"
        assert not text.endswith("\n")
        assert all(len(r) == len(ANALYTICS_HEADERS) for r in _rows(text))

    def test_row_values(self, widget_entries):
        rows = _rows(export_analytics_csv(widget_entries))
        assert rows[1] == ["2024-01-01", "sales-campaign", "Widget", "100", "2", ""]

    def test_orders_fall_back_to_leads_then_carts(self):
        rows = _rows(export_analytics_csv([
            {"date": "2024-01-01", "channel": "lead-generation", "product": "P", "leadsGenerated": 7, "value": 3},
            {"date": "2024-01-02", "channel": "abandoned-cart", "product": "P", "abandonedCarts": 4, "revenue": 9.5},
        ]))
        assert rows[1][3:5] == ["3", "7"]
        assert rows[2][3:5] == ["9.5", "4"]

    def test_missing_product_and_team_member_are_empty(self):
        rows = _rows(export_analytics_csv([{"date": "2024-01-01", "channel": "media-engagement", "value": 1}]))
        assert rows[1][2] == ""
        assert rows[1][5] == ""

    def test_commas_are_quoted(self):
        text = export_analytics_csv([
            {"date": "2024-01-01", "channel": "sales-campaign", "product": "Widget, Large", "orderValue": 5},
        ])
        assert '"Widget, Large"' in text
        assert _rows(text)[1][2] == "Widget, Large"


class TestChannelExport:
    def test_empty_input(self):
        assert export_channel_csv([]) == ""

    def test_dynamic_columns_from_first_entry(self):
        entries = [
            {"id": "1", "channel": "recurring-sales", "date": "2024-01-01", "product": "Plan",
             "teamMember": "Ann", "orders": 2, "revenue": 40, "createdAt": "x"},
            {"id": "2", "channel": "recurring-sales", "date": "2024-01-02", "product": "Plan",
             "orders": 1, "createdAt": "y"},
        ]
        assert channel_columns(entries) == ["orders", "revenue"]
        rows = _rows(export_channel_csv(entries))
        assert rows[0] == ["Date", "Product", "Team Member", "orders", "revenue"]
        assert rows[1] == ["2024-01-01", "Plan", "Ann", "2", "40"]
        assert rows[2] == ["2024-01-02", "Plan", "", "1", ""]

    def test_line_count(self, widget_entries):
        assert len(export_channel_csv(widget_entries).split("\n")) == len(widget_entries) + 1

    def test_zero_is_written(self):
        rows = _rows(export_channel_csv([{"date": "2024-01-01", "product": "P", "orders": 0.0}]))
        assert rows[1][3] == "0"


class TestExportFilename:
    def test_context_and_date(self):
        assert export_filename("analytics-report", today=date(2024, 3, 9)) == "analytics-report-2024-03-09.csv"
