"""
Tests for GAQL composition and input validation.
"""

from datetime import date

import pytest

from gads_mcp.api.gaql import GaqlQuery, date_predicate, in_list, quote, validate_date, validate_id, validate_ids
from gads_mcp.errors import ValidationError


class TestDatePredicate:
    """Named date ranges."""

    def test_during_range(self):
        assert date_predicate("LAST_7_DAYS") == "segments.date DURING LAST_7_DAYS"

    def test_default_and_case(self):
        assert date_predicate(None) == "segments.date DURING LAST_30_DAYS"
        assert date_predicate("last_month") == "segments.date DURING LAST_MONTH"

    def test_custom_field(self):
        predicate = date_predicate("YESTERDAY", field="change_event.change_date_time")
        assert predicate == "change_event.change_date_time DURING YESTERDAY"

    def test_last_90_days_is_explicit_between(self):
        predicate = date_predicate("LAST_90_DAYS", today=date(2024, 4, 1))
        assert predicate == "segments.date BETWEEN '2024-01-02' AND '2024-03-31'"

    def test_all_time_has_no_predicate(self):
        assert date_predicate("ALL_TIME") is None

    def test_unknown_range(self):
        with pytest.raises(ValidationError, match="Invalid date range"):
            date_predicate("LAST_YEAR")


class TestValidation:
    """Identifiers and dates that end up inside queries."""

    def test_numeric_ids(self):
        assert validate_id("123") == "123"
        assert validate_id(456) == "456"
        assert validate_id(" 42 ") == "42"

    @pytest.mark.parametrize("value", ["12a", "1 OR 1=1", "", None, "-5"])
    def test_non_numeric_ids_rejected(self, value):
        with pytest.raises(ValidationError):
            validate_id(value, "campaignId")

    def test_id_list(self):
        assert validate_ids(["1", 2]) == ["1", "2"]
        with pytest.raises(ValidationError, match="must be a list"):
            validate_ids("1,2")

    def test_dates(self):
        assert validate_date("2024-02-29") == "2024-02-29"
        with pytest.raises(ValidationError, match="YYYY-MM-DD"):
            validate_date("02/29/2024")
        with pytest.raises(ValidationError, match="not a valid date"):
            validate_date("2023-02-29")

    def test_quote_escapes(self):
        assert quote("it's") == "'it\\'s'"
        assert quote("a\\b") == "'a\\\\b'"

    def test_in_list(self):
        assert in_list("campaign.id", ["1", "2"]) == "campaign.id IN (1, 2)"


class TestGaqlQuery:
    """SELECT assembly."""

    def test_full_query(self):
        query = (
            GaqlQuery("campaign", ["campaign.id", "campaign.name"])
            .where("campaign.status != 'REMOVED'")
            .where(None)
            .where("segments.date DURING LAST_7_DAYS")
            .order_by("campaign.name")
            .limit("10")
        )
        assert query.build() == (
            "SELECT\n"
            "    campaign.id,\n"
            "    campaign.name\n"
            "FROM campaign\n"
            "WHERE campaign.status != 'REMOVED'\n"
            "    AND segments.date DURING LAST_7_DAYS\n"
            "ORDER BY campaign.name\n"
            "LIMIT 10"
        )

    def test_minimal_query(self):
        assert str(GaqlQuery("customer", ["customer.id"])) == "SELECT\n    customer.id\nFROM customer"

    def test_bad_limit(self):
        with pytest.raises(ValidationError, match="positive"):
            GaqlQuery("campaign", ["campaign.id"]).limit(0)
        with pytest.raises(ValidationError, match="integer"):
            GaqlQuery("campaign", ["campaign.id"]).limit("ten")
