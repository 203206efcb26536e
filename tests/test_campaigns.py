"""
Tests for campaign, ad group, ad and keyword operations.
"""

import pytest

from gads_mcp.api.mutations import OperationKind
from gads_mcp.errors import DependencyCreationError, UpstreamApiError, ValidationError
from gads_mcp.ops import ad_groups, ads, campaigns, keywords

CUSTOMER_ID = "123-456-7890"
CID = "1234567890"


def sent_operations(client, call=0):
    """MutateOperation list passed to the n-th ``client.mutate`` call."""
    return client.mutate.call_args_list[call][0][1]


class TestCreateCampaign:
    """Budget first, then a PAUSED campaign that references it."""

    def test_budget_then_campaign(self, client, mutate_response):
        client.mutate.side_effect = [
            mutate_response("campaignBudgetResult", f"customers/{CID}/campaignBudgets/77"),
            mutate_response("campaignResult", f"customers/{CID}/campaigns/456"),
        ]

        campaign_id = campaigns.create_campaign(client, CUSTOMER_ID, "Spring Sale", "5000000", start_date="2024-03-01")

        assert campaign_id == "456"
        assert client.mutate.call_count == 2

        budget = sent_operations(client, 0)[0]
        assert budget.kind is OperationKind.CAMPAIGN_BUDGET
        assert budget.payload == {
            "name": "Spring Sale Budget",
            "amountMicros": 5_000_000,
            "deliveryMethod": "STANDARD",
            "explicitlyShared": False,
        }

        campaign = sent_operations(client, 1)[0]
        assert campaign.kind is OperationKind.CAMPAIGN
        assert campaign.payload["status"] == "PAUSED"
        assert campaign.payload["campaignBudget"] == f"customers/{CID}/campaignBudgets/77"
        assert campaign.payload["manualCpc"] == {}
        assert campaign.payload["startDate"] == "2024-03-01"

    def test_missing_budget_aborts_chain(self, client):
        client.mutate.return_value = {"mutateOperationResponses": [{}]}

        with pytest.raises(DependencyCreationError, match="campaign budget"):
            campaigns.create_campaign(client, CUSTOMER_ID, "Spring Sale", 5_000_000)

        assert client.mutate.call_count == 1

    def test_invalid_channel(self, client):
        with pytest.raises(ValidationError, match="advertisingChannelType"):
            campaigns.create_campaign(client, CUSTOMER_ID, "X", 1_000_000, "RADIO")
        client.mutate.assert_not_called()

    @pytest.mark.parametrize("amount", ["ten dollars", 5_000_000.7, True])
    def test_budget_micros_must_be_integer(self, client, amount):
        with pytest.raises(ValidationError, match="budgetAmountMicros must be an integer"):
            campaigns.create_campaign(client, CUSTOMER_ID, "X", amount)
        client.mutate.assert_not_called()

    def test_whole_float_micros_accepted(self, client, mutate_response):
        client.mutate.side_effect = [
            mutate_response("campaignBudgetResult", f"customers/{CID}/campaignBudgets/77"),
            mutate_response("campaignResult", f"customers/{CID}/campaigns/456"),
        ]
        campaigns.create_campaign(client, CUSTOMER_ID, "X", 5_000_000.0)
        assert sent_operations(client, 0)[0].payload["amountMicros"] == 5_000_000


class TestCampaignReads:

    def test_budget_in_currency(self, client):
        client.search_stream.return_value = [{
            "campaign": {"id": "1", "name": "Brand", "status": "ENABLED", "advertisingChannelType": "SEARCH"},
            "campaignBudget": {"amountMicros": "25000000"},
        }]

        records = campaigns.get_campaigns(client, CUSTOMER_ID)

        assert records[0]["budget"] == 25.0
        assert records[0]["name"] == "Brand"
        assert "campaign.status != 'REMOVED'" in client.search_stream.call_args[0][1]

    def test_performance_filters(self, client):
        campaigns.get_campaign_performance(client, CUSTOMER_ID, "99", "LAST_7_DAYS")

        query = client.search_stream.call_args[0][1]
        assert "segments.date DURING LAST_7_DAYS" in query
        assert "AND campaign.id = 99" in query

    def test_performance_rejects_bad_id(self, client):
        with pytest.raises(ValidationError):
            campaigns.get_campaign_performance(client, CUSTOMER_ID, "99 OR 1=1")
        client.search_stream.assert_not_called()


class TestUpdateCampaignStatus:

    def test_update_status(self, client, mutate_response):
        client.mutate.return_value = mutate_response("campaignResult", f"customers/{CID}/campaigns/5")

        campaigns.update_campaign_status(client, CUSTOMER_ID, "5", "enabled")

        op = sent_operations(client)[0]
        assert op.to_dict() == {
            "campaignOperation": {
                "update": {"resourceName": f"customers/{CID}/campaigns/5", "status": "ENABLED"},
                "updateMask": "status",
            }
        }

    def test_invalid_status(self, client):
        with pytest.raises(ValidationError, match="Invalid status"):
            campaigns.update_campaign_status(client, CUSTOMER_ID, "5", "ARCHIVED")

    def test_empty_response(self, client):
        client.mutate.return_value = {"mutateOperationResponses": []}
        with pytest.raises(UpstreamApiError):
            campaigns.update_campaign_status(client, CUSTOMER_ID, "5", "PAUSED")


class TestAdGroupsAndAds:

    def test_ad_group_paused(self, client, mutate_response):
        client.mutate.return_value = mutate_response("adGroupResult", f"customers/{CID}/adGroups/321")

        assert ad_groups.create_ad_group(client, CUSTOMER_ID, "5", "Shoes", 750_000) == "321"

        payload = sent_operations(client)[0].payload
        assert payload["status"] == "PAUSED"
        assert payload["campaign"] == f"customers/{CID}/campaigns/5"
        assert payload["cpcBidMicros"] == 750_000

    def test_responsive_search_ad(self, client, mutate_response):
        client.mutate.return_value = mutate_response("adGroupAdResult", f"customers/{CID}/adGroupAds/321~999")

        ad_id = ads.create_responsive_search_ad(
            client,
            CUSTOMER_ID,
            "321",
            ["Fast Shipping", "Great Prices", "Shop Today"],
            ["Everything you need.", "Free returns on all orders."],
            ["https://example.com"],
        )

        assert ad_id == "999"
        payload = sent_operations(client)[0].payload
        assert payload["status"] == "PAUSED"
        assert payload["ad"]["responsiveSearchAd"]["headlines"][0] == {"text": "Fast Shipping"}

    def test_too_few_headlines(self, client):
        with pytest.raises(ValidationError, match="headlines"):
            ads.create_responsive_search_ad(client, CUSTOMER_ID, "321", ["One", "Two"], ["a", "b"], ["https://x"])
        client.mutate.assert_not_called()

    def test_headline_too_long(self, client):
        with pytest.raises(ValidationError, match="30 characters"):
            ads.create_responsive_search_ad(
                client, CUSTOMER_ID, "321", ["x" * 31, "b", "c"], ["a", "b"], ["https://x"]
            )


class TestKeywords:
    """Bulk keyword writes report per-item outcomes."""

    def test_add_keywords_partial_failure(self, client, mutate_response):
        client.mutate.return_value = mutate_response(
            "adGroupCriterionResult",
            f"customers/{CID}/adGroupCriteria/321~1",
            None,
            failures={1: "Keyword has invalid characters."},
        )
        kws = [{"text": "running shoes", "matchType": "exact", "cpcBidMicros": "900000"}, {"text": "sh@es"}]

        result = keywords.add_keywords(client, CUSTOMER_ID, "321", kws)

        assert result.ids == ["321~1"]
        assert result.failed[0].error == "Keyword has invalid characters."
        assert client.mutate.call_args[1] == {"partial_failure": True}

        first, second = (op.payload for op in sent_operations(client))
        assert first["keyword"] == {"text": "running shoes", "matchType": "EXACT"}
        assert first["cpcBidMicros"] == 900_000
        assert second["keyword"]["matchType"] == "BROAD"
        assert "cpcBidMicros" not in second

    def test_middle_keyword_rejected(self, client, mutate_response):
        client.mutate.return_value = mutate_response(
            "adGroupCriterionResult",
            f"customers/{CID}/adGroupCriteria/321~1",
            None,
            f"customers/{CID}/adGroupCriteria/321~3",
            failures={1: "Keyword text is too long."},
        )
        kws = [{"text": "boots"}, {"text": "x" * 90}, {"text": "sandals"}]

        result = keywords.add_keywords(client, CUSTOMER_ID, "321", kws)

        assert len(sent_operations(client)) == 3
        assert result.ids == ["321~1", "321~3"]
        assert [(i.index, i.error) for i in result.failed] == [(1, "Keyword text is too long.")]
        assert result.summary("keywords", verb="Added") == (
            "Added 2 keywords successfully\n1 of 3 failed:\n  - item 1: Keyword text is too long."
        )

    def test_invalid_match_type(self, client):
        with pytest.raises(ValidationError, match="matchType"):
            keywords.add_keywords(client, CUSTOMER_ID, "321", [{"text": "a", "matchType": "FUZZY"}])

    def test_negative_keywords(self, client, mutate_response):
        client.mutate.return_value = mutate_response("adGroupCriterionResult", f"customers/{CID}/adGroupCriteria/321~2")

        result = keywords.add_negative_keywords(client, CUSTOMER_ID, "321", ["free"])

        assert result.summary("negative keywords", verb="Added") == "Added 1 negative keywords successfully"
        payload = sent_operations(client)[0].payload
        assert payload["negative"] is True
        assert payload["keyword"] == {"text": "free", "matchType": "BROAD"}

    def test_negative_keywords_must_be_strings(self, client):
        with pytest.raises(ValidationError):
            keywords.add_negative_keywords(client, CUSTOMER_ID, "321", [{"text": "free"}])

    def test_empty_keyword_list(self, client):
        with pytest.raises(ValidationError, match="at least 1"):
            keywords.add_keywords(client, CUSTOMER_ID, "321", [])

    def test_keyword_read_filters_by_ad_group(self, client):
        keywords.get_keywords(client, CUSTOMER_ID, "321")
        query = client.search_stream.call_args[0][1]
        assert f"ad_group_criterion.ad_group = 'customers/{CID}/adGroups/321'" in query
