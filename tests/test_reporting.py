"""
Tests for reports, targeting, creative assets and advanced campaign types.
"""

import base64

import pytest

from gads_mcp.api.mutations import OperationKind
from gads_mcp.errors import DependencyCreationError, ValidationError
from gads_mcp.ops import advanced_campaigns, assets, reporting, targeting

CUSTOMER_ID = "123-456-7890"
CID = "1234567890"


def sent_operations(client, call=0):
    return client.mutate.call_args_list[call][0][1]


def last_query(client):
    return client.search_stream.call_args[0][1]


class TestReports:

    def test_search_terms_filters(self, client):
        reporting.get_search_term_report(client, CUSTOMER_ID, "LAST_7_DAYS", 10, ["1", "2"], 50)

        query = last_query(client)
        assert "segments.date DURING LAST_7_DAYS" in query
        assert "metrics.impressions >= 10" in query
        assert "campaign.id IN (1, 2)" in query
        assert query.endswith("LIMIT 50")

    def test_search_terms_default_limit(self, client):
        reporting.get_search_term_report(client, CUSTOMER_ID)
        assert last_query(client).endswith(f"LIMIT {reporting.DEFAULT_SEARCH_TERM_LIMIT}")

    def test_campaign_ids_validated(self, client):
        with pytest.raises(ValidationError):
            reporting.get_search_term_report(client, CUSTOMER_ID, campaign_ids=["1; DROP"])
        client.search_stream.assert_not_called()

    def test_demographics_has_both_views(self, client):
        report = reporting.get_demographic_report(client, CUSTOMER_ID)
        assert set(report) == {"ageRanges", "genders"}
        assert client.search_stream.call_count == 2

    def test_change_history_uses_change_time(self, client):
        reporting.get_change_history(client, CUSTOMER_ID)
        assert "change_event.change_date_time DURING LAST_7_DAYS" in last_query(client)

    @pytest.mark.parametrize("date_range", ["ALL_TIME", "LAST_90_DAYS", "LAST_MONTH", "NEXT_WEEK"])
    def test_change_history_needs_recent_range(self, client, date_range):
        with pytest.raises(ValidationError, match="change history"):
            reporting.get_change_history(client, CUSTOMER_ID, date_range)
        client.search_stream.assert_not_called()

    def test_click_view_single_day(self, client):
        reporting.get_click_view_report(client, CUSTOMER_ID, "2024-03-01")
        assert "segments.date = '2024-03-01'" in last_query(client)

    def test_click_view_bad_date(self, client):
        with pytest.raises(ValidationError):
            reporting.get_click_view_report(client, CUSTOMER_ID, "yesterday")

    def test_forecast(self, client):
        client.post.return_value = {"campaignForecastMetrics": {
            "impressions": 1200.0, "clicks": 60.0, "clickThroughRate": 0.05,
            "averageCpcMicros": "850000", "costMicros": "51000000", "conversions": 3.0,
        }}

        forecast = reporting.generate_forecast_metrics(
            client, CUSTOMER_ID, ["running shoes"], 2_000_000, "2024-05-01", "2024-05-31"
        )

        path, body = client.post.call_args[0]
        assert path == f"customers/{CID}:generateKeywordForecastMetrics"
        assert body["forecastPeriod"] == {"startDate": "2024-05-01", "endDate": "2024-05-31"}
        assert body["campaign"]["adGroups"][0]["biddableKeywords"] == [
            {"keyword": {"text": "running shoes", "matchType": "BROAD"}, "maxCpcBidMicros": 2_000_000},
        ]
        assert forecast["averageCpc"] == 0.85
        assert forecast["cost"] == 51.0

    def test_forecast_period_order(self, client):
        with pytest.raises(ValidationError, match="endDate"):
            reporting.generate_forecast_metrics(client, CUSTOMER_ID, ["x"], None, "2024-05-31", "2024-05-01")
        client.post.assert_not_called()


class TestTargeting:

    def test_location_targets(self, client, mutate_response):
        client.mutate.return_value = mutate_response(
            "campaignCriterionResult", f"customers/{CID}/campaignCriteria/5~2840"
        )

        targeting.add_location_targets(client, CUSTOMER_ID, "5", [{"locationId": "2840", "bidModifier": 1.1}])

        assert sent_operations(client)[0].payload == {
            "campaign": f"customers/{CID}/campaigns/5",
            "location": {"geoTargetConstant": "geoTargetConstants/2840"},
            "bidModifier": 1.1,
        }

    def test_location_bid_adjustment_resource(self, client):
        client.mutate.return_value = {"mutateOperationResponses": []}
        targeting.set_location_bid_adjustments(
            client, CUSTOMER_ID, [{"campaignId": "5", "locationId": "2840", "bidModifier": 0.9}]
        )
        assert sent_operations(client)[0].payload["resourceName"] == f"customers/{CID}/campaignCriteria/5~2840"

    def test_demographics_one_criterion_each(self, client):
        client.mutate.return_value = {"mutateOperationResponses": []}

        result = targeting.add_demographic_targets(
            client, CUSTOMER_ID, "3", [{"ageRange": "age_range_25_34", "gender": "FEMALE"}]
        )

        payloads = [op.payload for op in sent_operations(client)]
        assert payloads == [
            {"adGroup": f"customers/{CID}/adGroups/3", "ageRange": {"type": "AGE_RANGE_25_34"}},
            {"adGroup": f"customers/{CID}/adGroups/3", "gender": {"type": "FEMALE"}},
        ]
        assert len(result.items) == 2

    def test_invalid_gender(self, client):
        with pytest.raises(ValidationError, match="Invalid gender"):
            targeting.add_demographic_targets(client, CUSTOMER_ID, "3", [{"gender": "OTHER"}])

    def test_language_codes_resolved(self, client, mutate_response):
        client.search_stream.return_value = [
            {"languageConstant": {"code": "en", "resourceName": "languageConstants/1000"}},
        ]
        client.mutate.return_value = mutate_response(
            "campaignCriterionResult", f"customers/{CID}/campaignCriteria/5~1000"
        )

        targeting.manage_language_targets(client, CUSTOMER_ID, "5", ["EN"])

        assert "language_constant.code IN ('en')" in last_query(client)
        assert sent_operations(client)[0].payload["language"] == {"languageConstant": "languageConstants/1000"}

    def test_unknown_language_code(self, client):
        client.search_stream.return_value = []
        with pytest.raises(ValidationError, match="Unknown language codes"):
            targeting.manage_language_targets(client, CUSTOMER_ID, "5", ["xx"])
        client.mutate.assert_not_called()


class TestAssets:

    def test_image_upload(self, client, mutate_response):
        client.mutate.return_value = mutate_response("assetResult", f"customers/{CID}/assets/1")
        data = base64.b64encode(b"\x89PNG fake").decode()

        assert assets.upload_image_asset(client, CUSTOMER_ID, data, "Logo") == f"customers/{CID}/assets/1"
        assert sent_operations(client)[0].payload == {"name": "Logo", "type": "IMAGE", "imageAsset": {"data": data}}

    def test_image_not_base64(self, client):
        with pytest.raises(ValidationError, match="base64"):
            assets.upload_image_asset(client, CUSTOMER_ID, "not base64!", "Logo")

    def test_asset_group_paused(self, client, mutate_response):
        client.mutate.return_value = mutate_response("assetGroupResult", f"customers/{CID}/assetGroups/8")
        assets.create_asset_group(client, CUSTOMER_ID, "5", "Main", ["https://example.com"])
        assert sent_operations(client)[0].payload["status"] == "PAUSED"

    def test_structured_snippets(self, client, mutate_response):
        client.mutate.return_value = mutate_response("assetResult", f"customers/{CID}/assets/2")

        assets.create_structured_snippet_assets(
            client, CUSTOMER_ID, [{"header": "brands", "values": ["Acme", "Globex", "Initech"]}]
        )

        assert sent_operations(client)[0].payload == {
            "structuredSnippetAsset": {"header": "Brands", "values": ["Acme", "Globex", "Initech"]}
        }

    def test_snippet_needs_three_values(self, client):
        with pytest.raises(ValidationError, match="between 3 and 10"):
            assets.create_structured_snippet_assets(client, CUSTOMER_ID, [{"header": "BRANDS", "values": ["A", "B"]}])


class TestAdvancedCampaigns:
    """Same budget-then-campaign chain as standard campaigns."""

    def test_performance_max(self, client, mutate_response):
        client.mutate.side_effect = [
            mutate_response("campaignBudgetResult", f"customers/{CID}/campaignBudgets/1"),
            mutate_response("campaignResult", f"customers/{CID}/campaigns/2"),
        ]

        advanced_campaigns.create_performance_max_campaign(
            client, CUSTOMER_ID, "PMax", 20_000_000, "MAXIMIZE_CONVERSION_VALUE", target_roas=4
        )

        campaign = sent_operations(client, 1)[0].payload
        assert campaign["status"] == "PAUSED"
        assert campaign["advertisingChannelType"] == "PERFORMANCE_MAX"
        assert campaign["maximizeConversionValue"] == {"targetRoas": 4.0}

    def test_budget_failure_stops_chain(self, client):
        client.mutate.return_value = {"mutateOperationResponses": []}
        with pytest.raises(DependencyCreationError):
            advanced_campaigns.create_demand_gen_campaign(client, CUSTOMER_ID, "DG", 5_000_000)
        assert client.mutate.call_count == 1

    def test_app_campaign_store(self, client):
        with pytest.raises(ValidationError, match="appStore"):
            advanced_campaigns.create_app_campaign(client, CUSTOMER_ID, "App", "com.example", "AMAZON", 1_000_000)

    def test_smart_campaign_setting(self, client, mutate_response):
        client.mutate.side_effect = [
            mutate_response("campaignBudgetResult", f"customers/{CID}/campaignBudgets/1"),
            mutate_response("campaignResult", f"customers/{CID}/campaigns/2"),
            mutate_response("smartCampaignSettingResult", f"customers/{CID}/smartCampaignSettings/2"),
        ]

        advanced_campaigns.create_smart_campaign(
            client, CUSTOMER_ID, "Bakery", 3_000_000, "Main St Bakery", "https://bakery.example"
        )

        setting = sent_operations(client, 2)[0]
        assert setting.kind is OperationKind.SMART_CAMPAIGN_SETTING
        assert setting.payload["resourceName"] == f"customers/{CID}/smartCampaignSettings/2"
        assert setting.payload["advertisingLanguageCode"] == "en"

    def test_experiment_arms(self, client, mutate_response):
        experiment = f"customers/{CID}/experiments/11"
        client.mutate.side_effect = [
            mutate_response("experimentResult", experiment),
            mutate_response("experimentArmResult", f"{experiment}~1", f"{experiment}~2"),
        ]

        result = advanced_campaigns.create_campaign_experiment(client, CUSTOMER_ID, "Bids", "5", 30, "2024-06-01")

        assert result == experiment
        control, treatment = (op.payload for op in sent_operations(client, 1))
        assert control["trafficSplit"] == 70
        assert control["campaigns"] == [f"customers/{CID}/campaigns/5"]
        assert treatment["trafficSplit"] == 30

    def test_experiment_split_range(self, client):
        with pytest.raises(ValidationError, match="between 1 and 99"):
            advanced_campaigns.create_campaign_experiment(client, CUSTOMER_ID, "Bids", "5", 100)
        client.mutate.assert_not_called()
