"""
Unit tests for the category data sources.

Each source talks to an httpx.MockTransport keyed by host (see the
recording_handler fixture), so these tests cover request shape and
response parsing without any network access.
"""

import asyncio
from datetime import date

import httpx
import pytest

from property_command.address import parse_address
from property_command.domain.models import (
    CrimeStats,
    Demographics,
    FloodZone,
    TaxAssessment,
    WalkScore,
    Zoning,
)
from property_command.sources import (
    AttomSalesSource,
    AttomTaxSource,
    CensusDemographicsSource,
    FbiCrimeSource,
    FemaFloodZoneSource,
    GreatSchoolsSource,
    MarketDataSource,
    PermitSource,
    RealtyMoleTaxSource,
    SourceNoDataError,
    SourceUnconfiguredError,
    SourceUpstreamError,
    ViolationSource,
    WalkScoreSource,
    ZoneomicsSource,
)
from property_command.sources.crime import compute_trend
from property_command.sources.demographics import find_place_row

BOSTON = parse_address("123 Main St, Boston, MA 02101")
CHICAGO = parse_address("1 Elm St, Chicago, IL 60601")

GEOCODER_HOST = "geocoding.geo.census.gov"
GEOCODE_MATCH = {
    "result": {"addressMatches": [{"coordinates": {"x": -71.05, "y": 42.36}}]},
}


def fetch(source, address=BOSTON):
    return asyncio.run(source.fetch(address))


class TestTaxSources:
    def test_realtymole_parses_first_record(self, mock_client, recording_handler):
        handler = recording_handler(
            {
                "realty-mole-property-api.p.rapidapi.com": [
                    {"assessedValue": 400000, "yearBuilt": 1920, "squareFootage": "1500"}
                ]
            }
        )

        assessment = fetch(RealtyMoleTaxSource(mock_client(handler), api_key="rm-key"))

        assert isinstance(assessment, TaxAssessment)
        assert assessment.assessed_value == 400000.0
        assert assessment.year_built == 1920
        assert assessment.square_footage == 1500
        (request,) = handler.requests
        assert request.headers["X-RapidAPI-Key"] == "rm-key"
        assert request.url.params["address"] == BOSTON.raw

    def test_realtymole_empty_result_is_no_data(self, mock_client, recording_handler):
        handler = recording_handler({"realty-mole-property-api.p.rapidapi.com": []})

        with pytest.raises(SourceNoDataError):
            fetch(RealtyMoleTaxSource(mock_client(handler), api_key="rm-key"))

    def test_attom_splits_address(self, mock_client, recording_handler):
        handler = recording_handler(
            {
                "api.gateway.attomdata.com": {
                    "property": [
                        {
                            "assessment": {"assessed": {"assdttlvalue": 300000}},
                            "summary": {"yearbuilt": 1950},
                        }
                    ]
                }
            }
        )

        assessment = fetch(AttomTaxSource(mock_client(handler), api_key="attom-key"))

        assert assessment.assessed_value == 300000.0
        assert assessment.year_built == 1950
        (request,) = handler.requests
        assert request.url.params["address1"] == "123 Main St"
        assert request.url.params["address2"] == "Boston, MA"
        assert request.headers["apikey"] == "attom-key"


class TestMarketSource:
    RENT_HOST = "api.rentspree.com"
    VALUE_HOST = "api.realtor.com"

    def test_no_keys_is_unconfigured(self, mock_client, recording_handler):
        handler = recording_handler({})

        with pytest.raises(SourceUnconfiguredError):
            fetch(MarketDataSource(mock_client(handler)))

        assert handler.requests == []

    def test_merges_both_halves(self, mock_client, recording_handler):
        handler = recording_handler(
            {
                self.RENT_HOST: {"estimate": {"monthlyRent": 2800}},
                self.VALUE_HOST: {
                    "properties": [
                        {
                            "price": 650000,
                            "comparables": [{"address": "125 Main St", "price": 640000}],
                        }
                    ]
                },
            }
        )
        source = MarketDataSource(
            mock_client(handler), rentspree_api_key="r", realtor_api_key="v"
        )

        market = fetch(source)

        assert market.estimated_value == 650000.0
        assert market.rent_estimate == 2800.0
        assert market.comparables[0].address == "125 Main St"

    def test_one_half_is_enough(self, mock_client, recording_handler):
        handler = recording_handler({self.RENT_HOST: {"estimate": {"monthlyRent": 1900}}})

        market = fetch(MarketDataSource(mock_client(handler), rentspree_api_key="r"))

        assert market.rent_estimate == 1900.0
        assert market.estimated_value is None

    def test_both_halves_failing_is_upstream(self, mock_client, recording_handler):
        handler = recording_handler({self.RENT_HOST: {}, self.VALUE_HOST: {}}, status_code=503)
        source = MarketDataSource(
            mock_client(handler), rentspree_api_key="r", realtor_api_key="v"
        )

        with pytest.raises(SourceUpstreamError, match="all market data APIs failed"):
            fetch(source)


class TestPermitSource:
    def test_city_dataset_needs_no_key(self, mock_client, recording_handler):
        handler = recording_handler(
            {
                "data.cityofchicago.org": [
                    {
                        "permit_": "100123",
                        "permit_type": "PERMIT - RENOVATION/ALTERATION",
                        "estimated_cost": "5000",
                        "issue_date": "2023-04-01T00:00:00.000",
                    }
                ]
            }
        )

        permits = fetch(PermitSource(mock_client(handler)), CHICAGO)

        assert permits[0].permit_number == "100123"
        assert permits[0].value == 5000.0
        assert permits[0].issue_date == date(2023, 4, 1)
        (request,) = handler.requests
        assert request.url.path == "/resource/ydr8-5enu.json"
        assert request.url.params["$q"] == "1 Elm St"

    def test_app_token_header(self, mock_client, recording_handler):
        handler = recording_handler({"data.cityofchicago.org": [{"permit_": "1"}]})

        fetch(PermitSource(mock_client(handler), app_token="tok"), CHICAGO)

        assert handler.requests[0].headers["X-App-Token"] == "tok"

    def test_other_cities_need_generic_key(self, mock_client, recording_handler):
        handler = recording_handler({})

        with pytest.raises(SourceUnconfiguredError, match="BUILDING_PERMITS_API_KEY"):
            fetch(PermitSource(mock_client(handler)))

        assert handler.requests == []

    def test_generic_api(self, mock_client, recording_handler):
        handler = recording_handler(
            {"api.buildingpermits.com": {"permits": [{"permitNumber": "B-7", "status": "Issued"}]}}
        )

        permits = fetch(PermitSource(mock_client(handler), api_key="bp"))

        assert permits[0].permit_number == "B-7"
        assert handler.requests[0].headers["Authorization"] == "Bearer bp"

    def test_no_rows_is_no_data(self, mock_client, recording_handler):
        handler = recording_handler({"data.cityofchicago.org": []})

        with pytest.raises(SourceNoDataError):
            fetch(PermitSource(mock_client(handler)), CHICAGO)


class TestViolationSource:
    def test_unsupported_city_is_no_data(self, mock_client, recording_handler):
        handler = recording_handler({})

        with pytest.raises(SourceNoDataError, match="Boston"):
            fetch(ViolationSource(mock_client(handler)))

        assert handler.requests == []

    def test_chicago_violations(self, mock_client, recording_handler):
        handler = recording_handler(
            {
                "data.cityofchicago.org": [
                    {
                        "id": "V1",
                        "violation_code": "CN190019",
                        "violation_status": "OPEN",
                        "violation_date": "2022-11-05T00:00:00.000",
                    }
                ]
            }
        )

        violations = fetch(ViolationSource(mock_client(handler)), CHICAGO)

        assert violations[0].violation_id == "V1"
        assert violations[0].status == "OPEN"
        assert violations[0].issue_date == date(2022, 11, 5)


class TestSalesSource:
    def test_sales_sorted_newest_first(self, mock_client, recording_handler):
        handler = recording_handler(
            {
                "api.gateway.attomdata.com": {
                    "property": [
                        {
                            "saleHistory": [
                                {"amount": {"saleamt": 300000}, "saleTransDate": "2015-06-01"},
                                {"amount": {"saleamt": 450000}, "saleTransDate": "2021-03-15"},
                                {"amount": {}},
                            ]
                        }
                    ]
                }
            }
        )

        sales = fetch(AttomSalesSource(mock_client(handler), api_key="attom-key"))

        assert [s.sale_price for s in sales] == [450000.0, 300000.0]
        assert handler.requests[0].url.path.endswith("/saleshistory/detail")

    def test_empty_history_is_no_data(self, mock_client, recording_handler):
        handler = recording_handler({"api.gateway.attomdata.com": {"property": []}})

        with pytest.raises(SourceNoDataError):
            fetch(AttomSalesSource(mock_client(handler), api_key="attom-key"))


class TestDemographicsSource:
    HEADER = ["NAME", "B19013_001E", "B25077_001E", "B01002_001E", "B01003_001E", "state", "place"]

    def test_matches_city_and_drops_sentinels(self, mock_client, recording_handler):
        rows = [
            self.HEADER,
            ["Abington CDP, Massachusetts", "90000", "400000", "40.1", "17000", "25", "00170"],
            ["Boston city, Massachusetts", "89212", "-666666666", "32.5", "675647", "25", "07000"],
        ]
        handler = recording_handler({"api.census.gov": rows})

        demographics = fetch(CensusDemographicsSource(mock_client(handler)))

        assert demographics == Demographics(
            place_name="Boston city, Massachusetts",
            median_household_income=89212,
            median_home_value=None,
            median_age=32.5,
            population=675647,
        )
        (request,) = handler.requests
        assert request.url.params["in"] == "state:25"
        assert "key" not in request.url.params

    def test_unknown_state_is_no_data(self, mock_client, recording_handler):
        handler = recording_handler({})

        with pytest.raises(SourceNoDataError, match="unknown state"):
            fetch(CensusDemographicsSource(mock_client(handler)), parse_address("1 A St, Town"))

        assert handler.requests == []

    def test_unmatched_city_is_no_data(self, mock_client, recording_handler):
        rows = [self.HEADER, ["Cambridge city, Massachusetts", "1", "2", "3", "4", "25", "1"]]
        handler = recording_handler({"api.census.gov": rows})

        with pytest.raises(SourceNoDataError, match="Boston"):
            fetch(CensusDemographicsSource(mock_client(handler)))

    def test_find_place_row_skips_header(self):
        rows = [["NAME"], ["Name city, State"]]

        assert find_place_row(rows, "name") == ["Name city, State"]
        assert find_place_row(rows, "") is None


class TestCrimeSource:
    def test_requests_lagged_year_range(self, mock_client, recording_handler):
        records = [
            {"year": 2021, "population": 1000000, "violent_crime": 3000, "property_crime": 10000},
            {"year": 2022, "population": 1000000, "violent_crime": 3500, "property_crime": 11000},
        ]
        handler = recording_handler({"api.usa.gov": {"results": records}})
        source = FbiCrimeSource(mock_client(handler), api_key="fbi", today=date(2024, 6, 1))

        stats = fetch(source)

        assert stats == CrimeStats(
            year=2022,
            crime_rate=1450.0,
            violent_crime_rate=350.0,
            property_crime_rate=1100.0,
            trend="increasing",
        )
        (request,) = handler.requests
        assert request.url.path.endswith("/MA/2018/2022")
        assert request.url.params["API_KEY"] == "fbi"

    def test_missing_state_is_no_data(self, mock_client, recording_handler):
        source = FbiCrimeSource(mock_client(recording_handler({})), api_key="fbi")

        with pytest.raises(SourceNoDataError):
            fetch(source, parse_address("1 A St, Town"))

    @pytest.mark.parametrize(
        "previous,latest,trend",
        [
            (None, 100.0, "stable"),
            (100.0, 103.0, "stable"),
            (100.0, 110.0, "increasing"),
            (100.0, 90.0, "decreasing"),
        ],
    )
    def test_compute_trend(self, previous, latest, trend):
        assert compute_trend(previous, latest) == trend


class TestWalkScoreSource:
    def test_score(self, mock_client, recording_handler):
        handler = recording_handler(
            {"api.walkscore.com": {"status": 1, "walkscore": 88, "description": "Very Walkable"}}
        )

        score = fetch(WalkScoreSource(mock_client(handler), api_key="ws"))

        assert score == WalkScore(score=88, description="Very Walkable")
        assert handler.requests[0].url.params["wsapikey"] == "ws"

    def test_api_status_failure_is_no_data(self, mock_client, recording_handler):
        handler = recording_handler({"api.walkscore.com": {"status": 40}})

        with pytest.raises(SourceNoDataError, match="status 40"):
            fetch(WalkScoreSource(mock_client(handler), api_key="ws"))


class TestGeocodedSources:
    def test_flood_zone_queries_geocoded_point(self, mock_client, recording_handler):
        handler = recording_handler(
            {
                GEOCODER_HOST: GEOCODE_MATCH,
                "hazards.fema.gov": {
                    "features": [{"attributes": {"FLD_ZONE": "AE", "ZONE_SUBTY": " "}}]
                },
            }
        )

        zone = fetch(FemaFloodZoneSource(mock_client(handler)))

        assert zone == FloodZone(zone="AE", subtype=None)
        geocode_request, flood_request = handler.requests
        assert geocode_request.url.params["address"] == BOSTON.raw
        assert flood_request.url.params["geometry"] == "-71.05,42.36"

    def test_ungeocodable_address_is_no_data(self, mock_client, recording_handler):
        handler = recording_handler({GEOCODER_HOST: {"result": {"addressMatches": []}}})

        with pytest.raises(SourceNoDataError, match="geocoded"):
            fetch(FemaFloodZoneSource(mock_client(handler)))

    def test_schools_sorted_by_distance(self, mock_client, recording_handler):
        handler = recording_handler(
            {
                GEOCODER_HOST: GEOCODE_MATCH,
                "gs-api.greatschools.org": {
                    "schools": [
                        {"name": "Far High", "level": "high", "distance": 3.2},
                        {"name": "No Distance"},
                        {"name": "Near Elementary", "rating": "8", "distance": 0.4},
                        {"rating": 5},
                    ]
                },
            }
        )

        schools = fetch(GreatSchoolsSource(mock_client(handler), api_key="gs"))

        assert [s.name for s in schools] == ["Near Elementary", "Far High", "No Distance"]
        assert schools[0].rating == 8
        assert handler.requests[-1].headers["x-api-key"] == "gs"

    def test_schools_key_checked_before_geocoding(self, mock_client, recording_handler):
        handler = recording_handler({GEOCODER_HOST: GEOCODE_MATCH})

        with pytest.raises(SourceUnconfiguredError):
            fetch(GreatSchoolsSource(mock_client(handler)))

        assert handler.requests == []


class TestZoningSource:
    def test_nested_zone_details(self, mock_client, recording_handler):
        handler = recording_handler(
            {
                "api.zoneomics.com": {
                    "data": {
                        "zone_details": {
                            "zone_code": "R-1",
                            "zone_name": "Single Family Residential",
                            "zone_type": "Residential",
                            "link": "",
                        }
                    }
                }
            }
        )

        zoning = fetch(ZoneomicsSource(mock_client(handler), api_key="z"))

        assert zoning == Zoning(
            code="R-1",
            description="Single Family Residential",
            extra={"zone_type": "Residential"},
        )

    def test_missing_zone_code_is_no_data(self, mock_client, recording_handler):
        handler = recording_handler({"api.zoneomics.com": {"data": {}}})

        with pytest.raises(SourceNoDataError):
            fetch(ZoneomicsSource(mock_client(handler), api_key="z"))


def test_upstream_error_status(mock_client):
    client = mock_client(lambda request: httpx.Response(502))

    with pytest.raises(SourceUpstreamError, match="HTTP 502"):
        fetch(ZoneomicsSource(client, api_key="z"))
