"""Tests for turning raw ads into listings."""

import pytest

from immo_watch.models.listing import PRICE_ON_REQUEST, AdRecord
from immo_watch.scrapers.willhaben import compose_location, format_price, parse_listing


class TestFormatPrice:
    @pytest.mark.parametrize("text, expected", [
        ("349000", "€ 349,000.00"),
        ("1234567.5", "€ 1,234,567.50"),
        ("950", "€ 950.00"),
        (" 1200 ", "€ 1,200.00"),
        ("349,000", "€ 349,000.00"),
        ("1,234,567.50", "€ 1,234,567.50"),
    ])
    def test_numbers(self, text, expected):
        assert format_price(text) == expected

    def test_empty(self):
        assert format_price(None) is None
        assert format_price("") is None

    @pytest.mark.parametrize("text", ["auf Anfrage", "12.000,00", "nan", "1_000", ","])
    def test_unparseable_text_returned_unchanged(self, text):
        assert format_price(text) == text


class TestComposeLocation:
    def test_full_address(self, make_ad):
        ad = AdRecord(make_ad({"ADDRESS": "Hauptstr. 1", "POSTCODE": "1010", "LOCATION": "Wien"}))
        assert compose_location(ad) == "Hauptstr. 1, 1010 Wien"

    def test_area_only(self, make_ad):
        ad = AdRecord(make_ad({"LOCATION": "Wien"}))
        assert compose_location(ad) == "Wien"

    def test_empty_address_falls_back_to_area(self, make_ad):
        ad = AdRecord(make_ad({"ADDRESS": "", "POSTCODE": "1010", "LOCATION": "Wien"}))
        assert compose_location(ad) == "Wien"

    def test_address_without_area_is_trimmed(self, make_ad):
        ad = AdRecord(make_ad({"ADDRESS": "Hauptstr. 1", "POSTCODE": "1010"}))
        assert compose_location(ad) == "Hauptstr. 1, 1010"

    def test_nothing(self, make_ad):
        assert compose_location(AdRecord(make_ad({}))) == ""


class TestParseListing:
    """Tests for parse_listing."""

    def test_full_record(self, make_ad):
        ad = AdRecord(make_ad({
            "ADID": "987654321",
            "HEADING": "Sonnige 3-Zimmer-Wohnung",
            "PRICE_FOR_DISPLAY": "€ 349.000",
            "ADDRESS": "Hauptstr. 1",
            "POSTCODE": "1010",
            "LOCATION": "Wien",
            "SEO_URL": "d/immobilien/wien/sonnige-wohnung-987654321/",
            "PROPERTY_TYPE": "Wohnung",
            "ESTATE_SIZE/LIVING_AREA": "78",
            "NUMBER_OF_ROOMS": "3",
        }))
        listing = parse_listing(ad)
        assert listing is not None
        assert listing.id == "987654321"
        assert listing.title == "Sonnige 3-Zimmer-Wohnung"
        assert listing.price == "€ 349.000"
        assert listing.location == "Hauptstr. 1, 1010 Wien"
        assert listing.url == "https://www.willhaben.at/iad/d/immobilien/wien/sonnige-wohnung-987654321/"
        assert listing.property_type == "Wohnung"
        assert listing.size == "78"
        assert listing.rooms == "3"

    def test_missing_id(self, make_ad):
        assert parse_listing(AdRecord(make_ad({"HEADING": "Haus"}))) is None

    def test_empty_id(self, make_ad):
        assert parse_listing(AdRecord(make_ad({"ADID": "", "HEADING": "Haus"}))) is None

    def test_minimal_record_degrades_gracefully(self, make_ad):
        listing = parse_listing(AdRecord(make_ad({"ADID": "1"})))
        assert listing is not None
        assert listing.title == ""
        assert listing.price == PRICE_ON_REQUEST
        assert listing.location == ""
        assert listing.url == ""
        assert listing.property_type == ""
        assert listing.size == ""
        assert listing.rooms == ""

    def test_price_from_suggestion(self, make_ad):
        listing = parse_listing(AdRecord(make_ad({
            "ADID": "1",
            "ESTATE_PRICE/PRICE_SUGGESTION": "289000",
        })))
        assert listing.price == "€ 289,000.00"

    def test_display_price_preferred_over_suggestion(self, make_ad):
        listing = parse_listing(AdRecord(make_ad({
            "ADID": "1",
            "PRICE_FOR_DISPLAY": "€ 289.000",
            "ESTATE_PRICE/PRICE_SUGGESTION": "1",
        })))
        assert listing.price == "€ 289.000"

    def test_size_falls_back_to_estate_size(self, make_ad):
        listing = parse_listing(AdRecord(make_ad({"ADID": "1", "ESTATE_SIZE": "650"})))
        assert listing.size == "650"

    def test_size_prefers_living_then_usable_area(self, make_ad):
        usable = parse_listing(AdRecord(make_ad({
            "ADID": "1",
            "ESTATE_SIZE/USEABLE_AREA": "120",
            "ESTATE_SIZE": "650",
        })))
        assert usable.size == "120"

        living = parse_listing(AdRecord(make_ad({
            "ADID": "1",
            "ESTATE_SIZE/LIVING_AREA": "95",
            "ESTATE_SIZE/USEABLE_AREA": "120",
            "ESTATE_SIZE": "650",
        })))
        assert living.size == "95"

    def test_custom_base_url(self, make_ad):
        listing = parse_listing(
            AdRecord(make_ad({"ADID": "1", "SEO_URL": "d/x-1/"})),
            base_url="https://example.test/iad/",
        )
        assert listing.url == "https://example.test/iad/d/x-1/"
