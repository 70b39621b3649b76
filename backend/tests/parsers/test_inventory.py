from datetime import datetime, timezone
from pathlib import Path

from backend.app.parsers import inventory
from backend.app.parsers.inventory import (
    DISCOVERY_TIERS,
    build_snapshot,
    discover_vehicles,
    load_document,
    parse_inventory,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _fixture(*parts: str) -> str:
    return FIXTURES.joinpath(*parts).read_text(encoding="utf-8")


def test_spotlight_page_extracts_structured_cards():
    vehicles = parse_inventory(_fixture("dealer_car_search", "spotlight.html"), "https://www.johnsautosales.com/")
    assert [vehicle.id for vehicle in vehicles] == ["40123", "40177", "1HGCV1F34JA012345"]

    audi, ford, honda = vehicles
    assert (audi.year, audi.make, audi.model, audi.trim) == ("2019", "Audi", "Q5", "Premium Plus")
    assert audi.price == "$23,995"
    assert audi.image_url == "https://www.johnsautosales.com/photos/40123/main.jpg"
    assert audi.detail_url == "https://www.johnsautosales.com/vdp/40123/Used-2019-Audi-Q5-Premium-Plus"

    assert ford.model == "F-150"
    assert ford.trim is None
    assert ford.price is None
    assert ford.image_url == "https://cdn.example.com/photos/f150.jpg"

    assert honda.vin == "1HGCV1F34JA012345"
    assert honda.stock_number is None
    assert honda.trim == "Sport 1.5T"
    assert honda.image_url == "https://images.example.com/accord.jpg"


def test_platform_cards_sharing_a_vin_collapse_to_first():
    vehicles = parse_inventory(_fixture("generic", "vehicle_cards.html"), "https://dealer.test/inventory")
    assert len(vehicles) == 2

    camry, silverado = vehicles
    assert camry.id == "4T1G11AK5LU123456"
    assert (camry.make, camry.model, camry.trim) == ("Toyota", "Camry", "SE")
    assert camry.price == "$21,450"
    assert camry.mileage == "34,210 miles"
    assert camry.stock_number == "T1234A"
    assert camry.image_url == "https://dealer.test/img/camry.jpg"
    assert camry.detail_url == "https://dealer.test/used/2020-toyota-camry-se"

    assert (silverado.make, silverado.model, silverado.trim) == ("Chevrolet", "Silverado", "1500 LT")
    assert silverado.mileage == "45,000 miles"
    assert silverado.image_url == "https://dealer.test/img/silverado.jpg"
    assert silverado.detail_url == "https://lakesidemotors.example/used/2019-chevy-silverado"


def test_detail_link_fallback_builds_minimal_record():
    vehicles = parse_inventory(_fixture("fallback", "link_only.html"), "https://dealer.test/")
    assert len(vehicles) == 1

    civic = vehicles[0]
    assert (civic.year, civic.make, civic.model, civic.trim) == ("2020", "Honda", "Civic", "LX")
    assert civic.detail_url == "https://dealer.test/inventory/2020-honda-civic"
    assert civic.id.startswith("vehicle-")
    assert len(civic.id) == len("vehicle-") + 9
    assert civic.price is None


def test_heading_fallback_uses_parent_and_next_sibling():
    vehicles = parse_inventory(_fixture("fallback", "headings_only.html"), "https://dealer.test/inventory/used")
    assert [vehicle.id for vehicle in vehicles] == ["vehicle-0", "vehicle-1"]

    jeep, nissan = vehicles
    assert (jeep.make, jeep.model, jeep.trim) == ("Jeep", "Wrangler", "Unlimited Sahara")
    assert jeep.price == "$27,800"
    assert jeep.detail_url == "https://dealer.test/inventory/details.php?id=77"

    assert (nissan.make, nissan.model, nissan.trim) == ("Nissan", "Altima", "2.5 S")
    assert nissan.price == "$9,995"
    assert nissan.detail_url is None


def test_matching_container_selector_is_final_even_when_empty():
    html = """
    <div class="vehicle-card"><h3>Inventory coming soon</h3></div>
    <a href="/inventory/2020-honda-civic">2020 Honda Civic LX</a>
    <h2>2018 Ford Escape</h2>
    """
    assert parse_inventory(html, "https://dealer.test/") == []


def test_only_first_matching_container_selector_is_used():
    html = """
    <div class="srp-list-item"><h3>2014 Subaru Outback</h3></div>
    <div class="vehicle-card"><h3>2016 Kia Soul</h3></div>
    """
    vehicles = parse_inventory(html, "https://dealer.test/")
    assert [vehicle.make for vehicle in vehicles] == ["Kia"]


def test_page_without_any_vehicles_is_empty_not_an_error():
    assert parse_inventory("<html><body><p>Closed for the holidays</p></body></html>", "https://dealer.test/") == []
    assert parse_inventory("", "https://dealer.test/") == []


def test_failing_candidate_is_skipped(monkeypatch, caplog):
    original = inventory.extract_vehicle

    def flaky(element, index, base_url):
        if index == 1:
            raise RuntimeError("broken card")
        return original(element, index, base_url)

    monkeypatch.setattr(inventory, "extract_vehicle", flaky)
    html = """
    <div class="vehicle-card"><h3>2014 Subaru Outback</h3></div>
    <div class="vehicle-card"><h3>2016 Kia Soul</h3></div>
    <div class="vehicle-card"><h3>2012 Mazda 3</h3></div>
    """
    with caplog.at_level("WARNING", logger=inventory.__name__):
        vehicles = parse_inventory(html, "https://dealer.test/")

    assert [vehicle.make for vehicle in vehicles] == ["Subaru", "Mazda"]
    assert "broken card" in caplog.text


def test_every_record_has_a_year():
    for parts, base in (
        (("dealer_car_search", "spotlight.html"), "https://www.johnsautosales.com/"),
        (("generic", "vehicle_cards.html"), "https://dealer.test/"),
        (("fallback", "link_only.html"), "https://dealer.test/"),
        (("fallback", "headings_only.html"), "https://dealer.test/"),
    ):
        for vehicle in parse_inventory(_fixture(*parts), base):
            assert vehicle.year and len(vehicle.year) == 4


def test_discover_vehicles_returns_raw_records_before_dedupe():
    soup = load_document(_fixture("generic", "vehicle_cards.html"))
    assert len(discover_vehicles(soup, "https://dealer.test/")) == 3


def test_tier_table_order():
    assert [tier.name for tier in DISCOVERY_TIERS] == ["container_selectors", "detail_links", "year_headings"]


def test_build_snapshot_combines_vehicles_and_name():
    captured = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    snapshot = build_snapshot(
        _fixture("generic", "vehicle_cards.html"),
        "https://lakesidemotors.example/inventory",
        scraped_at=captured,
    )
    assert snapshot.dealership_name == "Lakeside Motors"
    assert snapshot.dealership_url == "https://lakesidemotors.example/inventory"
    assert len(snapshot.vehicles) == 2

    payload = snapshot.to_dict()
    assert payload["dealershipName"] == "Lakeside Motors"
    assert payload["scrapedAt"] == "2024-05-01T12:30:00+00:00"
    first = payload["vehicles"][0]
    assert first["stockNumber"] == "T1234A"
    assert first["detailUrl"] == "https://lakesidemotors.example/used/2020-toyota-camry-se"
    assert "exteriorColor" not in first


def test_build_snapshot_resolves_against_effective_url():
    snapshot = build_snapshot(
        _fixture("fallback", "link_only.html"),
        "http://dealer.test",
        base_url="https://www.dealer.test/",
    )
    assert snapshot.vehicles[0].detail_url == "https://www.dealer.test/inventory/2020-honda-civic"
    assert snapshot.scraped_at.tzinfo is not None
