import random

import pytest

from backend.app.parsers.records import VehicleRecord
from backend.app.services.ad_generation import (
    AD_TYPE_PROMPTS,
    AUDIENCES,
    MAX_SCRIPTS,
    GenerationError,
    build_ad_prompt,
    build_vehicle_description,
    generate_scripts,
    pick_combinations,
)
from backend.app.services.venice_client import VeniceError


class FakeClient:
    def __init__(self, fail_on=None):
        self.prompts = []
        self.fail_on = fail_on

    async def complete(self, prompt, **kwargs):
        self.prompts.append(prompt)
        if self.fail_on is not None and len(self.prompts) == self.fail_on:
            raise VeniceError("Venice API error: 500 - boom", status_code=500)
        return f"  Script #{len(self.prompts)}  \n"


CAMRY = VehicleRecord(
    id="4T1G11AK5LU123456",
    year="2020",
    make="Toyota",
    model="Camry",
    trim="SE",
    price="$21,450",
    mileage="34,210 miles",
)


def test_description_includes_only_present_fields():
    assert build_vehicle_description(CAMRY) == (
        "2020 Toyota Camry. SE trim. priced at $21,450. with 34,210 miles"
    )


def test_description_with_every_optional_field():
    vehicle = VehicleRecord(
        id="x",
        year="2019",
        make="Ford",
        model="F-150",
        exterior_color="Oxford White",
        engine="3.5L V6",
        transmission="10-speed automatic",
        drivetrain="4WD",
        features=("Tow package", "Bed liner"),
        description="One owner",
    )
    assert build_vehicle_description(vehicle) == (
        "2019 Ford F-150. in Oxford White. featuring a 3.5L V6 engine. 10-speed automatic transmission. "
        "4WD. Key features: Tow package, Bed liner. Additional details: One owner"
    )


def test_minimal_vehicle_description():
    assert build_vehicle_description(VehicleRecord(id="x", year="2010")) == "2010 Unknown Unknown"


def test_prompt_names_ad_audience_and_dealership():
    audience = AUDIENCES[1]
    prompt = build_ad_prompt("radio_30sec", audience, "2020 Toyota Camry", "Lakeside Motors")
    assert "Create a 30-Second Radio Spot for the following vehicle:" in prompt
    assert "VEHICLE: 2020 Toyota Camry" in prompt
    assert "DEALERSHIP: Lakeside Motors" in prompt
    assert f"TARGET AUDIENCE: {audience.name} - {audience.description}" in prompt
    assert AD_TYPE_PROMPTS["radio_30sec"].instructions in prompt


def test_combinations_are_capped():
    picks = pick_combinations(["facebook", "email"], rng=random.Random(7))
    assert len(picks) == MAX_SCRIPTS
    assert len(set((ad_type, audience.name) for ad_type, audience in picks)) == MAX_SCRIPTS
    assert {ad_type for ad_type, _ in picks} <= {"facebook", "email"}


def test_single_type_covers_every_audience():
    picks = pick_combinations(["instagram"], rng=random.Random(1))
    assert sorted(audience.name for _, audience in picks) == sorted(audience.name for audience in AUDIENCES)


def test_unknown_ad_type_is_rejected():
    with pytest.raises(ValueError, match="billboard"):
        pick_combinations(["facebook", "billboard"])


@pytest.mark.asyncio
async def test_generate_scripts_builds_one_script_per_pick():
    client = FakeClient()
    scripts = await generate_scripts(CAMRY, "Lakeside Motors", ["video_tiktok"], client=client, rng=random.Random(3))

    assert len(scripts) == len(AUDIENCES)
    assert len(client.prompts) == len(AUDIENCES)
    tones = {audience.name: audience.tone for audience in AUDIENCES}
    for script in scripts:
        assert script.type == "video_tiktok"
        assert script.title == f"TikTok/Reels Video for {script.target_audience}"
        assert script.tone == tones[script.target_audience]
        assert script.call_to_action == "Visit Lakeside Motors today!"
        assert script.script.startswith("Script #")
        assert script.script == script.script.strip()

    payload = scripts[0].to_dict()
    assert set(payload) == {"type", "title", "script", "targetAudience", "tone", "callToAction"}


@pytest.mark.asyncio
async def test_any_failure_fails_the_batch():
    with pytest.raises(GenerationError, match="boom"):
        await generate_scripts(CAMRY, "Lakeside Motors", ["facebook"], client=FakeClient(fail_on=2))


@pytest.mark.asyncio
async def test_empty_ad_types_rejected():
    with pytest.raises(ValueError):
        await generate_scripts(CAMRY, "Lakeside Motors", [], client=FakeClient())
