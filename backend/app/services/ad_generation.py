"""Ad-script generation for a single scraped vehicle."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from backend.app.parsers.records import VehicleRecord
from backend.app.services.venice_client import VeniceClient, VeniceError

logger = logging.getLogger(__name__)

MAX_SCRIPTS = 5


class GenerationError(Exception):
    """Raised when any script in a batch fails to generate."""


@dataclass(frozen=True)
class AdTypePrompt:
    name: str
    instructions: str


@dataclass(frozen=True)
class Audience:
    name: str
    description: str
    tone: str


AD_TYPE_PROMPTS: Dict[str, AdTypePrompt] = {
    "video_youtube": AdTypePrompt(
        "YouTube Video Ad",
        "Write a 30-second YouTube pre-roll video ad script. Include visual directions in [brackets]. "
        "Hook viewers in the first 5 seconds.",
    ),
    "video_tiktok": AdTypePrompt(
        "TikTok/Reels Video",
        "Write a 15-second TikTok/Instagram Reels script. Make it trendy, fast-paced, and engaging. "
        "Include visual/action cues.",
    ),
    "radio_30sec": AdTypePrompt(
        "30-Second Radio Spot",
        "Write a 30-second radio ad (approximately 75 words). Focus on audio-only appeal. "
        "Include clear call to action.",
    ),
    "radio_60sec": AdTypePrompt(
        "60-Second Radio Spot",
        "Write a 60-second radio ad (approximately 150 words). Tell a story, build desire, "
        "include testimonial-style language.",
    ),
    "facebook": AdTypePrompt(
        "Facebook Ad",
        "Write Facebook ad copy with: attention-grabbing headline, 2-3 sentence body, and clear CTA. "
        "Optimize for engagement.",
    ),
    "instagram": AdTypePrompt(
        "Instagram Post",
        "Write Instagram caption with emojis, hashtags, and engaging hook. "
        "Keep it visual-focused and lifestyle-oriented.",
    ),
    "email": AdTypePrompt(
        "Sales Email",
        "Write a sales email with compelling subject line, personalized greeting, 3 key selling points, "
        "and soft CTA.",
    ),
}

AUDIENCES: Tuple[Audience, ...] = (
    Audience("First-Time Buyers", "Young adults buying their first car, value-conscious, need guidance", "Friendly & Helpful"),
    Audience("Families", "Parents with kids, prioritize safety, space, and reliability", "Warm & Trustworthy"),
    Audience("Truck Enthusiasts", "People who need capability, towing, and rugged features", "Bold & Capable"),
    Audience("Luxury Seekers", "Buyers wanting premium features, status, and comfort", "Premium & Sophisticated"),
    Audience("Budget Conscious", "Shoppers focused on value, low payments, and fuel efficiency", "Value-Focused"),
)

PROMPT_TEMPLATE = """
Create a {ad_name} for the following vehicle:

VEHICLE: {vehicle}

DEALERSHIP: {dealership}

TARGET AUDIENCE: {audience} - {audience_description}

INSTRUCTIONS: {instructions}

Write a compelling, unique ad that speaks directly to this audience. Make it memorable and action-oriented.

Respond with ONLY the ad script, no additional commentary or explanations.
"""


@dataclass(frozen=True)
class AdScript:
    type: str
    title: str
    script: str
    target_audience: str
    tone: str
    call_to_action: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "script": self.script,
            "targetAudience": self.target_audience,
            "tone": self.tone,
            "callToAction": self.call_to_action,
        }


def build_vehicle_description(vehicle: VehicleRecord) -> str:
    """Flatten a vehicle into prompt text, mentioning only the fields it has."""
    parts: List[Optional[str]] = [
        f"{vehicle.year} {vehicle.make} {vehicle.model}",
        vehicle.trim and f"{vehicle.trim} trim",
        vehicle.price and f"priced at {vehicle.price}",
        vehicle.mileage and f"with {vehicle.mileage}",
        vehicle.exterior_color and f"in {vehicle.exterior_color}",
        vehicle.engine and f"featuring a {vehicle.engine} engine",
        vehicle.transmission and f"{vehicle.transmission} transmission",
        vehicle.drivetrain,
        vehicle.features and f"Key features: {', '.join(vehicle.features)}",
        vehicle.description and f"Additional details: {vehicle.description}",
    ]
    return ". ".join(part for part in parts if part)


def build_ad_prompt(ad_type: str, audience: Audience, vehicle_description: str, dealership_name: str) -> str:
    ad_prompt = AD_TYPE_PROMPTS[ad_type]
    return PROMPT_TEMPLATE.format(
        ad_name=ad_prompt.name,
        vehicle=vehicle_description,
        dealership=dealership_name,
        audience=audience.name,
        audience_description=audience.description,
        instructions=ad_prompt.instructions,
    )


def pick_combinations(
    ad_types: Sequence[str],
    *,
    rng: Optional[random.Random] = None,
    limit: int = MAX_SCRIPTS,
) -> List[Tuple[str, Audience]]:
    unknown = [ad_type for ad_type in ad_types if ad_type not in AD_TYPE_PROMPTS]
    if unknown:
        raise ValueError(f"Unsupported ad types: {', '.join(unknown)}")
    combinations = [(ad_type, audience) for ad_type in ad_types for audience in AUDIENCES]
    (rng or random).shuffle(combinations)
    return combinations[: min(limit, len(combinations))]


async def _generate_one(
    client: VeniceClient,
    ad_type: str,
    audience: Audience,
    vehicle_description: str,
    dealership_name: str,
) -> AdScript:
    prompt = build_ad_prompt(ad_type, audience, vehicle_description, dealership_name)
    script = await client.complete(prompt)
    return AdScript(
        type=ad_type,
        title=f"{AD_TYPE_PROMPTS[ad_type].name} for {audience.name}",
        script=script.strip(),
        target_audience=audience.name,
        tone=audience.tone,
        call_to_action=f"Visit {dealership_name} today!",
    )


async def generate_scripts(
    vehicle: VehicleRecord,
    dealership_name: str,
    ad_types: Sequence[str],
    *,
    client: VeniceClient,
    rng: Optional[random.Random] = None,
) -> List[AdScript]:
    """Generate up to five scripts concurrently; one failure fails the batch."""
    if not ad_types:
        raise ValueError("At least one ad type is required")
    combinations = pick_combinations(ad_types, rng=rng)
    vehicle_description = build_vehicle_description(vehicle)
    logger.info(f"Generating {len(combinations)} scripts for {vehicle.year} {vehicle.make} {vehicle.model}")
    try:
        return list(
            await asyncio.gather(
                *(
                    _generate_one(client, ad_type, audience, vehicle_description, dealership_name)
                    for ad_type, audience in combinations
                )
            )
        )
    except VeniceError as exc:
        raise GenerationError(str(exc)) from exc
