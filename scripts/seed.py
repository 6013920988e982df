"""Seed the boundary catalog for the Nos Limites backend."""
from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

from app.config import get_settings
from app.db import get_sessionmaker, init_engine
from app.services.catalog import seed_catalog

CATALOG: list[dict] = [
    {
        "name": "Professional contact",
        "description": "Respectful interactions in a work setting",
        "icon": "\U0001F91D",
        "subcategories": [
            {
                "name": "Verbal communication",
                "boundaries": [
                    "Compliments about my work",
                    "Compliments about my outfit",
                    "Light personal chat (weekend, holidays)",
                    "Informal forms of address",
                ],
            },
            {
                "name": "Professional physical contact",
                "boundaries": [
                    "Handshake",
                    "Friendly pat on the shoulder",
                    "Greeting kiss on the cheek",
                ],
            },
        ],
    },
    {
        "name": "Friendly contact",
        "description": "Warm, friendly interactions",
        "icon": "\U0001F60A",
        "subcategories": [
            {
                "name": "Friendly communication",
                "boundaries": [
                    "Personal compliments (personality, qualities)",
                    "Compliments about my looks",
                    "Personal messages outside the usual context",
                    "Personal phone calls",
                    "Sharing confidences",
                ],
            },
            {
                "name": "Friendly physical contact",
                "boundaries": [
                    "Friendly hug",
                    "Touching my arm or forearm",
                    "Touching my back",
                    "Briefly holding my hand",
                    "Arm around my shoulders",
                ],
            },
            {
                "name": "Social activities",
                "boundaries": [
                    "One-on-one outings (coffee, restaurant)",
                    "Invitations to social events",
                    "Doing sports together",
                ],
            },
        ],
    },
    {
        "name": "Flirting",
        "description": "Interactions with a seductive tone",
        "icon": "\U0001F4AC",
        "subcategories": [
            {
                "name": "Verbal flirting",
                "boundaries": [
                    "Suggestive compliments",
                    "Flirtatious teasing",
                    "Innuendo",
                    "Flirty messages or suggestive emojis",
                ],
            },
            {
                "name": "Body language",
                "boundaries": [
                    "Prolonged eye contact",
                    "Standing close",
                    "Touching my face (cheek, chin)",
                    "Touching my hair",
                    "Touching my waist",
                ],
            },
        ],
    },
    {
        "name": "Close contact",
        "description": "More intimate physical contact",
        "icon": "\U0001F917",
        "subcategories": [
            {
                "name": "Tender gestures",
                "boundaries": [
                    "Stroking my arm or hand",
                    "Stroking my back",
                    "Stroking my face",
                    "Long hugs",
                    "Hold hands",
                ],
            },
            {
                "name": "More intimate contact",
                "boundaries": [
                    "Touching my thighs",
                    "Touching my neck",
                    "Shoulder massage",
                    "Full massage",
                ],
            },
        ],
    },
    {
        "name": "Intimacy",
        "description": "Intimate proposals and contact",
        "icon": "\U0001F495",
        "subcategories": [
            {
                "name": "Intimate closeness",
                "boundaries": [
                    "Kiss on the cheek",
                    "Kiss on the forehead",
                    "Kiss on the lips",
                    "Long kiss",
                ],
            },
            {
                "name": "Intimate proposals",
                "boundaries": [
                    "Romantic date proposals",
                    "Declarations of feelings",
                    "Proposals of intimate closeness",
                    "Open talk about desires and expectations",
                ],
            },
        ],
    },
]


def main() -> None:
    settings = get_settings()
    print(f"Using database: {settings.database_url}")

    init_engine()
    session = get_sessionmaker()()
    try:
        created = seed_catalog(session, CATALOG)
        if created:
            print(f"Catalog seeded: {created} boundaries.")
        else:
            print("Catalog already present, skipping.")
    finally:
        session.close()


if __name__ == "__main__":
    main()
