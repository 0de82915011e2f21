"""
Product knowledge base seed data.

A small smart-home hub knowledge base, the kind a merchant sets up for a
product's support page. Used by the CLI when no --kb file is given and by
the retrieval eval's golden queries.
"""

from __future__ import annotations

from datetime import datetime, timezone

from support_rag.retrieval.document import Document

_SEEDED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


def get_product_documents() -> list[Document]:
    """
    Get seed documents for the SmartHome Hub knowledge base.

    Returns fresh Document objects on every call so callers may attach
    embeddings without affecting each other.
    """
    return [
        Document(
            id="kb_initial_setup",
            title="Initial Setup",
            content="""Plug in the device and wait 60 seconds until the status light turns solid white.
Place the hub in a central location, away from microwaves and metal cabinets.
The first boot downloads the latest firmware automatically.""",
            tags=["setup", "getting started"],
            created_at=_SEEDED_AT,
        ),
        Document(
            id="kb_installation_guide",
            title="Installation Guide",
            content="""Steps to install the hub on a wall:
1. Mark the holes using the included template.
2. Drill two 6 mm holes and insert the anchors.
3. Fix the bracket with the screws and slide the hub down until it clicks.""",
            tags=["installation", "mounting"],
            created_at=_SEEDED_AT,
        ),
        Document(
            id="kb_connection_guide",
            title="Connection Guide",
            content="""1. Download the SmartHome app
2. Create an account
3. Follow the in-app setup instructions to connect the hub to your Wi-Fi network.
Only 2.4 GHz Wi-Fi networks are supported.""",
            tags=["wifi", "app", "pairing"],
            created_at=_SEEDED_AT,
        ),
        Document(
            id="kb_troubleshooting",
            title="Troubleshooting",
            content="""If the device is not responding, try resetting it by pressing and holding the
reset button for 10 seconds. A blinking red light means the hub lost its Wi-Fi
connection; move it closer to the router and restart it.""",
            tags=["reset", "not responding", "red light"],
            created_at=_SEEDED_AT,
        ),
        Document(
            id="kb_factory_reset",
            title="Factory Reset",
            content="""A factory reset erases all paired devices and automations.
Hold the reset button for 30 seconds until the light flashes yellow three times.
After the reset, set the hub up again from the SmartHome app.""",
            tags=["reset", "erase"],
            created_at=_SEEDED_AT,
        ),
        Document(
            id="kb_firmware_update",
            title="Firmware Updates",
            content="""Firmware updates install automatically at night when the hub is idle.
To update manually, open the SmartHome app, go to Settings > Hub > Firmware and tap Update.
Do not unplug the hub while the light is pulsing blue.""",
            tags=["firmware", "update"],
            created_at=_SEEDED_AT,
        ),
        Document(
            id="kb_warranty",
            title="Warranty",
            content="""Coverage terms: the hub is covered for 24 months from the date of purchase
against manufacturing defects. Keep your receipt; it is required for any claim.
Water damage and drops are not covered.""",
            tags=["warranty", "guarantee"],
            created_at=_SEEDED_AT,
        ),
        Document(
            id="kb_returns",
            title="Returns and Refunds",
            content="""Unopened products can be returned within 30 days for a full refund.
Opened products can be returned within 14 days if all accessories are included.
Start a return from your order page.""",
            tags=["refund", "return policy"],
            created_at=_SEEDED_AT,
        ),
        Document(
            id="kb_voice_assistants",
            title="Voice Assistant Integration",
            content="""The hub works with Alexa and Google Assistant.
Enable the SmartHome skill in your voice assistant app and link your SmartHome account.
Devices appear in the voice assistant after a few minutes.""",
            tags=["alexa", "google assistant", "voice"],
            created_at=_SEEDED_AT,
        ),
    ]
