"""Static option tables shared by the validator and every client.

Each table maps an option value (what gets stored) to its display label,
in the order the options are presented.
"""

from __future__ import annotations

PROPERTY_TYPES: dict[str, str] = {
    "house": "House",
    "condominium": "Condominium",
    "apartment": "Apartment",
    "office": "Office",
    "commercial-space": "Commercial Space",
}

SERVICE_TYPES: dict[str, str] = {
    "plumbing": "Plumbing",
    "electrical": "Electrical",
    "air-conditioning": "Air Conditioning",
    "appliance-repair": "Appliance Repair",
    "carpentry": "Carpentry",
    "cleaning-services": "Cleaning Services",
}

# service type -> specific services offered under it
SERVICE_CATALOG: dict[str, list[str]] = {
    "plumbing": [
        "Leak Repair",
        "Pipe Installation",
        "Drain Cleaning",
        "Toilet Repair",
        "Faucet Installation",
    ],
    "electrical": [
        "Wiring Installation",
        "Outlet Repair",
        "Light Fixture",
        "Circuit Breaker",
        "Electrical Panel",
    ],
    "air-conditioning": [
        "AC Cleaning",
        "AC Repair",
        "Installation",
        "Maintenance",
        "Freon Recharge",
    ],
    "appliance-repair": [
        "Washing Machine",
        "Refrigerator",
        "Microwave",
        "Electric Fan",
        "Water Heater",
    ],
    "carpentry": [
        "Furniture Repair",
        "Cabinet Installation",
        "Door Repair",
        "Window Installation",
        "Custom Build",
    ],
    "cleaning-services": [
        "Deep Cleaning",
        "Regular Cleaning",
        "Post-Construction",
        "Move-in/Move-out",
        "Carpet Cleaning",
    ],
}

URGENCY_LEVELS: dict[str, str] = {
    "emergency": "Emergency (Within 2 hours)",
    "urgent": "Urgent (Same day)",
    "normal": "Normal (1-3 days)",
    "flexible": "Flexible (Within a week)",
}

BUDGET_RANGES: dict[str, str] = {
    "under-1000": "Under ₱1,000",
    "1000-3000": "₱1,000 - ₱3,000",
    "3000-5000": "₱3,000 - ₱5,000",
    "5000-10000": "₱5,000 - ₱10,000",
    "over-10000": "Over ₱10,000",
    "get-quote": "Get a quote first",
}

TIME_BANDS: dict[str, str] = {
    "8am-10am": "8:00 AM - 10:00 AM",
    "10am-12pm": "10:00 AM - 12:00 PM",
    "1pm-3pm": "1:00 PM - 3:00 PM",
    "3pm-5pm": "3:00 PM - 5:00 PM",
    "5pm-7pm": "5:00 PM - 7:00 PM",
    "flexible": "Flexible",
}

CONTACT_METHODS: dict[str, str] = {
    "phone-call": "Phone Call",
    "sms-text": "SMS/Text",
    "email": "Email",
    "whatsapp": "WhatsApp",
}

CALL_TIMES: dict[str, str] = {
    "morning": "Morning (8AM - 12PM)",
    "afternoon": "Afternoon (12PM - 5PM)",
    "evening": "Evening (5PM - 8PM)",
    "anytime": "Anytime",
}

# Select-style fields and the table their value must come from.
# specificService is absent: its options depend on serviceType.
FIELD_OPTIONS: dict[str, dict[str, str]] = {
    "propertyType": PROPERTY_TYPES,
    "serviceType": SERVICE_TYPES,
    "urgencyLevel": URGENCY_LEVELS,
    "budgetRange": BUDGET_RANGES,
    "preferredTime": TIME_BANDS,
    "alternativeTime": TIME_BANDS,
    "preferredContactMethod": CONTACT_METHODS,
    "bestTimeToCall": CALL_TIMES,
}


def specific_services_for(service_type: str | None) -> list[str]:
    """Return the specific services offered under a service type.

    Unknown, empty or non-string service types have no options.
    """
    if not service_type or not isinstance(service_type, str):
        return []
    return list(SERVICE_CATALOG.get(service_type, []))


def options_for(field_name: str, service_type: str | None = None) -> dict[str, str]:
    """Options a client should offer for ``field_name`` (empty for free text)."""
    if field_name == "specificService":
        return {name: name for name in specific_services_for(service_type)}
    return dict(FIELD_OPTIONS.get(field_name, {}))


def as_dict() -> dict:
    """Every table, for serving to clients."""
    return {
        "propertyTypes": PROPERTY_TYPES,
        "serviceTypes": SERVICE_TYPES,
        "serviceCatalog": SERVICE_CATALOG,
        "urgencyLevels": URGENCY_LEVELS,
        "budgetRanges": BUDGET_RANGES,
        "timeBands": TIME_BANDS,
        "contactMethods": CONTACT_METHODS,
        "callTimes": CALL_TIMES,
    }
