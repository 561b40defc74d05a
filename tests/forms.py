# tests/forms.py
from leadmatch.schemas import BuyerRegistration, MarketerRegistration, PropertyCreate


def buyer_form(**overrides) -> BuyerRegistration:
    data = {
        "full_name": "Test Buyer",
        "email": "buyer@test.com",
        "phone": "01234567890",
        "password": "password123",
        "budget": 2_000_000,
        "locations": ["New Cairo"],
        "property_types": ["Apartment"],
        "buying_intent": "Cash",
    }
    data.update(overrides)
    return BuyerRegistration(**data)


def marketer_form(**overrides) -> MarketerRegistration:
    data = {
        "full_name": "Mona Marketer",
        "email": "mona@agency.com",
        "phone": "01099999999",
        "password": "marketer-pass",
        "company_name": "Agency",
        "role": "Marketer",
        "office_location": "New Cairo",
    }
    data.update(overrides)
    return MarketerRegistration(**data)


def property_form(**overrides) -> PropertyCreate:
    data = {
        "title": "Apartment in Rehab",
        "type": "Apartment",
        "location": "Rehab",
        "price": 1_800_000,
        "area": 150,
        "bedrooms": 3,
        "bathrooms": 2,
        "payment_plan": "20% down, 80% over 5 years",
    }
    data.update(overrides)
    return PropertyCreate(**data)
