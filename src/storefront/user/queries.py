"""Read side for users — profile and address book documents."""

from storefront.user.user import User


def serialize_address(address) -> dict:
    return {
        "id": str(address.id),
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "postal_code": address.postal_code,
        "country": address.country,
        "is_default": address.is_default,
    }


def serialize_user(user: User) -> dict:
    preferences = user.email_preferences
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "phone_number": user.phone_number,
        "bio": user.bio,
        "birth_date": user.birth_date.isoformat() if user.birth_date else None,
        "favorite_categories": list(user.favorite_categories or []),
        "email_preferences": {
            "newsletter": preferences.newsletter,
            "promotions": preferences.promotions,
            "product_updates": preferences.product_updates,
        }
        if preferences
        else None,
        "addresses": [serialize_address(a) for a in user.addresses],
    }
