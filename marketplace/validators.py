"""
Custom validators for marketplace models.
"""

import re

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import URLValidator


def validate_phone_number(value):
    """
    Validate phone number format.

    Accepts international formats with optional country codes, spaces, dashes, and parentheses.
    Requires at least 10 digits.

    Valid formats:
    - +1-234-567-8900
    - +44 20 7946 0958
    - +1 (234) 567-8900
    - 2345678900

    Args:
        value: Phone number string to validate

    Raises:
        ValidationError: If phone number format is invalid
    """
    if not value:  # Empty string is allowed (optional field)
        return

    if not re.match(r'^[\d\s\-\+\(\)]+$', value):
        raise ValidationError(
            'Phone number can only contain digits, spaces, dashes, parentheses, and plus sign.',
            code='invalid_phone_chars'
        )

    digits = re.sub(r'\D', '', value)

    if len(digits) < 10 or len(digits) > 15:
        raise ValidationError(
            'Phone number must contain between 10 and 15 digits.',
            code='phone_length'
        )

    # Must not be all the same digit (like 0000000000)
    if len(set(digits)) == 1:
        raise ValidationError(
            'Phone number cannot be all the same digit.',
            code='invalid_phone_pattern'
        )


def validate_image_urls(value):
    """
    Validate the ordered list of image URLs attached to an item.

    Checks:
    - Value is a list
    - At most MARKETPLACE['MAX_ITEM_IMAGES'] entries
    - Every entry is an http(s) URL

    Raises:
        ValidationError: If the list is invalid
    """
    if value in (None, ''):
        return

    if not isinstance(value, (list, tuple)):
        raise ValidationError('Image URLs must be a list.', code='invalid_image_list')

    max_images = settings.MARKETPLACE['MAX_ITEM_IMAGES']
    if len(value) > max_images:
        raise ValidationError(
            f'An item can have at most {max_images} images.',
            code='too_many_images'
        )

    url_validator = URLValidator(schemes=['http', 'https'])
    for url in value:
        if not isinstance(url, str):
            raise ValidationError('Image URLs must be strings.', code='invalid_image_url')
        url_validator(url)


def normalize_domain(value):
    """Lowercase a university email domain and strip a leading '@'."""
    return (value or '').strip().lower().lstrip('@')
