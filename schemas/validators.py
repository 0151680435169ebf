import re
import phonenumbers


def check_password_strength(value: str) -> str:
    """
    Password must be at least 8 characters and contain:
    - At least one letter
    - At least one digit
    """
    if len(value) < 8:
        raise ValueError('Password must be at least 8 characters')

    if not re.search(r'[A-Za-z]', value):
        raise ValueError('Password must contain at least one letter')

    if not re.search(r'\d', value):
        raise ValueError('Password must contain at least one digit')

    return value


def normalize_phone(value: str) -> str:
    """
    Validates phone number format using Google's phonenumbers library and
    returns it in E.164. Accepts international format: +254712345678
    """
    try:
        parsed = phonenumbers.parse(value, None)
    except phonenumbers.NumberParseException:
        raise ValueError('Phone number must include country code (e.g.: +254xxxxxxxxx, +20xxxxxxxxxx)')

    if not phonenumbers.is_valid_number(parsed):
        raise ValueError('Invalid phone number')

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


def clean_username(value):
    if value is None:
        return value
    value = value.strip()
    if not value:
        raise ValueError('Username cannot be empty')
    return value
