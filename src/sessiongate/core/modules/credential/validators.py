import unicodedata

from email_validator import EmailNotValidError, validate_email as parse_email

from sessiongate.errors import ValidationError

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 256
SPECIAL_CHARACTERS = frozenset("!@#$%^&*()_+-=[]{}|;:'\",<.>/?")


def normalize_email(email: str) -> str:
    """Canonical form used as the unique key for accounts.

    NFC composition matches the form email-validator accepts, so precomposed and
    decomposed spellings of one address share a key.
    """
    return unicodedata.normalize("NFC", email.strip()).lower()


def validate_email(email: str) -> None:
    """Validate email address format.

    Requirements:
    - Parses as a single address without a display name
    - No commas or semicolons
    - Exactly one '@'
    - Domain contains a period and ends in a label of at least 2 characters

    Raises:
        ValidationError: On the first rule that fails, with a reason specific to that rule
    """
    if not email:
        raise ValidationError("Email is required")

    try:
        parsed = parse_email(
            email,
            allow_display_name=True,
            allow_quoted_local=True,
            check_deliverability=False,
            globally_deliverable=False,
        )
    except EmailNotValidError as e:
        if _has_dotless_domain(email):
            raise ValidationError("Invalid email domain format") from e
        raise ValidationError("Invalid email format") from e

    if parsed.display_name:
        raise ValidationError("Email cannot contain a name")

    address = parsed.normalized
    if "," in address:
        raise ValidationError("Email cannot contain a comma")
    if ";" in address:
        raise ValidationError("Email cannot contain a semicolon")

    if address.count("@") != 1:
        raise ValidationError("Email must contain exactly one '@'")

    domain = address.rsplit("@", 1)[1]
    if "." not in domain:
        raise ValidationError("Invalid email domain format")
    if len(domain.rsplit(".", 1)[1]) < 2:
        raise ValidationError("Invalid top-level domain")


def validate_password(password: str) -> None:
    """Validate password meets requirements.

    Requirements:
    - Between 8 and 256 characters
    - At least one digit
    - At least one uppercase letter
    - At least one special character

    Raises:
        ValidationError: If password doesn't meet requirements
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_LENGTH} characters long")

    if not any(char.isdigit() for char in password):
        raise ValidationError("Password must contain at least one number")

    if password.lower() == password:
        raise ValidationError("Password must contain at least one uppercase letter")

    if not any(char in SPECIAL_CHARACTERS for char in password):
        raise ValidationError("Password must contain at least one special character")


def validate_registration(email: str, password: str) -> None:
    """Validate registration input, email first."""
    validate_email(email)
    validate_password(password)


def _has_dotless_domain(email: str) -> bool:
    # Single-label domains like "localhost" are refused by the parser before the domain rule runs
    if email.count("@") != 1 or "," in email or ";" in email:
        return False
    local, domain = email.split("@")
    return bool(local) and bool(domain) and "." not in domain and not domain.startswith("[")
