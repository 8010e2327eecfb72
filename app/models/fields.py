from pydantic import AfterValidator, BeforeValidator, EmailStr, StringConstraints
from typing_extensions import Annotated


def _strip(value):
    return value.strip() if isinstance(value, str) else value


# Required free text: surrounding whitespace is trimmed, empty is rejected
NonBlankStr = Annotated[str, StringConstraints(
    strip_whitespace=True, min_length=1)]

# local@domain.tld, stored lower-case
NormalizedEmail = Annotated[EmailStr, BeforeValidator(_strip), AfterValidator(str.lower)]

# Optional free text: trimmed, may be empty
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]
