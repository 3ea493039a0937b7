"""
Input validation functions for request parameters.

All validators raise ValidationError on invalid input, before
any request is issued.
"""

from typing import Any, List, Optional, Sequence

from solapi.exceptions import ValidationError

# Maximum number of messages accepted by one send or group add call
MAX_MESSAGES_PER_REQUEST = 10000

VALID_FILE_TYPES = {"KAKAO", "MMS", "DOCUMENT", "RCS", "FAX"}

VALID_DATE_TYPES = {"CREATED", "UPDATED"}


def validate_identifier(value: Any, field: str) -> str:
    """
    Validate an opaque identifier (group id, template id, channel id, ...).

    Identifiers are treated as keys and never parsed.

    Raises:
        ValidationError: If identifier is empty or not a string
    """
    if not isinstance(value, str):
        raise ValidationError(field, "Must be a string", value)

    if not value.strip():
        raise ValidationError(field, "Identifier is required")

    return value


def validate_id_list(value: Any, field: str) -> List[str]:
    """
    Validate one identifier or a list of identifiers.

    A single string is one id, never a sequence of characters.

    Raises:
        ValidationError: If the value is not a string or a list of strings
    """
    if isinstance(value, str):
        return [validate_identifier(value, field)]

    if not isinstance(value, Sequence):
        raise ValidationError(field, "Must be a string or a list of strings", value)

    return [validate_identifier(item, field) for item in value]


def validate_message_batch(messages: Sequence[Any], field: str = "messages") -> Sequence[Any]:
    """
    Validate a batch of messages.

    Raises:
        ValidationError: If the batch is empty or too large
    """
    if len(messages) == 0:
        raise ValidationError(field, "At least one message is required")

    if len(messages) > MAX_MESSAGES_PER_REQUEST:
        raise ValidationError(
            field,
            f"Cannot exceed {MAX_MESSAGES_PER_REQUEST} messages per request",
            len(messages)
        )

    return messages


def validate_limit(value: Optional[int], field: str = "limit") -> Optional[int]:
    """
    Validate the type of a page size parameter.

    The range is enforced by the API and passed through unchanged.

    Raises:
        ValidationError: If limit is not an integer
    """
    if value is None:
        return None

    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "Must be an integer", value)

    return value


def validate_file_type(value: str, field: str = "file_type") -> str:
    """
    Validate an upload file type.

    Raises:
        ValidationError: If file type is unknown
    """
    if value not in VALID_FILE_TYPES:
        raise ValidationError(
            field,
            f"Must be one of {sorted(VALID_FILE_TYPES)}",
            value
        )
    return value


def validate_date_type(value: str, field: str = "date_type") -> str:
    """
    Validate which timestamp a message query filters on.

    Raises:
        ValidationError: If date type is unknown
    """
    if value not in VALID_DATE_TYPES:
        raise ValidationError(
            field,
            f"Must be one of {sorted(VALID_DATE_TYPES)}",
            value
        )
    return value
