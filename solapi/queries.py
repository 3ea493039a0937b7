"""
Request shapes for SOLAPI list/query endpoints.

Each endpoint family has a raw request dataclass filled in by the caller
and a ``finalize_*`` function that turns it into the wire payload:

- fields left as None are omitted, never sent as null
- ``start_date`` / ``end_date`` fold into a ``{gte, lte}`` range object
- every date is normalized to a string by ``format_date``
- fixed discriminants (e.g. ``type=DENIAL``) are applied

Usage:
    payload = finalize_blacks_request(GetBlacksRequest(start_date="2024-01-01"))
    url = f"{base_url}/iam/v1/black{build_query_string(payload)}"
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import httpx

from solapi.dates import DateLike, format_date
from solapi.validators import validate_date_type, validate_id_list, validate_limit

# Name filters accept a plain string (matched with ``like``) or an operator map
NameFilter = Union[str, Mapping[str, str]]

BLACK_TYPE_DENIAL = "DENIAL"


# ═══════════════════════════════════════════════════════════════════════════════
# DATE RANGE
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DateRange:
    """Inclusive date range sent as ``{gte, lte}``."""
    gte: Optional[str] = None
    lte: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.gte is None and self.lte is None

    def to_dict(self) -> Dict[str, str]:
        """Convert to wire form, omitting unset bounds."""
        result = {}
        if self.gte is not None:
            result["gte"] = self.gte
        if self.lte is not None:
            result["lte"] = self.lte
        return result


def build_date_range(
    start_date: Optional[DateLike] = None,
    end_date: Optional[DateLike] = None,
) -> Optional[DateRange]:
    """
    Build a range from optional start/end dates.

    Returns:
        DateRange with only the supplied bounds, or None if neither is given
    """
    date_range = DateRange()
    if start_date is not None:
        date_range = replace(date_range, gte=format_date(start_date, "start_date"))
    if end_date is not None:
        date_range = replace(date_range, lte=format_date(end_date, "end_date"))
    return None if date_range.is_empty else date_range


def _like(name: Optional[NameFilter]) -> Optional[Dict[str, str]]:
    if name is None:
        return None
    if isinstance(name, str):
        return {"like": name}
    return dict(name)


def _compact(**fields: Any) -> Dict[str, Any]:
    """Drop None values and convert ranges to their wire form."""
    payload = {}
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, DateRange):
            value = value.to_dict()
        payload[key] = value
    return payload


# ═══════════════════════════════════════════════════════════════════════════════
# MESSAGES / GROUPS / STATISTICS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class GetGroupsRequest:
    """Group list query."""
    start_key: Optional[str] = None
    limit: Optional[int] = None
    criteria: Optional[str] = None
    cond: Optional[str] = None
    value: Optional[str] = None
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None


def finalize_groups_request(request: Optional[GetGroupsRequest] = None) -> Dict[str, Any]:
    if request is None:
        return {}
    return _compact(
        startKey=request.start_key,
        limit=validate_limit(request.limit),
        criteria=request.criteria,
        cond=request.cond,
        value=request.value,
        dateCreated=build_date_range(request.start_date, request.end_date),
    )


@dataclass(frozen=True)
class GetGroupMessagesRequest:
    """Paging parameters for the messages of one group."""
    start_key: Optional[str] = None
    limit: Optional[int] = None


def finalize_group_messages_request(
    request: Optional[GetGroupMessagesRequest] = None,
) -> Dict[str, Any]:
    if request is None:
        return {}
    return _compact(
        startKey=request.start_key,
        limit=validate_limit(request.limit),
    )


@dataclass(frozen=True)
class GetMessagesRequest:
    """
    Message list query.

    ``date_type`` selects whether the date range applies to the creation
    time (``CREATED``) or the last status update (``UPDATED``).
    """
    start_key: Optional[str] = None
    limit: Optional[int] = None
    message_id: Optional[str] = None
    message_ids: Optional[Union[str, Sequence[str]]] = None
    group_id: Optional[str] = None
    to: Optional[str] = None
    from_: Optional[str] = None
    type: Optional[str] = None
    status_code: Optional[str] = None
    date_type: str = "CREATED"
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None


def finalize_messages_request(request: Optional[GetMessagesRequest] = None) -> Dict[str, Any]:
    if request is None:
        return {}

    date_type = validate_date_type(request.date_type)
    range_key = "dateCreated" if date_type == "CREATED" else "dateUpdated"
    message_ids = (
        validate_id_list(request.message_ids, "message_ids")
        if request.message_ids is not None else None
    )

    payload = _compact(
        startKey=request.start_key,
        limit=validate_limit(request.limit),
        messageId=request.message_id,
        messageIds=message_ids,
        groupId=request.group_id,
        to=request.to,
        **{"from": request.from_},
        type=request.type,
        statusCode=request.status_code,
    )
    date_range = build_date_range(request.start_date, request.end_date)
    if date_range is not None:
        payload[range_key] = date_range.to_dict()
    return payload


@dataclass(frozen=True)
class GetStatisticsRequest:
    """Statistics query."""
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None
    master_account_id: Optional[str] = None


def finalize_statistics_request(
    request: Optional[GetStatisticsRequest] = None,
) -> Dict[str, Any]:
    if request is None:
        return {}
    return _compact(
        masterAccountId=request.master_account_id,
        dateCreated=build_date_range(request.start_date, request.end_date),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# BLOCK LISTS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class GetBlacksRequest:
    """080 denial list query."""
    sender_number: Optional[str] = None
    start_key: Optional[str] = None
    limit: Optional[int] = None
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None


def finalize_blacks_request(request: Optional[GetBlacksRequest] = None) -> Dict[str, Any]:
    """The ``type`` discriminant is always ``DENIAL``, even without a request."""
    if request is None:
        return {"type": BLACK_TYPE_DENIAL}
    return _compact(
        type=BLACK_TYPE_DENIAL,
        senderNumber=request.sender_number,
        startKey=request.start_key,
        limit=validate_limit(request.limit),
        dateCreated=build_date_range(request.start_date, request.end_date),
    )


@dataclass(frozen=True)
class GetBlockGroupsRequest:
    """Block group query."""
    block_group_id: Optional[str] = None
    use_all: Optional[bool] = None
    sender_number: Optional[str] = None
    name: Optional[NameFilter] = None
    status: Optional[str] = None
    start_key: Optional[str] = None
    limit: Optional[int] = None


def finalize_block_groups_request(
    request: Optional[GetBlockGroupsRequest] = None,
) -> Dict[str, Any]:
    if request is None:
        return {}
    return _compact(
        blockGroupId=request.block_group_id,
        useAll=request.use_all,
        senderNumber=request.sender_number,
        name=_like(request.name),
        status=request.status,
        startKey=request.start_key,
        limit=validate_limit(request.limit),
    )


@dataclass(frozen=True)
class GetBlockNumbersRequest:
    """Blocked recipient number query."""
    block_group_id: Optional[str] = None
    phone_number: Optional[str] = None
    start_key: Optional[str] = None
    limit: Optional[int] = None


def finalize_block_numbers_request(
    request: Optional[GetBlockNumbersRequest] = None,
) -> Dict[str, Any]:
    if request is None:
        return {}
    return _compact(
        blockGroupId=request.block_group_id,
        phoneNumber=request.phone_number,
        startKey=request.start_key,
        limit=validate_limit(request.limit),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# KAKAO
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class GetKakaoChannelsRequest:
    """Kakao channel list query."""
    channel_id: Optional[str] = None
    search_id: Optional[str] = None
    phone_number: Optional[str] = None
    is_mine: Optional[bool] = None
    start_key: Optional[str] = None
    limit: Optional[int] = None
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None


def finalize_kakao_channels_request(
    request: Optional[GetKakaoChannelsRequest] = None,
) -> Dict[str, Any]:
    if request is None:
        return {}
    return _compact(
        channelId=request.channel_id,
        searchId=request.search_id,
        phoneNumber=request.phone_number,
        isMine=request.is_mine,
        startKey=request.start_key,
        limit=validate_limit(request.limit),
        dateCreated=build_date_range(request.start_date, request.end_date),
    )


@dataclass(frozen=True)
class GetKakaoAlimtalkTemplatesRequest:
    """
    Alimtalk template list query.

    ``name`` may be a plain string (partial match) or an operator map
    such as ``{"eq": "welcome"}``.
    """
    name: Optional[NameFilter] = None
    channel_id: Optional[str] = None
    channel_group_id: Optional[str] = None
    status: Optional[str] = None
    template_id: Optional[str] = None
    is_hidden: Optional[bool] = None
    start_key: Optional[str] = None
    limit: Optional[int] = None
    start_date: Optional[DateLike] = None
    end_date: Optional[DateLike] = None


def finalize_kakao_templates_request(
    request: Optional[GetKakaoAlimtalkTemplatesRequest] = None,
) -> Dict[str, Any]:
    if request is None:
        return {}
    return _compact(
        name=_like(request.name),
        channelId=request.channel_id,
        channelGroupId=request.channel_group_id,
        status=request.status,
        templateId=request.template_id,
        isHidden=request.is_hidden,
        startKey=request.start_key,
        limit=validate_limit(request.limit),
        dateCreated=build_date_range(request.start_date, request.end_date),
    )


# ═══════════════════════════════════════════════════════════════════════════════
# QUERY STRING
# ═══════════════════════════════════════════════════════════════════════════════

def _flatten(key: str, value: Any, pairs: List[Tuple[str, str]]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            _flatten(f"{key}[{sub_key}]", sub_value, pairs)
    elif isinstance(value, (list, tuple)):
        # Repeated keys, no indices
        for item in value:
            _flatten(key, item, pairs)
    elif isinstance(value, bool):
        pairs.append((key, "true" if value else "false"))
    else:
        pairs.append((key, str(value)))


def build_query_string(payload: Optional[Mapping[str, Any]]) -> str:
    """
    Serialize a finalized payload into a URL query string.

    Nested mappings use bracket keys (``dateCreated[gte]=...``) and lists
    repeat their key. Returns ``""`` for an empty payload, otherwise the
    query prefixed with ``?``.
    """
    pairs: List[Tuple[str, str]] = []
    for key, value in (payload or {}).items():
        _flatten(key, value, pairs)

    if not pairs:
        return ""
    return f"?{httpx.QueryParams(pairs)}"
