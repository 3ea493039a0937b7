"""
Domain models for SOLAPI data.

Immutable dataclasses built from raw API payloads with ``from_api``.
Models that are sent back to the API (messages, send options) expose
``to_dict`` returning the camelCase wire form with unset fields omitted.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union

from solapi.dates import DateLike, format_date
from solapi.exceptions import SolapiDataError, ValidationError

T = TypeVar("T")

_TEMPLATE_VARIABLE = re.compile(r"#\{[^{}]+\}")


def _parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an API timestamp, returning None when absent or malformed."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None


def _compact(**fields: Any) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


# ═══════════════════════════════════════════════════════════════════════════════
# ENUMS
# ═══════════════════════════════════════════════════════════════════════════════

class MessageType(str, Enum):
    """Message types accepted by the send endpoints."""
    SMS = "SMS"
    LMS = "LMS"
    MMS = "MMS"
    ATA = "ATA"  # Kakao Alimtalk
    CTA = "CTA"  # Kakao Friendtalk
    CTI = "CTI"  # Kakao Friendtalk with image
    NSA = "NSA"  # Naver smart notification
    RCS_SMS = "RCS_SMS"
    RCS_LMS = "RCS_LMS"
    RCS_MMS = "RCS_MMS"
    RCS_TPL = "RCS_TPL"
    RCS_ITPL = "RCS_ITPL"
    RCS_LTPL = "RCS_LTPL"
    FAX = "FAX"
    VOICE = "VOICE"


class FileType(str, Enum):
    """Storage file types for uploads."""
    KAKAO = "KAKAO"
    MMS = "MMS"
    DOCUMENT = "DOCUMENT"
    RCS = "RCS"
    FAX = "FAX"


class TemplateStatus(str, Enum):
    """Alimtalk template inspection status."""
    PENDING = "PENDING"
    INSPECTING = "INSPECTING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


# ═══════════════════════════════════════════════════════════════════════════════
# MESSAGES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class KakaoButton:
    """Button attached to a Kakao message or template."""
    button_name: str
    button_type: str
    link_mo: Optional[str] = None
    link_pc: Optional[str] = None
    link_android: Optional[str] = None
    link_ios: Optional[str] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "KakaoButton":
        return cls(
            button_name=data.get("buttonName", ""),
            button_type=data.get("buttonType", ""),
            link_mo=data.get("linkMo"),
            link_pc=data.get("linkPc"),
            link_android=data.get("linkAnd"),
            link_ios=data.get("linkIos"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            buttonName=self.button_name,
            buttonType=self.button_type,
            linkMo=self.link_mo,
            linkPc=self.link_pc,
            linkAnd=self.link_android,
            linkIos=self.link_ios,
        )


@dataclass(frozen=True)
class KakaoOption:
    """Kakao specific options of a message (Alimtalk / Friendtalk)."""
    pf_id: str
    template_id: Optional[str] = None
    variables: Optional[Dict[str, str]] = None
    disable_sms: bool = False
    ad_flag: bool = False
    image_id: Optional[str] = None
    buttons: Tuple[KakaoButton, ...] = ()

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "KakaoOption":
        return cls(
            pf_id=data.get("pfId", ""),
            template_id=data.get("templateId"),
            variables=dict(data["variables"]) if data.get("variables") else None,
            disable_sms=bool(data.get("disableSms", False)),
            ad_flag=bool(data.get("adFlag", False)),
            image_id=data.get("imageId"),
            buttons=tuple(KakaoButton.from_api(b) for b in data.get("buttons") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = _compact(
            pfId=self.pf_id,
            templateId=self.template_id,
            variables=self.variables,
            disableSms=self.disable_sms,
            adFlag=self.ad_flag,
            imageId=self.image_id,
        )
        if self.buttons:
            payload["buttons"] = [button.to_dict() for button in self.buttons]
        return payload


@dataclass(frozen=True)
class Message:
    """
    One outgoing message.

    Phone numbers are sent without hyphens. ``from_`` is the sender
    number (``from`` on the wire).
    """
    to: Union[str, Tuple[str, ...]]
    from_: Optional[str] = None
    text: Optional[str] = None
    type: Optional[str] = None
    subject: Optional[str] = None
    image_id: Optional[str] = None
    country: Optional[str] = None
    auto_type_detect: Optional[bool] = None
    kakao_options: Optional[KakaoOption] = None
    custom_fields: Optional[Dict[str, str]] = None
    replacements: Optional[Tuple[Dict[str, Any], ...]] = None

    def __post_init__(self):
        # Frozen: normalize through object.__setattr__
        if isinstance(self.to, (list, tuple)):
            object.__setattr__(self, "to", tuple(_strip_hyphens(n) for n in self.to))
        else:
            object.__setattr__(self, "to", _strip_hyphens(self.to))
        if self.from_ is not None:
            object.__setattr__(self, "from_", _strip_hyphens(self.from_))
        if isinstance(self.type, MessageType):
            object.__setattr__(self, "type", self.type.value)
        if isinstance(self.kakao_options, Mapping):
            object.__setattr__(self, "kakao_options", KakaoOption.from_api(self.kakao_options))
        if self.replacements is not None:
            object.__setattr__(self, "replacements", tuple(self.replacements))

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Message":
        """Create Message from a camelCase mapping (API or caller supplied)."""
        if not data.get("to"):
            raise ValidationError("to", "Recipient number is required", data.get("to"))

        kakao_options = data.get("kakaoOptions")
        return cls(
            to=data["to"],
            from_=data.get("from"),
            text=data.get("text"),
            type=data.get("type"),
            subject=data.get("subject"),
            image_id=data.get("imageId"),
            country=data.get("country"),
            auto_type_detect=data.get("autoTypeDetect"),
            kakao_options=KakaoOption.from_api(kakao_options) if kakao_options else None,
            custom_fields=data.get("customFields"),
            replacements=data.get("replacements"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Wire form of the message."""
        to = list(self.to) if isinstance(self.to, tuple) else self.to
        return _compact(
            to=to,
            **{"from": self.from_},
            text=self.text,
            type=self.type,
            subject=self.subject,
            imageId=self.image_id,
            country=self.country,
            autoTypeDetect=self.auto_type_detect,
            kakaoOptions=self.kakao_options.to_dict() if self.kakao_options else None,
            customFields=self.custom_fields,
            replacements=list(self.replacements) if self.replacements is not None else None,
        )


def _strip_hyphens(number: str) -> str:
    return number.replace("-", "") if isinstance(number, str) else number


MessageInput = Union[Message, Mapping[str, Any]]


def coerce_message(value: MessageInput) -> Message:
    """Accept a Message or a camelCase mapping and return a Message."""
    if isinstance(value, Message):
        return value
    if isinstance(value, Mapping):
        return Message.from_api(value)
    raise ValidationError("messages", "Must be a Message or a mapping", value)


@dataclass(frozen=True)
class SendRequestConfig:
    """Options for a detailed send request."""
    allow_duplicates: bool = False
    app_id: Optional[str] = None
    scheduled_date: Optional[DateLike] = None
    show_message_list: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return _compact(
            allowDuplicates=self.allow_duplicates,
            appId=self.app_id,
            scheduledDate=format_date(self.scheduled_date, "scheduled_date")
            if self.scheduled_date is not None else None,
            showMessageList=self.show_message_list,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# KAKAO
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class KakaoChannelCategory:
    """Business category of a Kakao channel."""
    code: str
    name: str

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "KakaoChannelCategory":
        return cls(code=data.get("code", ""), name=data.get("name", ""))


@dataclass(frozen=True)
class KakaoChannel:
    """Kakao channel linked to the account."""
    channel_id: str
    search_id: Optional[str] = None
    account_id: Optional[str] = None
    phone_number: Optional[str] = None
    shared_account_ids: Tuple[str, ...] = ()
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "KakaoChannel":
        """Create KakaoChannel from SOLAPI API response."""
        return cls(
            channel_id=data.get("channelId", ""),
            search_id=data.get("searchId"),
            account_id=data.get("accountId"),
            phone_number=data.get("phoneNumber"),
            shared_account_ids=tuple(data.get("sharedAccountIds") or ()),
            date_created=_parse_datetime(data.get("dateCreated")),
            date_updated=_parse_datetime(data.get("dateUpdated")),
        )

    def __str__(self) -> str:
        return f"{self.search_id or '-'} ({self.channel_id})"


@dataclass(frozen=True)
class KakaoAlimtalkTemplateCategory:
    """Alimtalk template category."""
    code: str
    name: str

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "KakaoAlimtalkTemplateCategory":
        return cls(code=data.get("code", ""), name=data.get("name", ""))


@dataclass(frozen=True)
class KakaoAlimtalkTemplate:
    """
    Kakao Alimtalk template.

    ``variables`` lists the ``#{...}`` placeholders of ``content``; when
    the API does not return them they are derived from the content.
    """
    template_id: str
    name: str
    content: str = ""
    channel_id: Optional[str] = None
    channel_group_id: Optional[str] = None
    status: Optional[str] = None
    code: Optional[str] = None
    is_hidden: bool = False
    message_type: Optional[str] = None
    emphasize_type: Optional[str] = None
    emphasize_title: Optional[str] = None
    emphasize_subtitle: Optional[str] = None
    extra: Optional[str] = None
    ad: Optional[str] = None
    security_flag: bool = False
    image_id: Optional[str] = None
    category_code: Optional[str] = None
    assign_type: Optional[str] = None
    commentable: bool = False
    buttons: Tuple[KakaoButton, ...] = ()
    quick_replies: Tuple[Dict[str, Any], ...] = ()
    comments: Tuple[Dict[str, Any], ...] = ()
    variables: Tuple[str, ...] = ()
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "KakaoAlimtalkTemplate":
        """Create KakaoAlimtalkTemplate from SOLAPI API response."""
        content = data.get("content") or ""

        raw_variables = data.get("variables")
        if raw_variables:
            variables = tuple(
                v.get("name", "") if isinstance(v, Mapping) else str(v)
                for v in raw_variables
            )
        else:
            variables = extract_template_variables(content)

        return cls(
            template_id=data.get("templateId", ""),
            name=data.get("name", ""),
            content=content,
            channel_id=data.get("channelId"),
            channel_group_id=data.get("channelGroupId"),
            status=data.get("status"),
            code=data.get("code"),
            is_hidden=bool(data.get("isHidden", False)),
            message_type=data.get("messageType"),
            emphasize_type=data.get("emphasizeType"),
            emphasize_title=data.get("emphasizeTitle"),
            emphasize_subtitle=data.get("emphasizeSubtitle"),
            extra=data.get("extra"),
            ad=data.get("ad"),
            security_flag=bool(data.get("securityFlag", False)),
            image_id=data.get("imageId"),
            category_code=data.get("categoryCode"),
            assign_type=data.get("assignType"),
            commentable=bool(data.get("commentable", False)),
            buttons=tuple(KakaoButton.from_api(b) for b in data.get("buttons") or []),
            quick_replies=tuple(data.get("quickReplies") or ()),
            comments=tuple(data.get("comments") or ()),
            variables=variables,
            date_created=_parse_datetime(data.get("dateCreated")),
            date_updated=_parse_datetime(data.get("dateUpdated")),
        )

    @property
    def is_approved(self) -> bool:
        """Only approved templates can be used for sending."""
        return self.status == TemplateStatus.APPROVED.value

    def render(self, values: Mapping[str, str]) -> str:
        """Fill the template placeholders, leaving unknown ones untouched."""
        return _TEMPLATE_VARIABLE.sub(
            lambda m: str(values.get(m.group(0), m.group(0))),
            self.content,
        )


def extract_template_variables(content: str) -> Tuple[str, ...]:
    """Return the distinct ``#{...}`` placeholders of a template, in order."""
    seen: List[str] = []
    for match in _TEMPLATE_VARIABLE.findall(content or ""):
        if match not in seen:
            seen.append(match)
    return tuple(seen)


# ═══════════════════════════════════════════════════════════════════════════════
# BLOCK LISTS
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Black:
    """080 denial entry."""
    black_id: str
    type: Optional[str] = None
    sender_number: Optional[str] = None
    recipient_number: Optional[str] = None
    account_id: Optional[str] = None
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Black":
        return cls(
            black_id=data.get("blackId", ""),
            type=data.get("type"),
            sender_number=data.get("senderNumber"),
            recipient_number=data.get("recipientNumber"),
            account_id=data.get("accountId"),
            date_created=_parse_datetime(data.get("dateCreated")),
            date_updated=_parse_datetime(data.get("dateUpdated")),
        )


@dataclass(frozen=True)
class BlockGroup:
    """Group of blocked recipient numbers."""
    block_group_id: str
    name: Optional[str] = None
    status: Optional[str] = None
    use_all: bool = False
    sender_numbers: Tuple[str, ...] = ()
    account_id: Optional[str] = None
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "BlockGroup":
        return cls(
            block_group_id=data.get("blockGroupId", ""),
            name=data.get("name"),
            status=data.get("status"),
            use_all=bool(data.get("useAll", False)),
            sender_numbers=tuple(data.get("senderNumbers") or ()),
            account_id=data.get("accountId"),
            date_created=_parse_datetime(data.get("dateCreated")),
            date_updated=_parse_datetime(data.get("dateUpdated")),
        )


@dataclass(frozen=True)
class BlockNumber:
    """Blocked recipient number."""
    block_number_id: str
    phone_number: Optional[str] = None
    memo: Optional[str] = None
    block_group_ids: Tuple[str, ...] = ()
    account_id: Optional[str] = None
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "BlockNumber":
        return cls(
            block_number_id=data.get("blockNumberId", ""),
            phone_number=data.get("phoneNumber"),
            memo=data.get("memo"),
            block_group_ids=tuple(data.get("blockGroupIds") or ()),
            account_id=data.get("accountId"),
            date_created=_parse_datetime(data.get("dateCreated")),
            date_updated=_parse_datetime(data.get("dateUpdated")),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# RESPONSES
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Page(Generic[T]):
    """
    One page of a ``startKey``/``nextKey`` paginated listing.

    ``next_key is None`` is the only signal that no further page exists;
    otherwise pass it back as the next request's ``start_key``.
    """
    start_key: Optional[str]
    limit: int
    next_key: Optional[str]
    items: Tuple[T, ...] = field(default_factory=tuple)

    @property
    def has_next(self) -> bool:
        return self.next_key is not None

    @classmethod
    def from_api(
        cls,
        data: Mapping[str, Any],
        items_key: str,
        parser: Callable[[Mapping[str, Any]], T],
    ) -> "Page[T]":
        """
        Build a page from a listing response.

        Items may come as a list or as a mapping of id to item.

        Raises:
            SolapiDataError: If the items field is missing or malformed
        """
        raw_items = data.get(items_key)
        if raw_items is None:
            raise SolapiDataError(
                f"Response missing '{items_key}' field",
                expected="list or dict",
                got="None"
            )

        if isinstance(raw_items, Mapping):
            raw_items = list(raw_items.values())
        elif not isinstance(raw_items, list):
            raise SolapiDataError(
                f"Response '{items_key}' field is not a list",
                expected="list or dict",
                got=type(raw_items).__name__
            )

        return cls(
            start_key=data.get("startKey"),
            limit=int(data.get("limit") or 0),
            next_key=data.get("nextKey") or None,
            items=tuple(parser(item) for item in raw_items),
        )


@dataclass(frozen=True)
class Balance:
    """Account cash balance and points."""
    balance: float
    point: float

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> "Balance":
        return cls(
            balance=float(data.get("balance") or 0),
            point=float(data.get("point") or 0),
        )


def parse_list(data: Any, parser: Callable[[Mapping[str, Any]], T]) -> List[T]:
    """
    Parse a bare JSON array response into models.

    Raises:
        SolapiDataError: If the response is not a list
    """
    if not isinstance(data, Sequence) or isinstance(data, (str, bytes)):
        raise SolapiDataError(
            "Invalid response type",
            expected="list",
            got=type(data).__name__
        )
    return [parser(item) for item in data]
