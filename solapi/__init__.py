"""
Async client library for the SOLAPI messaging REST API.

This package contains:
- service: SolapiMessageService facade, one method per API operation
- queries: request finalizers and query-string serialization
- models: domain models mapped from API responses
- transport: transport protocol and the default httpx implementation
- exceptions: custom exception hierarchy
"""

from solapi.exceptions import (
    SolapiError,
    SolapiConnectionError,
    SolapiAPIError,
    SolapiDataError,
    MessageNotReceivedError,
    ValidationError,
)

from solapi.dates import format_date

from solapi.queries import (
    DateRange,
    GetBlacksRequest,
    GetBlockGroupsRequest,
    GetBlockNumbersRequest,
    GetGroupMessagesRequest,
    GetGroupsRequest,
    GetKakaoAlimtalkTemplatesRequest,
    GetKakaoChannelsRequest,
    GetMessagesRequest,
    GetStatisticsRequest,
    build_query_string,
)

from solapi.models import (
    Balance,
    Black,
    BlockGroup,
    BlockNumber,
    FileType,
    KakaoAlimtalkTemplate,
    KakaoAlimtalkTemplateCategory,
    KakaoButton,
    KakaoChannel,
    KakaoChannelCategory,
    KakaoOption,
    Message,
    MessageType,
    Page,
    SendRequestConfig,
)

from solapi.pagination import KeyPaginator
from solapi.transport import AuthInfo, HttpxTransport, RequestConfig, Transport
from solapi.service import SolapiMessageService

__all__ = [
    # Exceptions
    "SolapiError",
    "SolapiConnectionError",
    "SolapiAPIError",
    "SolapiDataError",
    "MessageNotReceivedError",
    "ValidationError",
    # Dates
    "format_date",
    # Requests
    "DateRange",
    "GetBlacksRequest",
    "GetBlockGroupsRequest",
    "GetBlockNumbersRequest",
    "GetGroupMessagesRequest",
    "GetGroupsRequest",
    "GetKakaoAlimtalkTemplatesRequest",
    "GetKakaoChannelsRequest",
    "GetMessagesRequest",
    "GetStatisticsRequest",
    "build_query_string",
    # Models
    "Balance",
    "Black",
    "BlockGroup",
    "BlockNumber",
    "FileType",
    "KakaoAlimtalkTemplate",
    "KakaoAlimtalkTemplateCategory",
    "KakaoButton",
    "KakaoChannel",
    "KakaoChannelCategory",
    "KakaoOption",
    "Message",
    "MessageType",
    "Page",
    "SendRequestConfig",
    # Pagination
    "KeyPaginator",
    # Transport
    "AuthInfo",
    "HttpxTransport",
    "RequestConfig",
    "Transport",
    # Service
    "SolapiMessageService",
]
