"""
SOLAPI message service.

Single entry point exposing one async method per API operation. Each method
finalizes its request, builds the URL from the base URL and a versioned path,
delegates the call to the injected transport and maps the decoded response
into models.

Usage:
    async with HttpxTransport(signer=my_signer) as transport:
        service = SolapiMessageService(api_key, api_secret, transport)
        await service.send(Message(to="01000000000", from_="029302266", text="hello"))
"""
import warnings
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from solapi.config import AgentConfig, config
from solapi.dates import DateLike, format_date
from solapi.exceptions import MessageNotReceivedError, SolapiDataError, ValidationError
from solapi.models import (
    Balance,
    Black,
    BlockGroup,
    BlockNumber,
    FileType,
    KakaoAlimtalkTemplate,
    KakaoAlimtalkTemplateCategory,
    KakaoChannel,
    KakaoChannelCategory,
    Message,
    MessageInput,
    Page,
    SendRequestConfig,
    coerce_message,
    parse_list,
)
from solapi.observability import get_logger
from solapi.queries import (
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
    finalize_blacks_request,
    finalize_block_groups_request,
    finalize_block_numbers_request,
    finalize_group_messages_request,
    finalize_groups_request,
    finalize_kakao_channels_request,
    finalize_kakao_templates_request,
    finalize_messages_request,
    finalize_statistics_request,
)
from solapi.storage import encode_file
from solapi.transport import AuthInfo, RequestConfig, Transport
from solapi.validators import (
    validate_file_type,
    validate_id_list,
    validate_identifier,
    validate_message_batch,
)

logger = get_logger(__name__)

JSON = Dict[str, Any]


class SolapiMessageService:
    """
    Async facade over the SOLAPI REST API.

    Args:
        api_key: SOLAPI API key
        api_secret: SOLAPI API secret
        transport: Object implementing ``fetch(auth_info, request_config, payload)``
        base_url: API base URL (defaults to SOLAPI_BASE_URL env var)
        agent: Client metadata sent with group and send requests
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        transport: Transport,
        base_url: str = None,
        agent: AgentConfig = None,
    ):
        self.auth_info = AuthInfo(api_key=api_key, api_secret=api_secret)
        self.transport = transport
        self.base_url = (base_url or config.api.base_url).rstrip("/")
        self.agent = agent or config.agent

    async def _fetch(
        self,
        method: str,
        path: str,
        payload: Optional[Any] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        request_config = RequestConfig(
            method=method,
            url=f"{self.base_url}{path}{build_query_string(query)}",
        )
        logger.debug(f"{method} {path}", extra={"url": request_config.url})
        return await self.transport.fetch(self.auth_info, request_config, payload)

    # ═══════════════════════════════════════════════════════════════════════════
    # SENDING
    # ═══════════════════════════════════════════════════════════════════════════

    async def send(
        self,
        messages: Union[MessageInput, Sequence[MessageInput]],
        options: Optional[SendRequestConfig] = None,
    ) -> JSON:
        """
        Send one or more messages (up to 10,000) in a single request.

        Partial failures are returned as a normal response with per-message
        status in ``failedMessageList``.

        Args:
            messages: A message or a list of messages
            options: Duplicates, app id, scheduled date, message list echo

        Returns:
            Raw API response, unmodified

        Raises:
            ValidationError: Empty or malformed input (no request is issued)
            MessageNotReceivedError: Every message of the batch failed
        """
        if isinstance(messages, (Message, Mapping)):
            batch = [coerce_message(messages)]
        elif isinstance(messages, Sequence) and not isinstance(messages, (str, bytes)):
            batch = [coerce_message(m) for m in messages]
        else:
            raise ValidationError("messages", "Must be a message or a list of messages", messages)

        validate_message_batch(batch)

        payload = {
            "messages": [message.to_dict() for message in batch],
            **(options or SendRequestConfig()).to_dict(),
            "agent": self.agent.to_dict(),
        }
        response = await self._fetch("POST", "/messages/v4/send-many/detail", payload)

        failed = response.get("failedMessageList") or []
        count = (response.get("groupInfo") or {}).get("count") or {}
        total = count.get("total")
        registered_failed = count.get("registeredFailed")
        if failed and total is not None and total == registered_failed:
            logger.warning(
                f"All {len(failed)} messages failed to register",
                extra={"group_id": (response.get("groupInfo") or {}).get("groupId")}
            )
            raise MessageNotReceivedError(failed)

        return response

    async def send_one(self, message: MessageInput, app_id: str = None) -> JSON:
        """Send a single message immediately."""
        payload = {
            "message": coerce_message(message).to_dict(),
            "agent": self.agent.to_dict(),
        }
        if app_id is not None:
            payload["appId"] = app_id
        return await self._fetch("POST", "/messages/v4/send", payload)

    async def send_one_future(self, message: MessageInput, scheduled_date: DateLike) -> JSON:
        """
        Schedule a single message.

        Runs create group -> add message -> schedule group. A failing step
        stops the sequence; the group created so far is left as is.
        """
        batch = [coerce_message(message)]
        scheduled = format_date(scheduled_date, "scheduled_date")
        group_id = await self.create_group()
        await self.add_messages_to_group(group_id, batch)
        return await self.reserve_group(group_id, scheduled)

    async def send_many(
        self,
        messages: Sequence[MessageInput],
        allow_duplicates: bool = False,
        app_id: str = None,
    ) -> JSON:
        """Deprecated: use ``send``."""
        warnings.warn(
            "send_many is deprecated, use send instead",
            DeprecationWarning,
            stacklevel=2,
        )
        validate_message_batch(messages)
        payload = {
            "messages": [coerce_message(m).to_dict() for m in messages],
            "allowDuplicates": allow_duplicates,
            "agent": self.agent.to_dict(),
        }
        if app_id is not None:
            payload["appId"] = app_id
        return await self._fetch("POST", "/messages/v4/send-many", payload)

    async def send_many_future(
        self,
        messages: Sequence[MessageInput],
        scheduled_date: DateLike,
        allow_duplicates: bool = False,
        app_id: str = None,
    ) -> JSON:
        """Deprecated: use ``send`` with ``SendRequestConfig(scheduled_date=...)``."""
        warnings.warn(
            "send_many_future is deprecated, use send with a scheduled_date instead",
            DeprecationWarning,
            stacklevel=2,
        )
        batch = validate_message_batch([coerce_message(m) for m in messages])
        scheduled = format_date(scheduled_date, "scheduled_date")
        group_id = await self.create_group(allow_duplicates, app_id)
        await self.add_messages_to_group(group_id, batch)
        return await self.reserve_group(group_id, scheduled)

    # ═══════════════════════════════════════════════════════════════════════════
    # GROUPS
    # ═══════════════════════════════════════════════════════════════════════════

    async def create_group(self, allow_duplicates: bool = False, app_id: str = None) -> str:
        """
        Create an empty message group.

        Returns:
            The new group id
        """
        payload = {
            **self.agent.to_dict(),
            "allowDuplicates": allow_duplicates,
        }
        if app_id is not None:
            payload["appId"] = app_id

        response = await self._fetch("POST", "/messages/v4/groups", payload)
        group_id = response.get("groupId") if isinstance(response, Mapping) else None
        if not group_id:
            raise SolapiDataError("Response missing 'groupId' field", expected="str", got="None")

        logger.info(f"Created message group {group_id}")
        return group_id

    async def add_messages_to_group(
        self,
        group_id: str,
        messages: Sequence[MessageInput],
    ) -> JSON:
        """Add up to 10,000 messages to a group."""
        validate_identifier(group_id, "group_id")
        validate_message_batch(messages)
        payload = {"messages": [coerce_message(m).to_dict() for m in messages]}
        return await self._fetch("PUT", f"/messages/v4/groups/{group_id}/messages", payload)

    async def send_group(self, group_id: str) -> JSON:
        """Send every message of a group now."""
        validate_identifier(group_id, "group_id")
        return await self._fetch("POST", f"/messages/v4/groups/{group_id}/send")

    async def reserve_group(self, group_id: str, scheduled_date: DateLike) -> JSON:
        """Schedule a group for sending at ``scheduled_date``."""
        validate_identifier(group_id, "group_id")
        payload = {"scheduledDate": format_date(scheduled_date, "scheduled_date")}
        return await self._fetch("POST", f"/messages/v4/groups/{group_id}/schedule", payload)

    async def get_group(self, group_id: str) -> JSON:
        validate_identifier(group_id, "group_id")
        return await self._fetch("GET", f"/messages/v4/groups/{group_id}")

    async def get_groups(self, request: Optional[GetGroupsRequest] = None) -> JSON:
        return await self._fetch(
            "GET", "/messages/v4/groups", query=finalize_groups_request(request)
        )

    async def get_group_messages(
        self,
        group_id: str,
        request: Optional[GetGroupMessagesRequest] = None,
    ) -> JSON:
        validate_identifier(group_id, "group_id")
        return await self._fetch(
            "GET",
            f"/messages/v4/groups/{group_id}/messages",
            query=finalize_group_messages_request(request),
        )

    async def remove_group_messages(
        self,
        group_id: str,
        message_ids: Union[str, Sequence[str]],
    ) -> JSON:
        """Remove specific messages from a group that has not been sent."""
        validate_identifier(group_id, "group_id")
        ids = validate_id_list(message_ids, "message_ids")
        if not ids:
            raise ValidationError("message_ids", "At least one message id is required")
        return await self._fetch(
            "DELETE",
            f"/messages/v4/groups/{group_id}/messages",
            {"messageIds": ids},
        )

    async def remove_reservation_to_group(self, group_id: str) -> JSON:
        """Cancel a scheduled group; all its messages are marked failed."""
        validate_identifier(group_id, "group_id")
        return await self._fetch("DELETE", f"/messages/v4/groups/{group_id}/schedule")

    async def remove_group(self, group_id: str) -> JSON:
        validate_identifier(group_id, "group_id")
        return await self._fetch("DELETE", f"/messages/v4/groups/{group_id}")

    # ═══════════════════════════════════════════════════════════════════════════
    # MESSAGES / STATISTICS / CASH
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_messages(self, request: Optional[GetMessagesRequest] = None) -> JSON:
        return await self._fetch(
            "GET", "/messages/v4/list", query=finalize_messages_request(request)
        )

    async def get_statistics(self, request: Optional[GetStatisticsRequest] = None) -> JSON:
        return await self._fetch(
            "GET", "/messages/v4/statistics", query=finalize_statistics_request(request)
        )

    async def get_balance(self) -> Balance:
        response = await self._fetch("GET", "/cash/v1/balance")
        return Balance.from_api(response)

    # ═══════════════════════════════════════════════════════════════════════════
    # STORAGE
    # ═══════════════════════════════════════════════════════════════════════════

    async def upload_file(
        self,
        file_path: str,
        file_type: Union[FileType, str],
        name: str = None,
        link: str = None,
    ) -> JSON:
        """
        Upload a file (local path or URL).

        Args:
            file_path: Local path or reachable http(s) URL
            file_type: KAKAO, MMS, DOCUMENT, RCS or FAX
            name: File name
            link: Click-through link, required for Kakao Friendtalk images

        Returns:
            Raw API response including ``fileId``
        """
        file_type = validate_file_type(
            file_type.value if isinstance(file_type, FileType) else file_type
        )
        payload = {
            "file": await encode_file(file_path),
            "type": file_type,
        }
        if name is not None:
            payload["name"] = name
        if link is not None:
            payload["link"] = link
        return await self._fetch("POST", "/storage/v1/files", payload)

    # ═══════════════════════════════════════════════════════════════════════════
    # KAKAO CHANNELS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_kakao_channel_categories(self) -> List[KakaoChannelCategory]:
        response = await self._fetch("GET", "/kakao/v2/channels/categories")
        return parse_list(response, KakaoChannelCategory.from_api)

    async def get_kakao_channels(
        self,
        request: Optional[GetKakaoChannelsRequest] = None,
    ) -> Page[KakaoChannel]:
        response = await self._fetch(
            "GET", "/kakao/v2/channels", query=finalize_kakao_channels_request(request)
        )
        return Page.from_api(response, "channelList", KakaoChannel.from_api)

    async def get_kakao_channel(self, channel_id: str) -> KakaoChannel:
        validate_identifier(channel_id, "channel_id")
        response = await self._fetch("GET", f"/kakao/v2/channels/{channel_id}")
        return KakaoChannel.from_api(response)

    async def request_kakao_channel_token(self, search_id: str, phone_number: str) -> JSON:
        """Ask Kakao to send a channel link token to the channel admin's phone."""
        return await self._fetch(
            "POST",
            "/kakao/v2/channels/token",
            {"searchId": search_id, "phoneNumber": phone_number},
        )

    async def create_kakao_channel(
        self,
        search_id: str,
        phone_number: str,
        category_code: str,
        token: str,
    ) -> KakaoChannel:
        """
        Link a Kakao channel.

        Call ``get_kakao_channel_categories`` and ``request_kakao_channel_token``
        first to obtain the category code and token.
        """
        response = await self._fetch(
            "POST",
            "/kakao/v2/channels",
            {
                "searchId": search_id,
                "phoneNumber": phone_number,
                "categoryCode": category_code,
                "token": token,
            },
        )
        return KakaoChannel.from_api(response)

    async def remove_kakao_channel(self, channel_id: str) -> KakaoChannel:
        """Unlink a channel. All templates of the channel are removed too."""
        validate_identifier(channel_id, "channel_id")
        response = await self._fetch("DELETE", f"/kakao/v2/channels/{channel_id}")
        return KakaoChannel.from_api(response)

    # ═══════════════════════════════════════════════════════════════════════════
    # KAKAO ALIMTALK TEMPLATES
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_kakao_alimtalk_templates(
        self,
        request: Optional[GetKakaoAlimtalkTemplatesRequest] = None,
    ) -> Page[KakaoAlimtalkTemplate]:
        response = await self._fetch(
            "GET", "/kakao/v2/templates", query=finalize_kakao_templates_request(request)
        )
        return Page.from_api(response, "templateList", KakaoAlimtalkTemplate.from_api)

    async def get_kakao_alimtalk_template(self, template_id: str) -> KakaoAlimtalkTemplate:
        validate_identifier(template_id, "template_id")
        response = await self._fetch("GET", f"/kakao/v2/templates/{template_id}")
        return KakaoAlimtalkTemplate.from_api(response)

    async def get_kakao_alimtalk_template_categories(self) -> List[KakaoAlimtalkTemplateCategory]:
        response = await self._fetch("GET", "/kakao/v2/templates/categories")
        return parse_list(response, KakaoAlimtalkTemplateCategory.from_api)

    async def create_kakao_alimtalk_template(
        self,
        data: Mapping[str, Any],
    ) -> KakaoAlimtalkTemplate:
        """
        Create an Alimtalk template.

        ``data`` is the camelCase body (name, channelId, content, categoryCode,
        buttons, ...). Look up ``categoryCode`` with
        ``get_kakao_alimtalk_template_categories`` first.
        """
        response = await self._fetch("POST", "/kakao/v2/templates", dict(data))
        return KakaoAlimtalkTemplate.from_api(response)

    async def request_inspection_kakao_alimtalk_template(
        self,
        template_id: str,
    ) -> KakaoAlimtalkTemplate:
        validate_identifier(template_id, "template_id")
        response = await self._fetch("PUT", f"/kakao/v2/templates/{template_id}/inspection")
        return KakaoAlimtalkTemplate.from_api(response)

    async def cancel_inspection_kakao_alimtalk_template(
        self,
        template_id: str,
    ) -> KakaoAlimtalkTemplate:
        validate_identifier(template_id, "template_id")
        response = await self._fetch(
            "PUT", f"/kakao/v2/templates/{template_id}/inspection/cancel"
        )
        return KakaoAlimtalkTemplate.from_api(response)

    async def update_kakao_alimtalk_template(
        self,
        template_id: str,
        data: Mapping[str, Any],
    ) -> KakaoAlimtalkTemplate:
        """Update a template without requesting inspection."""
        validate_identifier(template_id, "template_id")
        response = await self._fetch("PUT", f"/kakao/v2/templates/{template_id}", dict(data))
        return KakaoAlimtalkTemplate.from_api(response)

    async def update_kakao_alimtalk_template_name(
        self,
        template_id: str,
        name: str,
    ) -> KakaoAlimtalkTemplate:
        """Rename a template, whatever its inspection status."""
        validate_identifier(template_id, "template_id")
        response = await self._fetch(
            "PUT", f"/kakao/v2/templates/{template_id}/name", {"name": name}
        )
        return KakaoAlimtalkTemplate.from_api(response)

    async def remove_kakao_alimtalk_template(self, template_id: str) -> KakaoAlimtalkTemplate:
        """Remove a template (only PENDING or REJECTED templates)."""
        validate_identifier(template_id, "template_id")
        response = await self._fetch("DELETE", f"/kakao/v2/templates/{template_id}")
        return KakaoAlimtalkTemplate.from_api(response)

    async def delete_kakao_alimtalk_template(self, template_id: str) -> KakaoAlimtalkTemplate:
        """Deprecated: use ``remove_kakao_alimtalk_template``."""
        warnings.warn(
            "delete_kakao_alimtalk_template is deprecated, use remove_kakao_alimtalk_template",
            DeprecationWarning,
            stacklevel=2,
        )
        return await self.remove_kakao_alimtalk_template(template_id)

    # ═══════════════════════════════════════════════════════════════════════════
    # BLOCK LISTS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_blacks(self, request: Optional[GetBlacksRequest] = None) -> Page[Black]:
        """080 denial list. ``type=DENIAL`` is always sent."""
        response = await self._fetch(
            "GET", "/iam/v1/black", query=finalize_blacks_request(request)
        )
        return Page.from_api(response, "blackList", Black.from_api)

    async def get_block_groups(
        self,
        request: Optional[GetBlockGroupsRequest] = None,
    ) -> Page[BlockGroup]:
        response = await self._fetch(
            "GET", "/iam/v1/block/groups", query=finalize_block_groups_request(request)
        )
        return Page.from_api(response, "blockGroups", BlockGroup.from_api)

    async def get_block_numbers(
        self,
        request: Optional[GetBlockNumbersRequest] = None,
    ) -> Page[BlockNumber]:
        response = await self._fetch(
            "GET", "/iam/v1/block/numbers", query=finalize_block_numbers_request(request)
        )
        return Page.from_api(response, "blockNumbers", BlockNumber.from_api)
