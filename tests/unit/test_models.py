"""
Tests for solapi.models module.
"""
import dataclasses
import pytest
from datetime import datetime, timezone

from solapi.exceptions import SolapiDataError, ValidationError
from solapi.models import (
    Balance,
    Black,
    BlockGroup,
    BlockNumber,
    KakaoAlimtalkTemplate,
    KakaoChannel,
    KakaoChannelCategory,
    KakaoOption,
    Message,
    MessageType,
    Page,
    SendRequestConfig,
    coerce_message,
    extract_template_variables,
    parse_list,
)


class TestMessage:
    """Tests for Message dataclass."""

    def test_hyphens_stripped(self):
        message = Message(to="010-1234-5678", from_="02-930-2266", text="hi")
        assert message.to == "01012345678"
        assert message.from_ == "029302266"

    def test_no_scheduled_date_field(self):
        """Scheduling is set on SendRequestConfig, not per message."""
        names = {f.name for f in dataclasses.fields(Message)}
        assert "scheduled_date" not in names
        with pytest.raises(TypeError):
            Message(to="01012345678", scheduled_date="2024-01-01T00:00:00+09:00")

    def test_multiple_recipients(self):
        message = Message(to=["010-1111-2222", "01033334444"], text="hi")
        assert message.to == ("01011112222", "01033334444")
        assert message.to_dict()["to"] == ["01011112222", "01033334444"]

    def test_to_dict_omits_none(self):
        """Unset fields should not be sent."""
        message = Message(to="01012345678", from_="029302266", text="hi", type=MessageType.SMS)
        assert message.to_dict() == {
            "to": "01012345678",
            "from": "029302266",
            "text": "hi",
            "type": "SMS",
        }

    def test_from_api(self, sample_message):
        message = Message.from_api(sample_message)
        assert message.to == "01012345678"
        assert message.text == "Hello from tests"

    def test_from_api_requires_recipient(self):
        with pytest.raises(ValidationError) as exc_info:
            Message.from_api({"text": "no recipient"})
        assert exc_info.value.field == "to"

    def test_kakao_options(self):
        message = Message.from_api({
            "to": "01012345678",
            "from": "029302266",
            "kakaoOptions": {
                "pfId": "KA01PF1",
                "templateId": "KA01TP1",
                "variables": {"#{name}": "홍길동"},
                "buttons": [{"buttonName": "Open", "buttonType": "WL", "linkMo": "https://m.example.com"}],
            },
        })
        assert isinstance(message.kakao_options, KakaoOption)
        kakao = message.to_dict()["kakaoOptions"]
        assert kakao["pfId"] == "KA01PF1"
        assert kakao["variables"] == {"#{name}": "홍길동"}
        assert kakao["buttons"] == [
            {"buttonName": "Open", "buttonType": "WL", "linkMo": "https://m.example.com"}
        ]
        assert kakao["disableSms"] is False

    def test_immutable(self):
        message = Message(to="01012345678")
        with pytest.raises(dataclasses.FrozenInstanceError):
            message.text = "changed"

    def test_coerce_message(self, sample_message):
        message = Message(to="01012345678")
        assert coerce_message(message) is message
        assert coerce_message(sample_message).to == "01012345678"
        with pytest.raises(ValidationError):
            coerce_message("01012345678")


class TestSendRequestConfig:
    """Tests for SendRequestConfig dataclass."""

    def test_defaults(self):
        assert SendRequestConfig().to_dict() == {
            "allowDuplicates": False,
            "showMessageList": False,
        }

    def test_scheduled_date_formatted(self):
        config = SendRequestConfig(app_id="APP1", scheduled_date="2024-05-01T10:00:00.500+09:00")
        payload = config.to_dict()
        assert payload["scheduledDate"] == "2024-05-01T10:00:00+09:00"
        assert payload["appId"] == "APP1"


class TestKakaoAlimtalkTemplate:
    """Tests for KakaoAlimtalkTemplate dataclass."""

    def test_from_api(self, sample_template):
        template = KakaoAlimtalkTemplate.from_api(sample_template)
        assert template.template_id == "KA01TP230101000000000000000001"
        assert template.is_approved
        assert template.buttons[0].button_name == "배송조회"
        assert template.date_created == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_variables_derived_from_content(self, sample_template):
        """Variables should be extracted once each, in order of appearance."""
        template = KakaoAlimtalkTemplate.from_api(sample_template)
        assert template.variables == ("#{name}", "#{order}")

    def test_variables_from_api(self, sample_template):
        sample_template["variables"] = [{"name": "#{name}"}]
        template = KakaoAlimtalkTemplate.from_api(sample_template)
        assert template.variables == ("#{name}",)

    def test_render(self, sample_template):
        template = KakaoAlimtalkTemplate.from_api(sample_template)
        rendered = template.render({"#{name}": "홍길동"})
        assert rendered.startswith("홍길동님")
        assert "#{order}" in rendered

    def test_bad_dates_become_none(self, sample_template):
        sample_template["dateCreated"] = "yesterday"
        assert KakaoAlimtalkTemplate.from_api(sample_template).date_created is None

    def test_extract_template_variables_empty(self):
        assert extract_template_variables("") == ()


class TestKakaoChannel:
    """Tests for KakaoChannel dataclass."""

    def test_from_api(self, sample_channel):
        channel = KakaoChannel.from_api(sample_channel)
        assert channel.channel_id == "KA01PF230101000000000000000001"
        assert channel.shared_account_ids == ("19010100000001",)
        assert str(channel) == "solapi (KA01PF230101000000000000000001)"

    def test_category(self):
        category = KakaoChannelCategory.from_api({"code": "00100010001", "name": "건강,병원"})
        assert category.code == "00100010001"


class TestPage:
    """Tests for Page dataclass."""

    def test_list_items(self, sample_channel):
        page = Page.from_api(
            {"startKey": None, "limit": 20, "nextKey": None, "channelList": [sample_channel]},
            "channelList",
            KakaoChannel.from_api,
        )
        assert len(page.items) == 1
        assert not page.has_next

    def test_mapping_items(self):
        """Items keyed by id should be flattened to their values."""
        page = Page.from_api(
            {
                "startKey": "BG0",
                "limit": 2,
                "nextKey": "BG2",
                "blockGroups": {
                    "BG1": {"blockGroupId": "BG1", "name": "first", "useAll": True},
                    "BG2": {"blockGroupId": "BG2", "name": "second"},
                },
            },
            "blockGroups",
            BlockGroup.from_api,
        )
        assert [g.block_group_id for g in page.items] == ["BG1", "BG2"]
        assert page.items[0].use_all is True
        assert page.has_next
        assert page.next_key == "BG2"

    def test_missing_items(self):
        with pytest.raises(SolapiDataError) as exc_info:
            Page.from_api({"limit": 20, "nextKey": None}, "blackList", Black.from_api)
        assert "blackList" in str(exc_info.value)

    def test_invalid_items(self):
        with pytest.raises(SolapiDataError) as exc_info:
            Page.from_api({"blackList": "oops"}, "blackList", Black.from_api)
        assert exc_info.value.got == "str"


class TestOtherModels:
    """Tests for Black, BlockNumber, Balance and list parsing."""

    def test_black(self):
        black = Black.from_api({
            "blackId": "B1", "type": "DENIAL", "senderNumber": "0801234567",
            "recipientNumber": "01012345678", "dateCreated": "2024-01-01T00:00:00Z",
        })
        assert black.recipient_number == "01012345678"
        assert black.date_created.tzinfo is not None

    def test_block_number(self):
        number = BlockNumber.from_api({
            "blockNumberId": "N1", "phoneNumber": "01012345678", "blockGroupIds": ["BG1"],
        })
        assert number.block_group_ids == ("BG1",)

    def test_balance(self):
        balance = Balance.from_api({"balance": "1500.5", "point": 200})
        assert balance == Balance(balance=1500.5, point=200.0)

    def test_parse_list_rejects_dict(self):
        with pytest.raises(SolapiDataError):
            parse_list({"code": "1"}, KakaoChannelCategory.from_api)
