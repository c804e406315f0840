"""Tests for specmine.extraction.objects -- model records."""

from __future__ import annotations

import pytest
from bs4 import BeautifulSoup

from specmine.exceptions import StructureError
from specmine.extraction.objects import build_model, extract_models
from specmine.extraction.segmenter import model_sections
from specmine.source.render import parse_document

LINK_BASE = "https://discord.com/developers/docs/resources/channel"


class TestChannelModels:
    def test_keys(self, channel_page: BeautifulSoup) -> None:
        models = extract_models(channel_page, "channel", LINK_BASE)
        assert list(models) == ["channel", "overwrite"]

    def test_channel_model(self, channel_page: BeautifulSoup) -> None:
        channel = extract_models(channel_page, "channel", LINK_BASE)["channel"]
        assert channel.type == "object"
        assert channel.resource == "channel"
        assert channel.description == "Represents a guild or DM channel within Discord."
        assert channel.link == f"{LINK_BASE}#channel-object"
        assert list(channel.properties) == [
            "id",
            "type",
            "guild_id",
            "name",
            "recipients",
            "owner_id",
            "permission_overwrites",
        ]

    def test_property_types(self, channel_page: BeautifulSoup) -> None:
        props = extract_models(channel_page, "channel", LINK_BASE)["channel"].properties
        assert props["id"].model_dump(exclude_none=True) == {
            "type": "snowflake",
            "description": "the id of this channel",
        }
        assert props["name"].nullable is True
        assert props["name"].required is False
        assert props["recipients"].type == "Array<user>"
        assert props["owner_id"].type == "snowflake"
        assert props["permission_overwrites"].type == "array"

    def test_unrelated_tables_are_ignored(self, channel_page: BeautifulSoup) -> None:
        props = extract_models(channel_page, "channel")["channel"].properties
        assert "GUILD_TEXT" not in props

    def test_heading_without_id_is_skipped(self, channel_page: BeautifulSoup) -> None:
        sections = list(model_sections(channel_page))
        with pytest.raises(StructureError):
            build_model(sections[-1], "channel")
        assert "followedChannel" not in extract_models(channel_page, "channel")


class TestMarkdownModels:
    def test_guild_models(self, guild_page: BeautifulSoup) -> None:
        models = extract_models(guild_page, "guild")
        assert list(models) == ["guild", "guildMember"]

        guild = models["guild"]
        assert guild.properties["members"].type == "Array<guild/member>"
        assert guild.properties["owner"].required is False
        assert guild.properties["region"].nullable is True

        member = models["guildMember"]
        assert member.description == ""
        assert member.properties["roles"].type == "array"

    def test_topic_table_without_thead(self, gateway_html: str) -> None:
        models = extract_models(parse_document(gateway_html, "html"), "gateway")
        payload = models["gatewayPayload"]
        assert list(payload.properties) == ["op", "d", "s"]
        assert payload.properties["d"].type == "mixed (any JSON value)"
        assert payload.properties["d"].nullable is True


class TestEmptySections:
    def test_model_without_tables_has_no_properties(self) -> None:
        soup = BeautifulSoup('<h3 id="ban-object">Ban Object</h3><p>A ban.</p>', "html.parser")
        ban = extract_models(soup, "guild")["ban"]
        assert ban.properties == {}
        assert ban.description == "A ban."
