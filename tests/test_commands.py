# -*- coding: utf-8 -*-
# cython: language_level=3
# BSD 3-Clause License
#
# Copyright (c) 2020-2022, Faster Speeding
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# * Redistributions of source code must retain the above copyright notice, this
#   list of conditions and the following disclaimer.
#
# * Redistributions in binary form must reproduce the above copyright notice,
#   this list of conditions and the following disclaimer in the documentation
#   and/or other materials provided with the distribution.
#
# * Neither the name of the copyright holder nor the names of its
#   contributors may be used to endorse or promote products derived from
#   this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE
# DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE
# FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL
# DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR
# SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY,
# OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE
# OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

# pyright: reportUnknownMemberType=none
# pyright: reportPrivateUsage=none
# This leads to too many false-positives around mocks.

from unittest import mock

import hikari
import pytest

import zeolite


class TestCommandDefinition:
    def test_init(self):
        definition = zeolite.CommandDefinition("ping", "Get the bot's latency")

        assert definition.name == "ping"
        assert definition.description == "Get the bot's latency"
        assert definition.group is None
        assert definition.options == ()
        assert definition.owner_only is False
        assert definition.guild_only is False
        assert definition.cooldown == 0
        assert definition.required_permissions == hikari.Permissions.NONE
        assert definition.name_localizations == {}
        assert definition.description_localizations == {}

    @pytest.mark.parametrize("name", ["Ping", "a" * 33, "", "hello world", "nyaa!"])
    def test_init_with_invalid_name(self, name: str):
        with pytest.raises(ValueError, match="Invalid name provided"):
            zeolite.CommandDefinition(name, "description")

    @pytest.mark.parametrize("name", ["a", "a" * 32, "meow-meow", "snake_case", "日本語"])
    def test_init_with_valid_name(self, name: str):
        assert zeolite.CommandDefinition(name, "description").name == name

    @pytest.mark.parametrize("description", ["", "x" * 101])
    def test_init_with_invalid_description(self, description: str):
        with pytest.raises(ValueError, match="The command description must be between 1 and 100 characters in length"):
            zeolite.CommandDefinition("name", description)

    def test_init_with_negative_cooldown(self):
        with pytest.raises(ValueError, match="Cooldown must be greater than or equal to 0 seconds"):
            zeolite.CommandDefinition("name", "description", cooldown=-1)

    def test_init_normalises_fields(self):
        option = hikari.CommandOption(type=hikari.OptionType.STRING, name="text", description="Text to echo")

        definition = zeolite.CommandDefinition(
            "echo",
            "Echo some text",
            options=[option],
            required_permissions=8,  # type: ignore
            name_localizations={"fr": "écho"},
        )

        assert definition.options == (option,)
        assert isinstance(definition.required_permissions, hikari.Permissions)
        assert definition.required_permissions == hikari.Permissions.ADMINISTRATOR
        with pytest.raises(TypeError):
            definition.name_localizations["de"] = "echo"  # type: ignore

    def test_is_immutable(self):
        definition = zeolite.CommandDefinition("ping", "Get the bot's latency")

        with pytest.raises(AttributeError):
            definition.name = "pong"  # type: ignore

    def test_json(self):
        option = hikari.CommandOption(
            type=hikari.OptionType.INTEGER,
            name="count",
            description="How many",
            is_required=True,
            min_value=1,
            max_value=10,
        )
        definition = zeolite.CommandDefinition(
            "echo",
            "Echo some text",
            options=[option],
            guild_only=True,
            required_permissions=hikari.Permissions.MANAGE_MESSAGES,
            name_localizations={hikari.Locale.FR: "écho"},
            description_localizations={"de": "Text wiederholen"},
        )

        assert definition.json() == {
            "type": 1,
            "name": "echo",
            "description": "Echo some text",
            "options": [
                {
                    "type": 4,
                    "name": "count",
                    "description": "How many",
                    "required": True,
                    "min_value": 1,
                    "max_value": 10,
                }
            ],
            "name_localizations": {"fr": "écho"},
            "description_localizations": {"de": "Text wiederholen"},
            "default_member_permissions": str(int(hikari.Permissions.MANAGE_MESSAGES)),
            "dm_permission": False,
        }

    def test_json_with_choices(self):
        option = hikari.CommandOption(
            type=hikari.OptionType.STRING,
            name="colour",
            description="A colour",
            choices=[hikari.CommandChoice(name="Red", value="red")],
        )
        definition = zeolite.CommandDefinition("colour", "Pick a colour", options=[option])

        result = definition.json()

        assert result["options"] == [
            {
                "type": 3,
                "name": "colour",
                "description": "A colour",
                "required": False,
                "choices": [{"name": "Red", "value": "red"}],
            }
        ]
        assert result["default_member_permissions"] is None
        assert result["dm_permission"] is True


class TestCommand:
    def test_properties(self):
        mock_callback = mock.AsyncMock()
        definition = zeolite.CommandDefinition("ping", "Get the bot's latency")

        command = zeolite.Command(mock_callback, definition)

        assert command.callback is mock_callback
        assert command.definition is definition
        assert command.name == "ping"

    def test_json(self):
        definition = zeolite.CommandDefinition("ping", "Get the bot's latency")

        assert zeolite.Command(mock.AsyncMock(), definition).json() == definition.json()

    def test_pre_load(self):
        command = zeolite.Command(mock.AsyncMock(), zeolite.CommandDefinition("ping", "Get the bot's latency"))

        assert command.pre_load(mock.Mock()) is True

    def test_with_pre_load(self):
        mock_client = mock.Mock()
        mock_pre_load = mock.Mock(return_value=False)
        command = zeolite.Command(mock.AsyncMock(), zeolite.CommandDefinition("ping", "Get the bot's latency"))

        result = command.with_pre_load(mock_pre_load)

        assert result is mock_pre_load
        assert command.pre_load(mock_client) is False
        mock_pre_load.assert_called_once_with(mock_client)

    @pytest.mark.asyncio()
    async def test_run(self):
        mock_callback = mock.AsyncMock()
        mock_ctx = mock.AsyncMock()
        command = zeolite.Command(mock_callback, zeolite.CommandDefinition("ping", "Get the bot's latency"))

        await command.run(mock_ctx)

        mock_ctx.call_with_async_di.assert_awaited_once_with(mock_callback, mock_ctx)


def test_as_command():
    mock_callback = mock.AsyncMock()

    command = zeolite.as_command(
        "shutdown",
        "Shut the bot down",
        group="admin",
        owner_only=True,
        cooldown=5,
        description_localizations={"fr": "Éteindre le bot"},
    )(mock_callback)

    assert isinstance(command, zeolite.Command)
    assert command.callback is mock_callback
    assert command.definition == zeolite.CommandDefinition(
        "shutdown",
        "Shut the bot down",
        group="admin",
        owner_only=True,
        cooldown=5,
        description_localizations={"fr": "Éteindre le bot"},
    )


def test_as_command_with_invalid_name():
    with pytest.raises(ValueError, match="Invalid name provided"):
        zeolite.as_command("NO", "Shout")
