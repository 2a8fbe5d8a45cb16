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

import json
import pathlib
import shutil
import tempfile
import textwrap
import typing
from unittest import mock

import hikari
import pytest

import zeolite
from zeolite import cli
from zeolite import config

_PING_COMMAND = """
import zeolite

@zeolite.as_command("ping", "Get a pong")
async def ping(ctx: zeolite.Context) -> None:
    await ctx.respond("Pong!")
"""


@pytest.fixture()
def temp_dir() -> typing.Iterator[pathlib.Path]:
    path = pathlib.Path(tempfile.mkdtemp())
    try:
        yield path.resolve()

    finally:
        shutil.rmtree(path)


def _find_starting_listener(mock_bot: mock.Mock, /) -> typing.Any:
    for call in mock_bot.event_manager.subscribe.call_args_list:
        event_type, callback = call.args
        if event_type is hikari.StartingEvent and getattr(callback, "__name__", None) == "load_extensions":
            return callback

    pytest.fail("Extension loader wasn't subscribed")


class TestMergeArgs:
    def test(self):
        args = cli._parser.parse_args(
            [
                "--log-level",
                "debug",
                "--commands",
                "./commands",
                "--extensions",
                "./extensions",
                "--languages",
                "./languages",
                "--owner",
                "5678",
                "--owner",
                "8765",
                "token",
            ]
        )
        settings = config.from_raw({"owners": [1234]})

        result = cli._merge_args(args, settings)

        assert result["log_level"] == "DEBUG"
        assert result["commands_dir"] == str(pathlib.Path("./commands"))
        assert result["extensions_dir"] == str(pathlib.Path("./extensions"))
        assert result["languages_dir"] == str(pathlib.Path("./languages"))
        assert result["owners"] == [1234, 5678, 8765]

    def test_keeps_config_values(self):
        args = cli._parser.parse_args(["token"])
        settings = config.from_raw({"log_level": "WARNING", "commands_dir": "./cmds", "owners": [1234]})

        result = cli._merge_args(args, settings)

        assert result["log_level"] == "WARNING"
        assert result["commands_dir"] == "./cmds"
        assert result["extensions_dir"] is None
        assert result["owners"] == [1234]


class TestBuildClient:
    def test(self, temp_dir: pathlib.Path):
        commands_dir = temp_dir / "commands"
        commands_dir.mkdir()
        (commands_dir / "ping.py").write_text(textwrap.dedent(_PING_COMMAND), encoding="utf-8")
        languages_dir = temp_dir / "languages"
        languages_dir.mkdir()
        (languages_dir / "fr.json").write_text(json.dumps({"hi": "Bonjour"}))
        mock_bot = mock.Mock(hikari.GatewayBotAware)
        settings = config.from_raw(
            {
                "commands_dir": str(commands_dir),
                "languages_dir": str(languages_dir),
                "owners": [1234],
                "default_language": "fr",
            }
        )

        client = cli.build_client(mock_bot, settings)

        assert isinstance(client, zeolite.Client)
        assert client.events is mock_bot.event_manager
        assert list(client.commands) == ["ping"]
        assert client.localiser.strings.lookup("fr", "hi") == "Bonjour"
        assert client.localiser.strings.default_language == "fr"
        assert client.owners.owner_ids == {1234}  # type: ignore
        mock_bot.event_manager.subscribe.assert_any_call(hikari.StartingEvent, client._on_starting_event)

    def test_without_directories(self):
        mock_bot = mock.Mock(hikari.GatewayBotAware)

        client = cli.build_client(mock_bot, config.from_raw({}))

        assert len(client.commands) == 0
        assert client.commands.directory is None
        assert client.localiser.strings.languages == []

    @pytest.mark.asyncio()
    async def test_loads_extensions_on_starting(self, temp_dir: pathlib.Path):
        mock_bot = mock.Mock(hikari.GatewayBotAware)
        client = cli.build_client(mock_bot, config.from_raw({"extensions_dir": str(temp_dir)}))
        listener = _find_starting_listener(mock_bot)

        with mock.patch.object(zeolite.ExtensionRegistry, "load_all") as load_all:
            await listener(mock.Mock(hikari.StartingEvent))

        load_all.assert_awaited_once_with()
        assert client.extensions.directory == temp_dir


class TestMain:
    def test(self, temp_dir: pathlib.Path):
        config_path = temp_dir / "config.json"
        config_path.write_text(json.dumps({"log_level": "warning", "owners": [1234]}))

        with mock.patch.object(hikari, "GatewayBot") as gateway_bot:
            with mock.patch.object(cli, "build_client") as build_client:
                cli.main(["--config", str(config_path), "--owner", "5678", "--intents", "513", "a.token"])

        gateway_bot.assert_called_once_with("a.token", logs="WARNING", intents=hikari.Intents(513))
        build_client.assert_called_once_with(gateway_bot.return_value, mock.ANY)
        settings = build_client.call_args.args[1]
        assert settings["owners"] == [1234, 5678]
        gateway_bot.return_value.run.assert_called_once_with()

    def test_without_config(self):
        with mock.patch.object(hikari, "GatewayBot") as gateway_bot:
            with mock.patch.object(cli, "build_client") as build_client:
                cli.main(["--log-level", "debug", "a.token"])

        gateway_bot.assert_called_once_with("a.token", logs="DEBUG", intents=hikari.Intents.ALL_UNPRIVILEGED)
        assert build_client.call_args.args[1] == config.from_raw({"log_level": "DEBUG"})
        gateway_bot.return_value.run.assert_called_once_with()
