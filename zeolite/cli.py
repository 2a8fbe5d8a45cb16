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
"""Zeolite's standard command-line interface entry point."""
from __future__ import annotations

__all__: list[str] = ["build_client", "main"]

import argparse
import pathlib
import typing

import hikari

from . import _about
from . import clients
from . import config

if typing.TYPE_CHECKING:
    from collections import abc as collections


_parser = argparse.ArgumentParser("zeolite", description="Zeolite command-line interface entry point.")
_parser.add_argument(
    "-v", "--version", action="version", version=f"Zeolite: {_about.__version__}; hikari {hikari.__version__}"
)
_parser.add_argument(
    "-l",
    "--log-level",
    choices=["trace_hikari", "debug", "info", "warning", "error", "critical"],
    default=None,
    help="Logging level (overrides the config file).",
)
_parser.add_argument("-c", "--config", help="Path to a JSON configuration file.", default=None, type=pathlib.Path)
_parser.add_argument("--commands", help="Directory to load commands from.", default=None, type=pathlib.Path)
_parser.add_argument("--extensions", help="Directory to load extensions from.", default=None, type=pathlib.Path)
_parser.add_argument("--languages", help="Directory to load language files from.", default=None, type=pathlib.Path)
_parser.add_argument(
    "--owner", action="append", default=[], type=int, help="ID of a bot owner (may be passed multiple times)."
)
_parser.add_argument(
    "--intents",
    help="Intents to declare for the gateway bot.",
    default=hikari.Intents.ALL_UNPRIVILEGED,
    type=lambda v: hikari.Intents(int(v)),
)
_parser.add_argument("token", help="Token to use for authentication.")


def _merge_args(args: argparse.Namespace, settings: config.Config, /) -> config.Config:
    if args.log_level:
        settings["log_level"] = args.log_level.upper()

    if args.commands:
        settings["commands_dir"] = str(args.commands)

    if args.extensions:
        settings["extensions_dir"] = str(args.extensions)

    if args.languages:
        settings["languages_dir"] = str(args.languages)

    settings["owners"] = [*settings["owners"], *args.owner]
    return settings


def build_client(bot: hikari.GatewayBotAware, settings: config.Config, /) -> clients.Client:
    """Build an event managed client for a gateway bot from a config.

    Commands and languages are loaded immediately while extensions are loaded
    when the bot is starting.

    Parameters
    ----------
    bot
        The gateway bot to build the client for.
    settings
        The config to build the client from.

    Returns
    -------
    zeolite.clients.Client
        The built client.
    """
    client = clients.Client.from_gateway_bot(
        bot,
        owners=settings["owners"],
        declare_commands=settings["declare_commands"],
        default_language=settings["default_language"],
        commands_dir=settings["commands_dir"],
        extensions_dir=settings["extensions_dir"],
    )

    if settings["languages_dir"]:
        client.localiser.strings.load_directory(settings["languages_dir"])

    if settings["commands_dir"]:
        client.commands.load_all()

    if settings["extensions_dir"]:

        async def load_extensions(_: hikari.StartingEvent, /) -> None:
            await client.extensions.load_all()

        bot.event_manager.subscribe(hikari.StartingEvent, load_extensions)

    return client


def main(argv: typing.Optional[collections.Sequence[str]] = None, /) -> None:
    """Standard CLI entry-point for Zeolite bots."""
    args = _parser.parse_args(argv)
    settings = config.load(args.config) if args.config else config.from_raw({})
    settings = _merge_args(args, settings)

    bot = hikari.GatewayBot(args.token, logs=settings["log_level"], intents=args.intents)
    build_client(bot, settings)
    bot.run()
