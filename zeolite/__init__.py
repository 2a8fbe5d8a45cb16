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
"""A slash command dispatch framework with hot reloading, designed to extend Hikari.

Examples
--------
A Zeolite client can be quickly initialised from a Hikari gateway bot through
[zeolite.Client.from_gateway_bot][]:

```py
bot = hikari.GatewayBot("BOT_TOKEN")

# Unless event_managed=False is passed here, this client will be managed
# based on gateway startup and stopping events.
# declare_commands=True instructs the client to declare the loaded commands
# once the bot has started (this replaces any previously declared commands).
client = zeolite.Client.from_gateway_bot(bot, declare_commands=True, owners=[115590097100865541])

# Every module in this directory should export exactly one command.
client.commands.load_all("./commands")

@client.with_listener(zeolite.events.CommandCooldownEvent)
async def on_cooldown(event: zeolite.events.CommandCooldownEvent) -> None:
    await event.ctx.respond(f"Try again in {event.seconds_left} seconds")

bot.run()
```

Where a command module (e.g. `./commands/ping.py`) looks like:

```py
import zeolite

@zeolite.as_command("ping", "Get the bot's latency", cooldown=5)
async def ping(ctx: zeolite.Context) -> None:
    await ctx.respond("Pong!")
```

Loaded commands can then be hot reloaded with
[client.commands.reload][zeolite.registries.CommandRegistry.reload].
"""
from __future__ import annotations as _

__all__: list[str] = [
    "AbstractLanguageProvider",
    "AbstractOwners",
    "AbstractPermissionChecker",
    "Client",
    "Command",
    "CommandDefinition",
    "CommandRegistry",
    "Context",
    "CooldownTracker",
    "EventDispatcher",
    "ExtensionRegistry",
    "InMemoryLanguageProvider",
    "InteractionCollector",
    "InteractionPermissionChecker",
    "InvocationState",
    "LoadError",
    "LocalisationManager",
    "ModuleLoader",
    "NotFoundError",
    "Owners",
    "Pipeline",
    "ProtocolError",
    "StringTable",
    "ZeoliteError",
    "abc",
    "as_command",
    "events",
    "gates",
    "wait_for_component",
]

from . import abc
from . import events
from . import gates
from ._about import __version__ as __version__
from .clients import Client
from .collectors import InteractionCollector
from .collectors import wait_for_component
from .commands import Command
from .commands import CommandDefinition
from .commands import as_command
from .context import Context
from .context import InvocationState
from .cooldowns import CooldownTracker
from .errors import LoadError
from .errors import NotFoundError
from .errors import ProtocolError
from .errors import ZeoliteError
from .events import EventDispatcher
from .localisation import AbstractLanguageProvider
from .localisation import InMemoryLanguageProvider
from .localisation import LocalisationManager
from .localisation import StringTable
from .owners import AbstractOwners
from .owners import Owners
from .permissions import AbstractPermissionChecker
from .permissions import InteractionPermissionChecker
from .pipeline import Pipeline
from .registries import CommandRegistry
from .registries import ExtensionRegistry
from .registries import ModuleLoader
