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
"""Command definitions and the standard callback based command implementation."""
from __future__ import annotations

__all__: list[str] = ["Command", "CommandCallbackSig", "CommandDefinition", "PreLoadSig", "as_command"]

import dataclasses
import re
import types
import typing
from collections import abc as collections

import hikari

from . import abc

if typing.TYPE_CHECKING:
    from . import clients
    from . import context as context_

_T = typing.TypeVar("_T")
_CoroT = collections.Coroutine[typing.Any, typing.Any, _T]

CommandCallbackSig = collections.Callable[..., _CoroT[None]]
"""Type hint of a command callback.

This is called with the [zeolite.context.Context][] as its only positional
argument and may also declare injected dependencies.
"""

PreLoadSig = collections.Callable[..., bool]
"""Type hint of a command pre-load check.

This is called with the loading [zeolite.clients.Client][] and returns whether
the command should be registered.
"""

_COMMAND_NAME_REG: typing.Final[re.Pattern[str]] = re.compile(r"^[\w-]{1,32}$", flags=re.UNICODE)
_COMMAND_TYPE: typing.Final[int] = int(hikari.CommandType.SLASH)


def _validate_name(name: str) -> None:
    if not _COMMAND_NAME_REG.fullmatch(name):
        raise ValueError(f"Invalid name provided, {name!r} doesn't match the required regex `^[\\w-]{{1,32}}$`")

    if name.lower() != name:
        raise ValueError(f"Invalid name provided, {name!r} must be lowercase")


def _locale_value(locale: typing.Union[hikari.Locale, str], /) -> str:
    return locale.value if isinstance(locale, hikari.Locale) else locale


def _serialize_localizations(
    localizations: collections.Mapping[typing.Union[hikari.Locale, str], str], /
) -> dict[str, str]:
    return {_locale_value(locale): value for locale, value in localizations.items()}


def _serialize_option(option: hikari.CommandOption, /) -> dict[str, typing.Any]:
    payload: dict[str, typing.Any] = {
        "type": int(option.type),
        "name": option.name,
        "description": option.description,
        "required": option.is_required,
    }
    if option.choices:
        payload["choices"] = [{"name": choice.name, "value": choice.value} for choice in option.choices]

    if option.options:
        payload["options"] = [_serialize_option(sub_option) for sub_option in option.options]

    if option.channel_types:
        payload["channel_types"] = [int(channel_type) for channel_type in option.channel_types]

    if option.autocomplete:
        payload["autocomplete"] = True

    if option.min_value is not None:
        payload["min_value"] = option.min_value

    if option.max_value is not None:
        payload["max_value"] = option.max_value

    if option.name_localizations:
        payload["name_localizations"] = _serialize_localizations(option.name_localizations)

    if option.description_localizations:
        payload["description_localizations"] = _serialize_localizations(option.description_localizations)

    return payload


@dataclasses.dataclass(frozen=True)
class CommandDefinition:
    """The immutable definition of a slash command.

    An in-flight invocation keeps the definition it was resolved with even if
    the command is reloaded.

    Raises
    ------
    ValueError
        If any of the following are true:

        * If the name isn't lowercase or doesn't match `^[\\w-]{1,32}$` in unicode mode.
        * If the description isn't between 1 and 100 characters long (inclusive).
        * If the cooldown is negative.
    """

    name: str
    """The command's unique name."""

    description: str
    """The command's description."""

    group: typing.Optional[str] = None
    """Name of the group this command is listed under, if any."""

    options: collections.Sequence[hikari.CommandOption] = ()
    """The command's options."""

    owner_only: bool = False
    """Whether only the bot's owners may use this command."""

    guild_only: bool = False
    """Whether this command may only be used within guilds."""

    cooldown: float = 0
    """Per-user cooldown in seconds.

    `0` disables the cooldown.
    """

    required_permissions: hikari.Permissions = hikari.Permissions.NONE
    """Permissions the invoking member needs in a guild."""

    name_localizations: collections.Mapping[typing.Union[hikari.Locale, str], str] = dataclasses.field(
        default_factory=dict
    )
    """Localised names for this command."""

    description_localizations: collections.Mapping[typing.Union[hikari.Locale, str], str] = dataclasses.field(
        default_factory=dict
    )
    """Localised descriptions for this command."""

    def __post_init__(self) -> None:
        _validate_name(self.name)
        if not 1 <= len(self.description) <= 100:
            raise ValueError("The command description must be between 1 and 100 characters in length")

        if self.cooldown < 0:
            raise ValueError("Cooldown must be greater than or equal to 0 seconds")

        object.__setattr__(self, "options", tuple(self.options))
        object.__setattr__(self, "required_permissions", hikari.Permissions(self.required_permissions))
        object.__setattr__(self, "name_localizations", types.MappingProxyType(dict(self.name_localizations)))
        object.__setattr__(
            self, "description_localizations", types.MappingProxyType(dict(self.description_localizations))
        )

    def json(self) -> dict[str, typing.Any]:
        """Get the platform projection of this command.

        Returns
        -------
        dict[str, typing.Any]
            The JSON compatible payload Discord represents this command with.
        """
        return {
            "type": _COMMAND_TYPE,
            "name": self.name,
            "description": self.description,
            "options": [_serialize_option(option) for option in self.options],
            "name_localizations": _serialize_localizations(self.name_localizations),
            "description_localizations": _serialize_localizations(self.description_localizations),
            "default_member_permissions": str(int(self.required_permissions)) if self.required_permissions else None,
            "dm_permission": not self.guild_only,
        }


class Command(abc.Command):
    """Standard implementation of a command which calls a callback.

    The callback is called with dependency injection, so it may declare
    `alluka.Injected` parameters alongside the context.
    """

    __slots__ = ("_callback", "_definition", "_pre_load")

    def __init__(self, callback: CommandCallbackSig, definition: CommandDefinition, /) -> None:
        """Initialise a callback command.

        Parameters
        ----------
        callback
            Callback to execute when the command is invoked.
        definition
            The command's definition.
        """
        self._callback = callback
        self._definition = definition
        self._pre_load: typing.Optional[PreLoadSig] = None

    def __repr__(self) -> str:
        return f"Command <{self._definition.name}: {self._callback!r}>"

    @property
    def callback(self) -> CommandCallbackSig:
        """The callback which is called when this command is invoked."""
        return self._callback

    @property
    def definition(self) -> CommandDefinition:
        # <<inherited docstring from zeolite.abc.Command>>.
        return self._definition

    def pre_load(self, client: clients.Client, /) -> bool:
        # <<inherited docstring from zeolite.abc.Command>>.
        if self._pre_load:
            return self._pre_load(client)

        return True

    def with_pre_load(self, callback: PreLoadSig, /) -> PreLoadSig:
        """Set the pre-load check for this command through a decorator call.

        Examples
        --------
        ```py
        @command.with_pre_load
        def pre_load(client: zeolite.Client) -> bool:
            return bool(os.getenv("ENABLE_SHUTDOWN"))
        ```

        Parameters
        ----------
        callback
            The callback to set; this should return whether the command should
            be registered.

        Returns
        -------
        PreLoadSig
            The pre-load callback.
        """
        self._pre_load = callback
        return callback

    async def run(self, ctx: context_.Context, /) -> None:
        # <<inherited docstring from zeolite.abc.Command>>.
        await ctx.call_with_async_di(self._callback, ctx)


def as_command(
    name: str,
    description: str,
    /,
    *,
    group: typing.Optional[str] = None,
    options: collections.Sequence[hikari.CommandOption] = (),
    owner_only: bool = False,
    guild_only: bool = False,
    cooldown: float = 0,
    required_permissions: hikari.Permissions = hikari.Permissions.NONE,
    name_localizations: typing.Optional[collections.Mapping[typing.Union[hikari.Locale, str], str]] = None,
    description_localizations: typing.Optional[collections.Mapping[typing.Union[hikari.Locale, str], str]] = None,
) -> collections.Callable[[CommandCallbackSig], Command]:
    r"""Build a [zeolite.commands.Command][] by decorating a function.

    Examples
    --------
    ```py
    @zeolite.as_command("ping", "Get the bot's latency")
    async def ping(ctx: zeolite.Context) -> None:
        start_time = time.perf_counter()
        await ctx.rest.fetch_my_user()
        time_taken = (time.perf_counter() - start_time) * 1_000
        await ctx.respond(f"PONG\n - REST: {time_taken:.0f}ms")
    ```

    Parameters
    ----------
    name
        The command's name.

        This must match the regex `^[\w-]{1,32}` in Unicode mode and be lowercase.
    description
        The command's description.

        This should be inclusively between 1-100 characters in length.
    group
        Name of the group this command is listed under.
    options
        The command's options.
    owner_only
        Whether only the bot's owners may use this command.
    guild_only
        Whether this command may only be used within guilds.
    cooldown
        Per-user cooldown in seconds; `0` disables the cooldown.
    required_permissions
        Permissions the invoking member needs in a guild.

        This is only checked when `guild_only` is [True][].
    name_localizations
        Localised names for this command.
    description_localizations
        Localised descriptions for this command.

    Returns
    -------
    collections.abc.Callable[[CommandCallbackSig], Command]
        The decorator callback used to make a [zeolite.commands.Command][].

    Raises
    ------
    ValueError
        If the name, description or cooldown is invalid.
    """
    definition = CommandDefinition(
        name=name,
        description=description,
        group=group,
        options=options,
        owner_only=owner_only,
        guild_only=guild_only,
        cooldown=cooldown,
        required_permissions=required_permissions,
        name_localizations=name_localizations or {},
        description_localizations=description_localizations or {},
    )

    def decorator(callback: CommandCallbackSig, /) -> Command:
        return Command(callback, definition)

    return decorator
