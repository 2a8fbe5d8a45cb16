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
"""The context commands and middlewares are called with."""
from __future__ import annotations

__all__: list[str] = ["Context", "InvocationState"]

import enum
import logging
import typing

import hikari

from . import _internal
from . import collectors

if typing.TYPE_CHECKING:
    from collections import abc as collections

    from typing_extensions import Self

    from . import abc
    from . import clients

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")


def _from_user(user_id: hikari.Snowflake, /) -> collectors.PredicateSig:
    return lambda interaction: interaction.user.id == user_id


class InvocationState(str, enum.Enum):
    """The stages a command invocation moves through.

    The terminal states are [InvocationState.SUCCEEDED][zeolite.context.InvocationState.SUCCEEDED],
    [InvocationState.GATE_REJECTED][zeolite.context.InvocationState.GATE_REJECTED],
    [InvocationState.HALTED][zeolite.context.InvocationState.HALTED] and
    [InvocationState.ERRORED][zeolite.context.InvocationState.ERRORED].
    """

    RECEIVED = "RECEIVED"
    """The interaction was received but hasn't been resolved to a command yet."""

    RESOLVED = "RESOLVED"
    """The interaction was resolved to a registered command."""

    PIPED = "PIPED"
    """The invocation is running through the middleware chain."""

    SUCCEEDED = "SUCCEEDED"
    """The command ran without raising."""

    GATE_REJECTED = "GATE_REJECTED"
    """The invocation was rejected by the owner, guild, cooldown or permission gate."""

    HALTED = "HALTED"
    """A middleware stopped the chain before the command was reached."""

    ERRORED = "ERRORED"
    """A middleware or the command raised."""

    @property
    def is_terminal(self) -> bool:
        """Whether this is a final state."""
        return self not in (InvocationState.RECEIVED, InvocationState.RESOLVED, InvocationState.PIPED)


class Context:
    """Per-invocation context passed to middlewares and commands.

    The invoking user, member and guild are read only; `acknowledged` is set
    once the first response has been sent.
    """

    __slots__ = ("_acknowledged", "_client", "_command", "_data", "_interaction", "_state")

    def __init__(self, client: clients.Client, interaction: hikari.CommandInteraction, command: abc.Command, /) -> None:
        """Initialise an invocation context.

        Parameters
        ----------
        client
            The client this invocation is being handled by.
        interaction
            The command interaction which triggered this invocation.
        command
            The command this invocation was resolved to.
        """
        self._acknowledged = False
        self._client = client
        self._command = command
        self._data: dict[str, typing.Any] = {}
        self._interaction = interaction
        self._state = InvocationState.RESOLVED

    def __repr__(self) -> str:
        return f"Context <{self._command.name}, {self._interaction.user.id}, {self._state.value}>"

    @property
    def acknowledged(self) -> bool:
        """Whether an initial response has been sent for this invocation."""
        return self._acknowledged

    @property
    def channel_id(self) -> hikari.Snowflake:
        """ID of the channel this command was invoked in."""
        return self._interaction.channel_id

    @property
    def client(self) -> clients.Client:
        """The client this invocation is being handled by."""
        return self._client

    @property
    def command(self) -> abc.Command:
        """The command this invocation was resolved to."""
        return self._command

    @property
    def command_name(self) -> str:
        """Name of the invoked command."""
        return self._interaction.command_name

    @property
    def guild_id(self) -> typing.Optional[hikari.Snowflake]:
        """ID of the guild this command was invoked in, if applicable."""
        return self._interaction.guild_id

    @property
    def interaction(self) -> hikari.CommandInteraction:
        """The command interaction which triggered this invocation."""
        return self._interaction

    @property
    def locale(self) -> typing.Union[hikari.Locale, str]:
        """The invoking user's client locale."""
        return self._interaction.locale

    @property
    def member(self) -> typing.Optional[hikari.InteractionMember]:
        """The invoking member if this was invoked within a guild."""
        return self._interaction.member

    @property
    def options(self) -> collections.Sequence[hikari.CommandInteractionOption]:
        """The options this command was invoked with."""
        return self._interaction.options or ()

    @property
    def rest(self) -> hikari.api.RESTClient:
        """The Hikari REST client this invocation's client is bound to."""
        return self._client.rest

    @property
    def state(self) -> InvocationState:
        """The current stage of this invocation."""
        return self._state

    @property
    def user(self) -> hikari.User:
        """The invoking user."""
        return self._interaction.user

    def set_state(self, state: InvocationState, /) -> Self:
        """Set the current stage of this invocation.

        This is called by the client as the invocation progresses.

        Raises
        ------
        RuntimeError
            If this invocation already reached a final state.
        """
        if self._state.is_terminal:
            raise RuntimeError(f"Invocation already finished as {self._state.value}")

        _LOGGER.log(_internal.TRACE, "Invocation of %s moved to %s", self._command.name, state.value)
        self._state = state
        return self

    def get(self, key: str, default: typing.Any = None, /) -> typing.Any:
        """Get a value from this invocation's side channel.

        Parameters
        ----------
        key
            The key to get the value for.
        default
            The value to return if the key isn't set.
        """
        return self._data.get(key, default)

    def set(self, key: str, value: typing.Any, /) -> Self:
        """Set a value in this invocation's side channel.

        This is used by middlewares to pass data to later middlewares and the command.
        """
        self._data[key] = value
        return self

    def get_option(self, name: str, /) -> typing.Optional[hikari.CommandInteractionOption]:
        """Get a top level option this command was invoked with by name."""
        return next((option for option in self.options if option.name == name), None)

    def get_guild(self) -> typing.Optional[hikari.Guild]:
        """Get the guild this command was invoked in from the cache, if applicable."""
        if self.guild_id is not None and self._client.cache:
            return self._client.cache.get_guild(self.guild_id)

        return None

    async def call_with_async_di(
        self, callback: collections.Callable[..., typing.Any], /, *args: typing.Any, **kwargs: typing.Any
    ) -> typing.Any:
        """Call a callback with dependency injection through the client's injector.

        The callback may be synchronous or asynchronous.
        """
        return await self._client.injector.call_with_async_di(callback, *args, **kwargs)

    def t(self, key: str, /, *args: typing.Any, **kwargs: typing.Any) -> str:
        """Get a localised string for the invoking user.

        Parameters
        ----------
        key
            Key of the string to get.
        *args
            Positional arguments to format the string with.
        **kwargs
            Keyword arguments to format the string with.

        Returns
        -------
        str
            The localised string.
        """
        return self._client.localiser.get_string(self.user.id, key, *args, **kwargs)

    def _assert_not_acknowledged(self) -> None:
        if self._acknowledged:
            raise RuntimeError("Interaction has already been acknowledged")

    async def respond(self, content: hikari.UndefinedOr[typing.Any] = hikari.UNDEFINED, **kwargs: typing.Any) -> None:
        """Send the initial response for this invocation.

        Parameters
        ----------
        content
            The message content to respond with.
        **kwargs
            Other message fields, passed through to
            [hikari.CommandInteraction.create_initial_response][].

        Raises
        ------
        RuntimeError
            If this invocation has already been acknowledged.
        """
        self._assert_not_acknowledged()
        await self._interaction.create_initial_response(hikari.ResponseType.MESSAGE_CREATE, content, **kwargs)
        self._acknowledged = True

    async def defer(self, *, ephemeral: bool = False) -> None:
        """Defer the initial response for this invocation.

        Parameters
        ----------
        ephemeral
            Whether the deferred response should be ephemeral.

        Raises
        ------
        RuntimeError
            If this invocation has already been acknowledged.
        """
        self._assert_not_acknowledged()
        flags = hikari.MessageFlag.EPHEMERAL if ephemeral else hikari.UNDEFINED
        await self._interaction.create_initial_response(hikari.ResponseType.DEFERRED_MESSAGE_CREATE, flags=flags)
        self._acknowledged = True

    async def edit_response(
        self, content: hikari.UndefinedNoneOr[typing.Any] = hikari.UNDEFINED, **kwargs: typing.Any
    ) -> hikari.Message:
        """Edit the initial response for this invocation."""
        return await self._interaction.edit_initial_response(content, **kwargs)

    async def delete_response(self) -> None:
        """Delete the initial response for this invocation."""
        await self._interaction.delete_initial_response()

    async def create_followup(
        self, content: hikari.UndefinedOr[typing.Any] = hikari.UNDEFINED, **kwargs: typing.Any
    ) -> hikari.Message:
        """Send a followup message for this invocation."""
        return await self._interaction.execute(content, **kwargs)

    async def collect_component(
        self,
        message: hikari.SnowflakeishOr[hikari.PartialMessage],
        /,
        *,
        predicate: typing.Optional[collectors.PredicateSig] = None,
        timeout: typing.Optional[float] = 60,
    ) -> typing.Optional[hikari.ComponentInteraction]:
        """Wait for a component interaction on a message.

        By default only interactions from the invoking user are collected.

        Parameters
        ----------
        message
            Object or ID of the message to collect an interaction for.
        predicate
            Check interactions must pass to be returned.

            If provided, this replaces the default invoking user check.
        timeout
            How long to wait for in seconds.

        Returns
        -------
        hikari.ComponentInteraction | None
            The first matching interaction, or [None][] if the wait timed out.

        Raises
        ------
        RuntimeError
            If the client isn't bound to an event manager.
        """
        if self._client.events is None:
            raise RuntimeError("Cannot collect components without an event manager")

        if predicate is None:
            predicate = _from_user(self.user.id)

        return await collectors.wait_for_component(self._client.events, message, predicate=predicate, timeout=timeout)
