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
"""Utilities for collecting component interactions on messages sent by commands."""
from __future__ import annotations

__all__: list[str] = ["CollectorCallbackSig", "InteractionCollector", "PredicateSig", "wait_for_component"]

import asyncio
import logging
import typing
from collections import abc as collections

import hikari

from . import _internal

if typing.TYPE_CHECKING:
    from typing_extensions import Self

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")

PredicateSig = collections.Callable[[hikari.ComponentInteraction], bool]
"""Type hint of a predicate used to filter collected interactions."""

CollectorCallbackSig = collections.Callable[
    [hikari.ComponentInteraction], typing.Union[collections.Awaitable[None], None]
]
"""Type hint of a callback which is called with each collected interaction."""


def _matches(
    interaction: hikari.PartialInteraction,
    message_id: hikari.Snowflake,
    predicate: typing.Optional[PredicateSig],
    /,
) -> typing.Optional[hikari.ComponentInteraction]:
    if (
        isinstance(interaction, hikari.ComponentInteraction)
        and interaction.message.id == message_id
        and (predicate is None or predicate(interaction))
    ):
        return interaction

    return None


async def wait_for_component(
    events: hikari.api.EventManager,
    message: hikari.SnowflakeishOr[hikari.PartialMessage],
    /,
    *,
    predicate: typing.Optional[PredicateSig] = None,
    timeout: typing.Optional[float] = 60,
) -> typing.Optional[hikari.ComponentInteraction]:
    """Wait for a component interaction on a message.

    The listener this registers is always removed before returning, even when
    this times out or is cancelled.

    Parameters
    ----------
    events
        The event manager to listen to interaction create events on.
    message
        Object or ID of the message to collect interactions for.
    predicate
        Additional check interactions must pass to be returned.
    timeout
        How long to wait for in seconds.

        If [None][] then this will wait forever.

    Returns
    -------
    hikari.ComponentInteraction | None
        The first matching interaction, or [None][] if the wait timed out.
    """
    message_id = hikari.Snowflake(message)
    future: asyncio.Future[hikari.ComponentInteraction] = asyncio.get_running_loop().create_future()

    async def on_interaction(event: hikari.InteractionCreateEvent) -> None:
        if not future.done() and (interaction := _matches(event.interaction, message_id, predicate)):
            future.set_result(interaction)

    events.subscribe(hikari.InteractionCreateEvent, on_interaction)
    try:
        return await asyncio.wait_for(future, timeout)

    except asyncio.TimeoutError:
        _LOGGER.log(_internal.TRACE, "Timed out waiting for a component interaction on %s", message_id)
        return None

    finally:
        events.unsubscribe(hikari.InteractionCreateEvent, on_interaction)


class InteractionCollector:
    """Collects the component interactions on a message for a period of time.

    Examples
    --------
    ```py
    message = await ctx.interaction.fetch_initial_response()
    collector = zeolite.InteractionCollector(ctx.client.events, message, timeout=30)

    @collector.with_callback
    async def on_click(interaction: hikari.ComponentInteraction) -> None:
        await interaction.create_initial_response(hikari.ResponseType.MESSAGE_UPDATE, "Clicked!")

    collector.start()
    ```
    """

    __slots__ = ("_callbacks", "_count", "_events", "_handle", "_max", "_message_id", "_predicate", "_timeout")

    def __init__(
        self,
        events: hikari.api.EventManager,
        message: hikari.SnowflakeishOr[hikari.PartialMessage],
        /,
        *,
        predicate: typing.Optional[PredicateSig] = None,
        timeout: float = 60,
        max_interactions: typing.Optional[int] = None,
    ) -> None:
        """Initialise an interaction collector.

        Parameters
        ----------
        events
            The event manager to listen to interaction create events on.
        message
            Object or ID of the message to collect interactions for.
        predicate
            Additional check interactions must pass to be collected.
        timeout
            How long to collect for in seconds.
        max_interactions
            If provided, the collector stops after collecting this many interactions.

        Raises
        ------
        ValueError
            If `timeout` isn't greater than 0 or `max_interactions` is less than 1.
        """
        if timeout <= 0:
            raise ValueError("Timeout must be greater than 0 seconds")

        if max_interactions is not None and max_interactions < 1:
            raise ValueError("Max interactions must be greater than 0")

        self._callbacks: list[CollectorCallbackSig] = []
        self._count = 0
        self._events = events
        self._handle: typing.Optional[asyncio.TimerHandle] = None
        self._max = max_interactions
        self._message_id = hikari.Snowflake(message)
        self._predicate = predicate
        self._timeout = timeout

    @property
    def collected_count(self) -> int:
        """How many interactions this has collected."""
        return self._count

    @property
    def is_alive(self) -> bool:
        """Whether this collector is currently collecting."""
        return self._handle is not None

    def add_callback(self, callback: CollectorCallbackSig, /) -> Self:
        """Add a callback which is called with each collected interaction.

        Parameters
        ----------
        callback
            The callback to add; this may be synchronous or asynchronous.

        Returns
        -------
        Self
            The collector instance to enable chained calls.
        """
        self._callbacks.append(callback)
        return self

    def with_callback(self, callback: CollectorCallbackSig, /) -> CollectorCallbackSig:
        """Add a callback through a decorator call."""
        self.add_callback(callback)
        return callback

    def start(self) -> Self:
        """Start collecting.

        Raises
        ------
        RuntimeError
            If the collector is already running or there's no running event loop.
        """
        if self._handle is not None:
            raise RuntimeError("Collector is already running")

        self._handle = asyncio.get_running_loop().call_later(self._timeout, self.stop)
        self._events.subscribe(hikari.InteractionCreateEvent, self._on_interaction)
        return self

    def stop(self) -> None:
        """Stop collecting.

        This is a no-op if the collector isn't running.
        """
        if self._handle is None:
            return

        self._handle.cancel()
        self._handle = None
        self._events.unsubscribe(hikari.InteractionCreateEvent, self._on_interaction)
        _LOGGER.log(_internal.TRACE, "Stopped collector for %s after %s interactions", self._message_id, self._count)

    async def _on_interaction(self, event: hikari.InteractionCreateEvent, /) -> None:
        if self._handle is None or not (interaction := _matches(event.interaction, self._message_id, self._predicate)):
            return

        self._count += 1
        if self._max is not None and self._count >= self._max:
            self.stop()

        for callback in self._callbacks:
            try:
                await _internal.maybe_await(callback(interaction))

            except Exception:
                _LOGGER.exception("Interaction collector callback %r raised", callback)
