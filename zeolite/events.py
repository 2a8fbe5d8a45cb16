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
"""Lifecycle events emitted by Zeolite's client and the dispatcher which delivers them."""
from __future__ import annotations

__all__: list[str] = [
    "CommandCooldownEvent",
    "CommandErrorEvent",
    "CommandSuccessEvent",
    "EventDispatcher",
    "GateRejectionEvent",
    "GuildOnlyCommandEvent",
    "LifecycleEvent",
    "NoPermissionsEvent",
    "OwnerOnlyCommandEvent",
]

import asyncio
import dataclasses
import logging
import typing

import hikari

from . import _internal

if typing.TYPE_CHECKING:
    from collections import abc as collections

    from . import abc
    from . import context as context_

    _EventT = typing.TypeVar("_EventT", bound="LifecycleEvent")

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")


@dataclasses.dataclass(frozen=True)
class LifecycleEvent:
    """Base class of all the events emitted during a command invocation."""

    ctx: context_.Context
    """Context of the invocation this event is for."""


@dataclasses.dataclass(frozen=True)
class NoPermissionsEvent(LifecycleEvent):
    """Event emitted when the invoking member is missing required permissions."""

    missing_permissions: hikari.Permissions
    """The permissions the member is missing."""


@dataclasses.dataclass(frozen=True)
class CommandCooldownEvent(LifecycleEvent):
    """Event emitted when the invoking user is on cooldown for the command."""

    seconds_left: int
    """Whole seconds left until the cooldown ends (rounded up, at least 1)."""


@dataclasses.dataclass(frozen=True)
class OwnerOnlyCommandEvent(LifecycleEvent):
    """Event emitted when a non-owner invokes an owner only command."""


@dataclasses.dataclass(frozen=True)
class GuildOnlyCommandEvent(LifecycleEvent):
    """Event emitted when a guild only command is invoked outside of a guild."""


@dataclasses.dataclass(frozen=True)
class CommandSuccessEvent(LifecycleEvent):
    """Event emitted after a command ran without raising."""


@dataclasses.dataclass(frozen=True)
class CommandErrorEvent(LifecycleEvent):
    """Event emitted when a middleware or the command raised."""

    error: Exception
    """The raised error."""


GateRejectionEvent = typing.Union[
    OwnerOnlyCommandEvent, GuildOnlyCommandEvent, CommandCooldownEvent, NoPermissionsEvent
]
"""Union of the events a gate may reject an invocation with."""


class EventDispatcher:
    """Publish/subscribe dispatcher for lifecycle events.

    Listeners registered for a base class (e.g. [zeolite.events.LifecycleEvent][])
    receive all of its subclasses. Errors raised by listeners are logged and
    never propagate to the publisher.
    """

    __slots__ = ("_listeners",)

    def __init__(self) -> None:
        self._listeners: dict[type[LifecycleEvent], list[abc.ListenerCallbackSig]] = {}

    @property
    def listeners(self) -> collections.Mapping[type[LifecycleEvent], collections.Sequence[abc.ListenerCallbackSig]]:
        """Mapping of event types to the listeners registered for them."""
        return {event_type: tuple(listeners) for event_type, listeners in self._listeners.items()}

    def subscribe(self, event_type: type[_EventT], callback: abc.ListenerCallbackSig, /) -> None:
        """Subscribe a listener to an event type.

        Parameters
        ----------
        event_type
            The lifecycle event type to listen for.
        callback
            The listener callback.

        Raises
        ------
        TypeError
            If `event_type` isn't a lifecycle event type.
        """
        if not isinstance(event_type, type) or not issubclass(event_type, LifecycleEvent):
            raise TypeError(f"Expected a lifecycle event type, not {event_type!r}")

        listeners = self._listeners.setdefault(event_type, [])
        if callback not in listeners:
            listeners.append(callback)

    def unsubscribe(self, event_type: type[_EventT], callback: abc.ListenerCallbackSig, /) -> None:
        """Unsubscribe a listener from an event type.

        Parameters
        ----------
        event_type
            The lifecycle event type to stop listening for.
        callback
            The listener callback.

        Raises
        ------
        KeyError
            If the callback isn't subscribed to the event type.
        """
        listeners = self._listeners.get(event_type)
        if not listeners or callback not in listeners:
            raise KeyError(f"{callback!r} isn't subscribed to {event_type.__name__}")

        listeners.remove(callback)
        if not listeners:
            del self._listeners[event_type]

    def get_listeners(self, event_type: type[LifecycleEvent], /) -> collections.Sequence[abc.ListenerCallbackSig]:
        """Get the listeners which will be called for an event type.

        This includes listeners registered for the type's base classes.
        """
        return [
            callback
            for cls in event_type.__mro__
            if cls in self._listeners
            for callback in self._listeners[cls]  # type: ignore
        ]

    async def dispatch(self, event: LifecycleEvent, /) -> None:
        """Call all the listeners for an event.

        The set of listeners is snapshotted when this is called.

        Parameters
        ----------
        event
            The event to dispatch.
        """
        listeners = self.get_listeners(type(event))
        if not listeners:
            return

        _LOGGER.log(_internal.TRACE, "Dispatching %s to %s listeners", type(event).__name__, len(listeners))
        await asyncio.gather(*(_call_listener(callback, event) for callback in listeners))


async def _call_listener(callback: abc.ListenerCallbackSig, event: LifecycleEvent, /) -> None:
    try:
        await _internal.maybe_await(callback(event))

    except Exception:
        _LOGGER.exception("Lifecycle listener %r raised while handling %s", callback, type(event).__name__)
