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
"""Per command, per user cooldown tracking."""
from __future__ import annotations

__all__: list[str] = ["CooldownTracker"]

import asyncio
import datetime
import logging
import math
import typing

import hikari

from . import _internal

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")


def _now() -> datetime.datetime:
    return datetime.datetime.now(tz=datetime.timezone.utc)


class CooldownTracker:
    """Tracks when users may next use each command.

    An entry only exists while its expiry is in the future; expired entries
    are evicted lazily when checked and by a removal scheduled on the running
    event loop (if there is one) when the cooldown is started.

    Concurrent writes for the same command and user follow last write wins.
    """

    __slots__ = ("_handles", "_table")

    def __init__(self) -> None:
        self._handles: dict[tuple[str, hikari.Snowflake], asyncio.TimerHandle] = {}
        self._table: dict[str, dict[hikari.Snowflake, datetime.datetime]] = {}

    def __len__(self) -> int:
        return sum(map(len, self._table.values()))

    def get_expiry(
        self, command_name: str, user: hikari.SnowflakeishOr[hikari.PartialUser], /
    ) -> typing.Optional[datetime.datetime]:
        """Get when a user's cooldown for a command expires.

        Parameters
        ----------
        command_name
            Name of the command.
        user
            Object or ID of the user.

        Returns
        -------
        datetime.datetime | None
            The UTC expiry of the user's cooldown if they're on cooldown, else [None][].
        """
        expiry = self._table.get(command_name, {}).get(hikari.Snowflake(user))
        if expiry is not None and expiry > _now():
            return expiry

        return None

    def check(self, command_name: str, user: hikari.SnowflakeishOr[hikari.PartialUser], /) -> typing.Optional[int]:
        """Check whether a user is on cooldown for a command.

        Parameters
        ----------
        command_name
            Name of the command.
        user
            Object or ID of the user.

        Returns
        -------
        int | None
            The whole seconds left on the user's cooldown (rounded up, so this
            will be between 1 and the command's cooldown), or [None][] if
            they aren't on cooldown.
        """
        user_id = hikari.Snowflake(user)
        users = self._table.get(command_name)
        if not users or (expiry := users.get(user_id)) is None:
            return None

        remaining = (expiry - _now()).total_seconds()
        if remaining > 0:
            return math.ceil(remaining)

        self._remove(command_name, user_id)
        return None

    def start(
        self,
        command_name: str,
        user: hikari.SnowflakeishOr[hikari.PartialUser],
        duration: typing.Union[datetime.timedelta, int, float],
        /,
    ) -> None:
        """Start a user's cooldown for a command.

        Parameters
        ----------
        command_name
            Name of the command.
        user
            Object or ID of the user.
        duration
            The cooldown's length in seconds.

        Raises
        ------
        ValueError
            If `duration` isn't greater than 0 seconds.
        """
        if isinstance(duration, datetime.timedelta):
            duration = duration.total_seconds()

        else:
            duration = float(duration)

        if duration <= 0:
            raise ValueError("Cooldown duration must be greater than 0 seconds")

        user_id = hikari.Snowflake(user)
        self._table.setdefault(command_name, {})[user_id] = _now() + datetime.timedelta(seconds=duration)
        _LOGGER.log(_internal.TRACE, "Started %ss cooldown for %s on command %s", duration, user_id, command_name)

        key = (command_name, user_id)
        if handle := self._handles.pop(key, None):
            handle.cancel()

        try:
            loop = asyncio.get_running_loop()

        except RuntimeError:
            return

        self._handles[key] = loop.call_later(duration, self._remove, command_name, user_id)

    def reset(
        self,
        command_name: typing.Optional[str] = None,
        user: typing.Optional[hikari.SnowflakeishOr[hikari.PartialUser]] = None,
        /,
    ) -> None:
        """Clear tracked cooldowns.

        Parameters
        ----------
        command_name
            If provided, only clear cooldowns for this command.
        user
            If provided, only clear cooldowns for this user.
        """
        user_id = hikari.Snowflake(user) if user is not None else None
        for name in [command_name] if command_name is not None else list(self._table):
            for tracked_id in list(self._table.get(name, ())):
                if user_id is None or tracked_id == user_id:
                    self._remove(name, tracked_id)

    def close(self) -> None:
        """Cancel all scheduled removals and clear all tracked cooldowns."""
        for handle in self._handles.values():
            handle.cancel()

        self._handles.clear()
        self._table.clear()

    def _remove(self, command_name: str, user_id: hikari.Snowflake, /) -> None:
        if handle := self._handles.pop((command_name, user_id), None):
            handle.cancel()

        users = self._table.get(command_name)
        if users is not None:
            users.pop(user_id, None)
            if not users:
                del self._table[command_name]
