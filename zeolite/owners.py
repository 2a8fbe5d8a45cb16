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
"""Owner checks used by the owner only gate."""
from __future__ import annotations

__all__: list[str] = ["AbstractOwners", "Owners"]

import abc
import datetime
import logging
import time
import typing

import hikari

if typing.TYPE_CHECKING:
    from collections import abc as collections

    from . import clients


_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")


class AbstractOwners(abc.ABC):
    """Interface of the check which decides who may use owner only commands."""

    __slots__ = ()

    @abc.abstractmethod
    async def check_ownership(self, client: clients.Client, user: hikari.User, /) -> bool:
        """Check whether a user is one of the bot's owners.

        Parameters
        ----------
        client
            The client running the owner gate.
        user
            The invoking user.

        Returns
        -------
        bool
            Whether the user may use owner only commands.
        """


class Owners(AbstractOwners):
    """Owner check backed by a set of owner IDs.

    When no owner IDs are set this falls back to the application's owner (or
    its team members), which are fetched over REST and cached.
    """

    __slots__ = ("_application_owners", "_expire_after", "_fallback_to_application", "_fetched_at", "_owner_ids")

    def __init__(
        self,
        *,
        expire_after: typing.Union[datetime.timedelta, int, float] = datetime.timedelta(minutes=5),
        fallback_to_application: typing.Optional[bool] = None,
        owners: typing.Optional[hikari.SnowflakeishSequence[hikari.User]] = None,
    ) -> None:
        """Initialise an owner check.

        Parameters
        ----------
        expire_after
            How long the application's owners are cached for in seconds.
        fallback_to_application
            Whether users who aren't explicit owners should be checked against
            the application's owners.

            Defaults to doing so only while no explicit owners are set. This
            needs the REST client to be bound to a Bot token.
        owners
            Objects or IDs of the users to treat as owners.

        Raises
        ------
        ValueError
            If `expire_after` isn't greater than 0 seconds.
        """
        if isinstance(expire_after, datetime.timedelta):
            expire_after = expire_after.total_seconds()

        if expire_after <= 0:
            raise ValueError("Expire after must be greater than 0 seconds")

        self._application_owners: typing.Optional[frozenset[hikari.Snowflake]] = None
        self._expire_after = float(expire_after)
        self._fallback_to_application = fallback_to_application
        self._fetched_at = 0.0
        self._owner_ids = {hikari.Snowflake(id_) for id_ in owners} if owners else set[hikari.Snowflake]()

    @property
    def fallback_to_application(self) -> bool:
        """Whether users are currently checked against the application's owners."""
        if self._fallback_to_application is None:
            return not self._owner_ids

        return self._fallback_to_application

    @property
    def owner_ids(self) -> collections.Set[hikari.Snowflake]:
        """IDs of the users which are explicitly set as owners."""
        return frozenset(self._owner_ids)

    def add_owner(self, user: hikari.SnowflakeishOr[hikari.PartialUser], /) -> None:
        """Add an explicit owner.

        Parameters
        ----------
        user
            Object or ID of the user to add.
        """
        self._owner_ids.add(hikari.Snowflake(user))

    def remove_owner(self, user: hikari.SnowflakeishOr[hikari.PartialUser], /) -> None:
        """Remove an explicit owner.

        Parameters
        ----------
        user
            Object or ID of the user to remove.

        Raises
        ------
        KeyError
            If the user isn't an explicit owner.
        """
        self._owner_ids.remove(hikari.Snowflake(user))

    async def _get_application_owners(self, client: clients.Client, /) -> frozenset[hikari.Snowflake]:
        now = time.monotonic()
        if self._application_owners is not None and now - self._fetched_at < self._expire_after:
            return self._application_owners

        _LOGGER.debug("Fetching application owners")
        application = await client.rest.fetch_application()
        if application.team:
            self._application_owners = frozenset(application.team.members)

        else:
            self._application_owners = frozenset((application.owner.id,))

        self._fetched_at = now
        return self._application_owners

    async def check_ownership(self, client: clients.Client, user: hikari.User, /) -> bool:
        # <<inherited docstring from zeolite.owners.AbstractOwners>>.
        if user.id in self._owner_ids:
            return True

        if not self.fallback_to_application:
            return False

        if client.rest.token_type is not hikari.TokenType.BOT:
            _LOGGER.warning("Application owners can only be fetched with a Bot token; denying %s", user.id)
            return False

        return user.id in await self._get_application_owners(client)
