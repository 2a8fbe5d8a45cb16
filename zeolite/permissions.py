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
"""Permission resolution for the members invoking commands."""
from __future__ import annotations

__all__: list[str] = ["AbstractPermissionChecker", "InteractionPermissionChecker", "missing_permissions"]

import abc
import typing

import hikari

if typing.TYPE_CHECKING:
    from . import context as context_


def missing_permissions(required: hikari.Permissions, available: hikari.Permissions, /) -> hikari.Permissions:
    """Calculate which required permissions are missing.

    Members with [hikari.Permissions.ADMINISTRATOR][] are never missing anything.

    Parameters
    ----------
    required
        The required permissions.
    available
        The permissions the member has.

    Returns
    -------
    hikari.Permissions
        The missing permissions; this will be [hikari.Permissions.NONE][] if
        nothing is missing.
    """
    if available & hikari.Permissions.ADMINISTRATOR:
        return hikari.Permissions.NONE

    return required & ~available


class AbstractPermissionChecker(abc.ABC):
    """Interface used to resolve the permissions of the member invoking a command."""

    __slots__ = ()

    @abc.abstractmethod
    async def fetch_permissions(self, ctx: context_.Context, /) -> hikari.Permissions:
        """Get the invoking member's permissions in the invocation's channel.

        Parameters
        ----------
        ctx
            The context of the invocation.

        Returns
        -------
        hikari.Permissions
            The member's permissions.
        """

    async def get_missing(self, ctx: context_.Context, required: hikari.Permissions, /) -> hikari.Permissions:
        """Get the required permissions the invoking member is missing.

        Parameters
        ----------
        ctx
            The context of the invocation.
        required
            The required permissions.

        Returns
        -------
        hikari.Permissions
            The missing permissions.
        """
        return missing_permissions(required, await self.fetch_permissions(ctx))

    async def has(self, ctx: context_.Context, required: hikari.Permissions, /) -> bool:
        """Check whether the invoking member has all of the required permissions."""
        return not await self.get_missing(ctx, required)


class InteractionPermissionChecker(AbstractPermissionChecker):
    """Standard permission checker which uses the permissions sent with the interaction.

    Invocations outside of a guild resolve to [hikari.Permissions.NONE][].
    """

    __slots__ = ()

    async def fetch_permissions(self, ctx: context_.Context, /) -> hikari.Permissions:
        # <<inherited docstring from zeolite.permissions.AbstractPermissionChecker>>.
        if ctx.member is None:
            return hikari.Permissions.NONE

        return ctx.member.permissions
