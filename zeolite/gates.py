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
"""The policy gates every invocation must pass before its command is run.

The gates are evaluated in a fixed order and the first rejection wins:

1. Owner gate: owner only commands may only be used by the bot's owners.
2. Guild gate: guild only commands may only be used within guilds.
3. Cooldown gate: the invoking user mustn't be on cooldown for the command.
4. Permission gate: for guild only commands, the invoking member must have
   the command's required permissions.
"""
from __future__ import annotations

__all__: list[str] = ["check_cooldown", "check_guild", "check_owner", "check_permissions", "evaluate_gates"]

import logging
import typing

from . import events

if typing.TYPE_CHECKING:
    from . import context as context_
    from . import cooldowns as cooldowns_
    from . import owners as owners_
    from . import permissions as permissions_

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")


async def check_owner(
    ctx: context_.Context, owners: owners_.AbstractOwners, /
) -> typing.Optional[events.OwnerOnlyCommandEvent]:
    """Check the owner gate for an invocation.

    Parameters
    ----------
    ctx
        The context of the invocation.
    owners
        The owner check to use.

    Returns
    -------
    zeolite.events.OwnerOnlyCommandEvent | None
        The rejection event if the command is owner only and the user isn't
        an owner, else [None][].
    """
    if ctx.command.definition.owner_only and not await owners.check_ownership(ctx.client, ctx.user):
        _LOGGER.debug("Rejected %s for %s: owner only command", ctx.command.name, ctx.user.id)
        return events.OwnerOnlyCommandEvent(ctx)

    return None


def check_guild(ctx: context_.Context, /) -> typing.Optional[events.GuildOnlyCommandEvent]:
    """Check the guild gate for an invocation.

    Returns
    -------
    zeolite.events.GuildOnlyCommandEvent | None
        The rejection event if the command is guild only and was invoked
        outside of a guild, else [None][].
    """
    if ctx.command.definition.guild_only and ctx.guild_id is None:
        _LOGGER.debug("Rejected %s for %s: guild only command", ctx.command.name, ctx.user.id)
        return events.GuildOnlyCommandEvent(ctx)

    return None


def check_cooldown(
    ctx: context_.Context, cooldowns: cooldowns_.CooldownTracker, /
) -> typing.Optional[events.CommandCooldownEvent]:
    """Check the cooldown gate for an invocation.

    Commands without a cooldown never touch the tracker.

    Parameters
    ----------
    ctx
        The context of the invocation.
    cooldowns
        The cooldown tracker to use.

    Returns
    -------
    zeolite.events.CommandCooldownEvent | None
        The rejection event if the user is on cooldown for the command, else [None][].
    """
    if not ctx.command.definition.cooldown:
        return None

    seconds_left = cooldowns.check(ctx.command.name, ctx.user.id)
    if seconds_left is not None:
        _LOGGER.debug("Rejected %s for %s: %ss of cooldown left", ctx.command.name, ctx.user.id, seconds_left)
        return events.CommandCooldownEvent(ctx, seconds_left)

    return None


async def check_permissions(
    ctx: context_.Context, permissions: permissions_.AbstractPermissionChecker, /
) -> typing.Optional[events.NoPermissionsEvent]:
    """Check the permission gate for an invocation.

    This only applies to guild only commands which require permissions.

    Parameters
    ----------
    ctx
        The context of the invocation.
    permissions
        The permission checker to use.

    Returns
    -------
    zeolite.events.NoPermissionsEvent | None
        The rejection event if the member is missing permissions, else [None][].
    """
    definition = ctx.command.definition
    if not definition.guild_only or not definition.required_permissions:
        return None

    missing = await permissions.get_missing(ctx, definition.required_permissions)
    if missing:
        _LOGGER.debug("Rejected %s for %s: missing %r", ctx.command.name, ctx.user.id, missing)
        return events.NoPermissionsEvent(ctx, missing)

    return None


async def evaluate_gates(
    ctx: context_.Context,
    /,
    *,
    owners: owners_.AbstractOwners,
    cooldowns: cooldowns_.CooldownTracker,
    permissions: permissions_.AbstractPermissionChecker,
) -> typing.Optional[events.GateRejectionEvent]:
    """Evaluate all the gates for an invocation in order.

    Parameters
    ----------
    ctx
        The context of the invocation.
    owners
        The owner check to use.
    cooldowns
        The cooldown tracker to use.
    permissions
        The permission checker to use.

    Returns
    -------
    zeolite.events.GateRejectionEvent | None
        The first rejection event or [None][] if every gate passed.
    """
    return (
        await check_owner(ctx, owners)
        or check_guild(ctx)
        or check_cooldown(ctx, cooldowns)
        or await check_permissions(ctx, permissions)
    )
