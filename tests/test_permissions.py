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

# pyright: reportUnknownMemberType=none
# This leads to too many false-positives around mocks.

from unittest import mock

import hikari
import pytest

import zeolite
from zeolite import permissions


@pytest.mark.parametrize(
    ("required", "available", "expected"),
    [
        (hikari.Permissions.NONE, hikari.Permissions.NONE, hikari.Permissions.NONE),
        (hikari.Permissions.BAN_MEMBERS, hikari.Permissions.BAN_MEMBERS, hikari.Permissions.NONE),
        (
            hikari.Permissions.BAN_MEMBERS | hikari.Permissions.KICK_MEMBERS,
            hikari.Permissions.KICK_MEMBERS | hikari.Permissions.SEND_MESSAGES,
            hikari.Permissions.BAN_MEMBERS,
        ),
        (hikari.Permissions.MANAGE_GUILD, hikari.Permissions.ADMINISTRATOR, hikari.Permissions.NONE),
    ],
)
def test_missing_permissions(
    required: hikari.Permissions, available: hikari.Permissions, expected: hikari.Permissions
):
    assert permissions.missing_permissions(required, available) == expected


class TestInteractionPermissionChecker:
    @pytest.mark.asyncio()
    async def test_fetch_permissions(self):
        mock_ctx = mock.Mock(member=mock.Mock(permissions=hikari.Permissions.SEND_MESSAGES))

        result = await zeolite.InteractionPermissionChecker().fetch_permissions(mock_ctx)

        assert result == hikari.Permissions.SEND_MESSAGES

    @pytest.mark.asyncio()
    async def test_fetch_permissions_without_member(self):
        result = await zeolite.InteractionPermissionChecker().fetch_permissions(mock.Mock(member=None))

        assert result == hikari.Permissions.NONE

    @pytest.mark.asyncio()
    async def test_get_missing(self):
        mock_ctx = mock.Mock(member=mock.Mock(permissions=hikari.Permissions.SEND_MESSAGES))

        result = await zeolite.InteractionPermissionChecker().get_missing(
            mock_ctx, hikari.Permissions.SEND_MESSAGES | hikari.Permissions.BAN_MEMBERS
        )

        assert result == hikari.Permissions.BAN_MEMBERS

    @pytest.mark.asyncio()
    async def test_has(self):
        mock_ctx = mock.Mock(member=mock.Mock(permissions=hikari.Permissions.ADMINISTRATOR))
        checker = zeolite.InteractionPermissionChecker()

        assert await checker.has(mock_ctx, hikari.Permissions.BAN_MEMBERS) is True

    @pytest.mark.asyncio()
    async def test_has_when_missing(self):
        mock_ctx = mock.Mock(member=None)
        checker = zeolite.InteractionPermissionChecker()

        assert await checker.has(mock_ctx, hikari.Permissions.BAN_MEMBERS) is False
