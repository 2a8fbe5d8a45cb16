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
# pyright: reportPrivateUsage=none
# This leads to too many false-positives around mocks.

import asyncio
import datetime

import freezegun
import hikari
import pytest

import zeolite


class TestCooldownTracker:
    def test_check_when_not_tracked(self):
        tracker = zeolite.CooldownTracker()

        assert tracker.check("ping", 123) is None
        assert len(tracker) == 0

    def test_start(self):
        tracker = zeolite.CooldownTracker()

        with freezegun.freeze_time(datetime.datetime(2022, 1, 1, tzinfo=datetime.timezone.utc)):
            tracker.start("ping", 123, 5)

            assert tracker.check("ping", 123) == 5
            assert tracker.get_expiry("ping", 123) == datetime.datetime(
                2022, 1, 1, 0, 0, 5, tzinfo=datetime.timezone.utc
            )
            assert len(tracker) == 1

    def test_start_with_timedelta(self):
        tracker = zeolite.CooldownTracker()

        with freezegun.freeze_time(datetime.datetime(2022, 1, 1, tzinfo=datetime.timezone.utc)):
            tracker.start("ping", 123, datetime.timedelta(seconds=30))

            assert tracker.check("ping", 123) == 30

    @pytest.mark.parametrize("duration", [0, -1, datetime.timedelta(0)])
    def test_start_with_invalid_duration(self, duration: object):
        tracker = zeolite.CooldownTracker()

        with pytest.raises(ValueError, match="Cooldown duration must be greater than 0 seconds"):
            tracker.start("ping", 123, duration)  # type: ignore

        assert len(tracker) == 0

    def test_check_rounds_up(self):
        tracker = zeolite.CooldownTracker()

        with freezegun.freeze_time(datetime.datetime(2022, 1, 1, tzinfo=datetime.timezone.utc)) as frozen_time:
            tracker.start("ping", 123, 5)
            frozen_time.tick(datetime.timedelta(seconds=3, milliseconds=500))

            assert tracker.check("ping", 123) == 2

            frozen_time.tick(datetime.timedelta(seconds=1, milliseconds=499))

            assert tracker.check("ping", 123) == 1

    def test_check_after_expiry(self):
        tracker = zeolite.CooldownTracker()

        with freezegun.freeze_time(datetime.datetime(2022, 1, 1, tzinfo=datetime.timezone.utc)) as frozen_time:
            tracker.start("ping", 123, 5)
            frozen_time.tick(datetime.timedelta(seconds=5))

            assert tracker.check("ping", 123) is None
            assert tracker.get_expiry("ping", 123) is None
            assert len(tracker) == 0

    def test_check_is_per_user_and_command(self):
        tracker = zeolite.CooldownTracker()

        with freezegun.freeze_time(datetime.datetime(2022, 1, 1, tzinfo=datetime.timezone.utc)):
            tracker.start("ping", 123, 5)

            assert tracker.check("ping", 321) is None
            assert tracker.check("echo", 123) is None

    def test_start_overwrites_existing_entry(self):
        tracker = zeolite.CooldownTracker()

        with freezegun.freeze_time(datetime.datetime(2022, 1, 1, tzinfo=datetime.timezone.utc)):
            tracker.start("ping", 123, 5)
            tracker.start("ping", 123, 60)

            assert tracker.check("ping", 123) == 60
            assert len(tracker) == 1

    def test_start_accepts_user_object(self):
        tracker = zeolite.CooldownTracker()
        user = hikari.Snowflake(44332211)

        with freezegun.freeze_time(datetime.datetime(2022, 1, 1, tzinfo=datetime.timezone.utc)):
            tracker.start("ping", user, 10)

            assert tracker.check("ping", 44332211) == 10

    def test_reset(self):
        tracker = zeolite.CooldownTracker()
        tracker.start("ping", 1, 60)
        tracker.start("ping", 2, 60)
        tracker.start("echo", 1, 60)

        tracker.reset()

        assert len(tracker) == 0

    def test_reset_for_command(self):
        tracker = zeolite.CooldownTracker()
        tracker.start("ping", 1, 60)
        tracker.start("ping", 2, 60)
        tracker.start("echo", 1, 60)

        tracker.reset("ping")

        assert tracker.check("ping", 1) is None
        assert tracker.check("ping", 2) is None
        assert tracker.check("echo", 1) is not None

    def test_reset_for_user(self):
        tracker = zeolite.CooldownTracker()
        tracker.start("ping", 1, 60)
        tracker.start("ping", 2, 60)
        tracker.start("echo", 1, 60)

        tracker.reset(None, 1)

        assert tracker.check("ping", 1) is None
        assert tracker.check("echo", 1) is None
        assert tracker.check("ping", 2) is not None

    def test_reset_for_command_and_user(self):
        tracker = zeolite.CooldownTracker()
        tracker.start("ping", 1, 60)
        tracker.start("ping", 2, 60)
        tracker.start("echo", 1, 60)

        tracker.reset("ping", 1)

        assert tracker.check("ping", 1) is None
        assert tracker.check("ping", 2) is not None
        assert tracker.check("echo", 1) is not None

    @pytest.mark.asyncio()
    async def test_start_schedules_removal(self):
        tracker = zeolite.CooldownTracker()

        tracker.start("ping", 123, 0.05)
        assert len(tracker._handles) == 1

        await asyncio.sleep(0.2)

        assert len(tracker) == 0
        assert tracker._handles == {}

    @pytest.mark.asyncio()
    async def test_start_cancels_previous_removal(self):
        tracker = zeolite.CooldownTracker()

        tracker.start("ping", 123, 0.05)
        handle = tracker._handles[("ping", hikari.Snowflake(123))]
        tracker.start("ping", 123, 60)

        assert handle.cancelled()
        await asyncio.sleep(0.1)
        assert tracker.check("ping", 123) is not None
        tracker.close()

    @pytest.mark.asyncio()
    async def test_close(self):
        tracker = zeolite.CooldownTracker()
        tracker.start("ping", 123, 60)
        handle = tracker._handles[("ping", hikari.Snowflake(123))]

        tracker.close()

        assert handle.cancelled()
        assert len(tracker) == 0
        assert tracker._handles == {}
