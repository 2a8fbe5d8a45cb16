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

import pathlib
import shutil
import tempfile
import typing
from unittest import mock

import pytest

import zeolite
from zeolite import _internal


@pytest.fixture()
def temp_dir() -> typing.Iterator[pathlib.Path]:
    path = pathlib.Path(tempfile.mkdtemp())
    try:
        yield path

    finally:
        shutil.rmtree(path)


@pytest.mark.asyncio()
async def test_maybe_await():
    mock_callback = mock.AsyncMock(return_value="meow")

    assert await _internal.maybe_await(mock_callback()) == "meow"


@pytest.mark.asyncio()
async def test_maybe_await_with_value():
    value = object()

    assert await _internal.maybe_await(value) is value


class TestLogTaskExc:
    @pytest.mark.asyncio()
    async def test(self):
        mock_callback = mock.AsyncMock(return_value=123)

        result = await _internal.log_task_exc("meow")(mock_callback)(1, nyaa="nyaa")

        assert result == 123
        mock_callback.assert_awaited_once_with(1, nyaa="nyaa")

    @pytest.mark.asyncio()
    async def test_when_raises(self):
        error = RuntimeError("bye")
        mock_callback = mock.AsyncMock(side_effect=error)

        with mock.patch.object(_internal, "_LOGGER") as logger:
            with pytest.raises(RuntimeError) as exc_info:
                await _internal.log_task_exc("it broke")(mock_callback)()

        assert exc_info.value is error
        logger.exception.assert_called_once_with("it broke", exc_info=error)


def test_normalize_path(temp_dir: pathlib.Path):
    assert _internal.normalize_path(temp_dir / "sub" / ".." / "meow.py") == (temp_dir / "meow.py").resolve()


def test_normalize_path_expands_user():
    with mock.patch.object(pathlib.Path, "expanduser", return_value=pathlib.Path("/home/reina/meow.py")):
        result = _internal.normalize_path(pathlib.Path("~/meow.py"))

    assert result == pathlib.Path("/home/reina/meow.py").resolve()


def test_scan_directory(temp_dir: pathlib.Path):
    for name in ("b.py", "a.py", "_private.py", "__init__.py", "notes.txt", "c.pyc"):
        (temp_dir / name).write_text("")

    (temp_dir / "nested").mkdir()
    (temp_dir / "nested" / "d.py").write_text("")
    (temp_dir / "dir.py").mkdir()

    assert _internal.scan_directory(temp_dir) == [temp_dir / "a.py", temp_dir / "b.py"]


class TestWrapLoadError:
    def test(self):
        path = pathlib.Path("meow.py")
        error = ValueError("nyaa")

        with pytest.raises(zeolite.LoadError, match="Failed to load meow") as exc_info:
            with _internal.WrapLoadError("Failed to load meow", path):
                raise error

        assert exc_info.value.path == path
        assert exc_info.value.__cause__ is error

    def test_when_load_error(self):
        error = zeolite.LoadError("Already failed", pathlib.Path("meow.py"))

        with pytest.raises(zeolite.LoadError) as exc_info:
            with _internal.WrapLoadError("Failed to load meow", pathlib.Path("meow.py")):
                raise error

        assert exc_info.value is error

    def test_when_base_exception(self):
        with pytest.raises(KeyboardInterrupt):
            with _internal.WrapLoadError("Failed to load meow", pathlib.Path("meow.py")):
                raise KeyboardInterrupt

    def test_when_no_error(self):
        with _internal.WrapLoadError("Failed to load meow", pathlib.Path("meow.py")):
            pass
