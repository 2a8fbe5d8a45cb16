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

import pathlib

import zeolite


class TestLoadError:
    def test_init_dunder_method(self):
        error = zeolite.LoadError("oh no", pathlib.Path("commands/ping.py"))

        assert error.message == "oh no"
        assert error.path == pathlib.Path("commands/ping.py")
        assert str(error) == "oh no"

    def test_init_dunder_method_without_path(self):
        error = zeolite.LoadError("meow")

        assert error.message == "meow"
        assert error.path is None

    def test_is_zeolite_error(self):
        assert isinstance(zeolite.LoadError("bye"), zeolite.ZeoliteError)


class TestNotFoundError:
    def test_init_dunder_method(self):
        error = zeolite.NotFoundError("Command echo does not exist", "echo")

        assert error.message == "Command echo does not exist"
        assert error.name == "echo"

    def test_str_dunder_method(self):
        assert str(zeolite.NotFoundError("Command echo does not exist", "echo")) == "Command echo does not exist"

    def test_is_lookup_error(self):
        error = zeolite.NotFoundError("Extension nyaa does not exist", "nyaa")

        assert isinstance(error, LookupError)
        assert isinstance(error, zeolite.ZeoliteError)


class TestProtocolError:
    def test_is_runtime_error(self):
        error = zeolite.ProtocolError("next() was called more than once by middleware 0")

        assert isinstance(error, RuntimeError)
        assert isinstance(error, zeolite.ZeoliteError)
