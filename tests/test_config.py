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

import json
import pathlib
import shutil
import tempfile
import typing

import pytest

from zeolite import config


@pytest.fixture()
def temp_dir() -> typing.Iterator[pathlib.Path]:
    path = pathlib.Path(tempfile.mkdtemp())
    try:
        yield path

    finally:
        shutil.rmtree(path)


class TestFromRaw:
    def test_defaults(self):
        assert config.from_raw({}) == {
            "commands_dir": None,
            "declare_commands": False,
            "default_language": "en-US",
            "extensions_dir": None,
            "languages_dir": None,
            "log_level": "INFO",
            "owners": [],
        }

    def test(self):
        result = config.from_raw(
            {
                "commands_dir": "./commands",
                "declare_commands": 123321,
                "default_language": "fr",
                "extensions_dir": "./extensions",
                "languages_dir": "./languages",
                "log_level": "debug",
                "owners": [1234, 5678],
            }
        )

        assert result == {
            "commands_dir": "./commands",
            "declare_commands": 123321,
            "default_language": "fr",
            "extensions_dir": "./extensions",
            "languages_dir": "./languages",
            "log_level": "DEBUG",
            "owners": [1234, 5678],
        }

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            ({"owners": 1234}, "owners must be a list of ints"),
            ({"owners": [1234, "5678"]}, "Expected ints in owners"),
            ({"owners": [True]}, "Expected ints in owners"),
            ({"declare_commands": "yes"}, "declare_commands must be a bool or guild ID"),
            ({"default_language": 1}, "default_language must be a string"),
            ({"log_level": 10}, "log_level must be a string"),
            ({"commands_dir": ["./commands"]}, "commands_dir must be a string"),
            ({"languages_dir": 5}, "languages_dir must be a string"),
        ],
    )
    def test_with_invalid_field_type(self, data: dict[str, typing.Any], message: str):
        with pytest.raises(TypeError, match=message):
            config.from_raw(data)

    def test_with_invalid_log_level(self):
        with pytest.raises(ValueError, match="for log_level but got LOUD"):
            config.from_raw({"log_level": "loud"})

    def test_with_unknown_fields(self):
        with pytest.raises(ValueError, match="Unexpected config fields: prefix, token"):
            config.from_raw({"token": "abc", "prefix": "!"})


class TestLoad:
    def test(self, temp_dir: pathlib.Path):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"owners": [1234], "log_level": "TRACE_HIKARI"}))

        result = config.load(path)

        assert result["owners"] == [1234]
        assert result["log_level"] == "TRACE_HIKARI"
        assert result["declare_commands"] is False

    def test_with_str_path(self, temp_dir: pathlib.Path):
        path = temp_dir / "config.json"
        path.write_text(json.dumps({}))

        assert config.load(str(path)) == config.from_raw({})

    def test_when_not_an_object(self, temp_dir: pathlib.Path):
        path = temp_dir / "config.json"
        path.write_text(json.dumps([1, 2, 3]))

        with pytest.raises(TypeError, match="Config must be a JSON object"):
            config.load(path)

    def test_when_invalid_json(self, temp_dir: pathlib.Path):
        path = temp_dir / "config.json"
        path.write_text("{not json")

        with pytest.raises(ValueError):
            config.load(path)
