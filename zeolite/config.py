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
"""Parsing of Zeolite's JSON configuration files."""
from __future__ import annotations

__all__: list[str] = ["Config", "from_raw", "load"]

import json
import pathlib
import typing

from . import localisation

_LOG_LEVELS: typing.Final[frozenset[str]] = frozenset(("TRACE_HIKARI", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"))


class Config(typing.TypedDict):
    """Configuration used to start a bot from the command line."""

    commands_dir: typing.Optional[str]
    declare_commands: typing.Union[bool, int]
    default_language: str
    extensions_dir: typing.Optional[str]
    languages_dir: typing.Optional[str]
    log_level: str
    owners: list[int]


def _get_optional_str(data: dict[str, typing.Any], key: str, /) -> typing.Optional[str]:
    value = data.pop(key, None)
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{key} must be a string, not {type(value)}")

    return value


def from_raw(data: dict[str, typing.Any], /) -> Config:
    """Build a config from its raw JSON representation.

    Missing fields are set to their defaults.

    Parameters
    ----------
    data
        The raw config data.

        This will be mutated.

    Returns
    -------
    Config
        The parsed config.

    Raises
    ------
    TypeError
        If a field has the wrong type.
    ValueError
        If a field has an invalid value or an unknown field is present.
    """
    owners = data.pop("owners", None) or []
    if not isinstance(owners, list):
        raise TypeError(f"owners must be a list of ints, not {type(owners)}")

    for owner in owners:
        if not isinstance(owner, int) or isinstance(owner, bool):
            raise TypeError(f"Expected ints in owners, got {type(owner)}")

    declare_commands = data.pop("declare_commands", False)
    if not isinstance(declare_commands, (bool, int)):
        raise TypeError(f"declare_commands must be a bool or guild ID, not {type(declare_commands)}")

    default_language = data.pop("default_language", localisation.DEFAULT_LANGUAGE)
    if not isinstance(default_language, str):
        raise TypeError(f"default_language must be a string, not {type(default_language)}")

    log_level = data.pop("log_level", "INFO")
    if not isinstance(log_level, str):
        raise TypeError(f"log_level must be a string, not {type(log_level)}")

    log_level = log_level.upper()
    if log_level not in _LOG_LEVELS:
        possible_names = ", ".join(sorted(_LOG_LEVELS))
        raise ValueError(f"Expected one of {possible_names} for log_level but got {log_level}")

    commands_dir = _get_optional_str(data, "commands_dir")
    extensions_dir = _get_optional_str(data, "extensions_dir")
    languages_dir = _get_optional_str(data, "languages_dir")

    if data:
        raise ValueError(f"Unexpected config fields: {', '.join(sorted(data))}")

    return Config(
        commands_dir=commands_dir,
        declare_commands=declare_commands,
        default_language=default_language,
        extensions_dir=extensions_dir,
        languages_dir=languages_dir,
        log_level=log_level,
        owners=owners,
    )


def load(path: typing.Union[str, pathlib.Path], /) -> Config:
    """Load a config from a JSON file.

    Parameters
    ----------
    path
        Path of the JSON file.

    Returns
    -------
    Config
        The parsed config.

    Raises
    ------
    TypeError
        If the file doesn't contain a JSON object or a field has the wrong type.
    ValueError
        If the file isn't valid JSON or a field has an invalid value.
    """
    data = json.loads(pathlib.Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise TypeError(f"Config must be a JSON object, not {type(data)}")

    return from_raw(data)
