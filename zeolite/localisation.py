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
"""String tables, per-user languages and the middleware which resolves them."""
from __future__ import annotations

__all__: list[str] = [
    "AbstractLanguageProvider",
    "InMemoryLanguageProvider",
    "LocalisationManager",
    "StringTable",
]

import abc as abc_
import json
import logging
import pathlib
import typing
from collections import abc as collections

import hikari

from . import abc
from . import context

if typing.TYPE_CHECKING:
    from typing_extensions import Self

    from . import clients

_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite")

DEFAULT_LANGUAGE: typing.Final[str] = "en-US"
"""The language strings fall back to when no other language is set."""


class StringTable:
    """Per-language key to template tables.

    Templates are formatted with [str.format][] style placeholders.
    """

    __slots__ = ("_default_language", "_directory", "_languages")

    def __init__(self, *, default_language: str = DEFAULT_LANGUAGE) -> None:
        """Initialise a string table.

        Parameters
        ----------
        default_language
            The language to fall back to when a language isn't known.
        """
        self._default_language = default_language
        self._directory: typing.Optional[pathlib.Path] = None
        self._languages: dict[str, dict[str, str]] = {}

    @property
    def default_language(self) -> str:
        """The language to fall back to when a language isn't known."""
        return self._default_language

    @property
    def directory(self) -> typing.Optional[pathlib.Path]:
        """The directory languages were last loaded from."""
        return self._directory

    @property
    def languages(self) -> collections.Collection[str]:
        """The loaded languages."""
        return list(self._languages)

    def set_default_language(self, language: str, /) -> Self:
        """Set the language to fall back to when a language isn't known."""
        self._default_language = language
        return self

    def set_strings(self, language: str, strings: collections.Mapping[str, str], /) -> Self:
        """Set the strings for a language.

        This replaces any strings already set for the language.

        Parameters
        ----------
        language
            The language code (e.g. `en-US`).
        strings
            Mapping of keys to templates.

        Returns
        -------
        Self
            The string table to enable chained calls.
        """
        self._languages[language] = dict(strings)
        return self

    def get_strings(self, language: typing.Optional[str] = None, /) -> collections.Mapping[str, str]:
        """Get the strings for a language.

        This falls back to the default language when `language` isn't loaded.
        """
        if language is not None and (strings := self._languages.get(language)) is not None:
            return strings

        return self._languages.get(self._default_language, {})

    def lookup(self, language: typing.Optional[str], key: str, /, *args: typing.Any, **kwargs: typing.Any) -> str:
        """Get a formatted string.

        Keys missing from `language` are looked up in the default language.
        When the key isn't found there either, the key is returned followed by
        the space-joined arguments.

        Parameters
        ----------
        language
            The language to look the string up in.

            This falls back to the default language if [None][].
        key
            Key of the string.
        *args
            Positional arguments to format the template with.
        **kwargs
            Keyword arguments to format the template with.

        Returns
        -------
        str
            The formatted string.
        """
        template: typing.Optional[str] = None
        if language is not None and (strings := self._languages.get(language)):
            template = strings.get(key)

        if template is None:
            template = self._languages.get(self._default_language, {}).get(key)

        if template is None:
            _LOGGER.debug("Missing string %r for language %s", key, language or self._default_language)
            return " ".join((key, *map(str, args)))

        return template.format(*args, **kwargs)

    def load_directory(self, directory: typing.Union[str, pathlib.Path], /) -> int:
        """Load languages from a directory of JSON files.

        Each `<language>.json` file (e.g. `en-US.json`) should contain a flat
        object of string keys to string templates.

        Parameters
        ----------
        directory
            Path of the directory to load from.

        Returns
        -------
        int
            The number of languages which were loaded.

        Raises
        ------
        TypeError
            If a language file isn't a flat object of strings.
        ValueError
            If a language file isn't valid JSON.
        """
        directory = pathlib.Path(directory)
        count = 0
        for path in sorted(directory.glob("*.json")):
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict) or not all(
                isinstance(key, str) and isinstance(value, str) for key, value in data.items()
            ):
                raise TypeError(f"Language file {path} must be an object of strings")

            self._languages[path.stem] = data
            count += 1

        self._directory = directory
        _LOGGER.info("Loaded %s languages from %s", count, directory)
        return count

    def reload(self) -> int:
        """Reload all languages from the directory they were last loaded from.

        Raises
        ------
        RuntimeError
            If no language directory was loaded yet.
        """
        if self._directory is None:
            raise RuntimeError("Language directory not set")

        self._languages.clear()
        return self.load_directory(self._directory)


class AbstractLanguageProvider(abc_.ABC):
    """Interface of a store of users' chosen languages."""

    __slots__ = ()

    @abc_.abstractmethod
    async def get_user_language(self, ctx: context.Context, /) -> typing.Optional[str]:
        """Get the language for an invocation's user.

        Parameters
        ----------
        ctx
            The context of the invocation.

        Returns
        -------
        str | None
            The user's language or [None][] to use the default language.
        """

    @abc_.abstractmethod
    async def update_user_language(self, user: hikari.SnowflakeishOr[hikari.PartialUser], language: str, /) -> None:
        """Set a user's language.

        Parameters
        ----------
        user
            Object or ID of the user.
        language
            The language code to set.
        """

    @abc_.abstractmethod
    async def delete_user_language(self, user: hikari.SnowflakeishOr[hikari.PartialUser], /) -> None:
        """Clear a user's language so they use the default language.

        Parameters
        ----------
        user
            Object or ID of the user.
        """


class InMemoryLanguageProvider(AbstractLanguageProvider):
    """Language provider which keeps user languages in memory.

    If no language has been set for a user, their client's locale is used.
    """

    __slots__ = ("_languages", "_use_locale")

    def __init__(self, *, use_locale: bool = True) -> None:
        """Initialise an in-memory language provider.

        Parameters
        ----------
        use_locale
            Whether to fall back to the locale of the user's client.
        """
        self._languages: dict[hikari.Snowflake, str] = {}
        self._use_locale = use_locale

    async def get_user_language(self, ctx: context.Context, /) -> typing.Optional[str]:
        # <<inherited docstring from zeolite.localisation.AbstractLanguageProvider>>.
        if language := self._languages.get(ctx.user.id):
            return language

        if not self._use_locale or not ctx.locale:
            return None

        return ctx.locale.value if isinstance(ctx.locale, hikari.Locale) else ctx.locale

    async def update_user_language(self, user: hikari.SnowflakeishOr[hikari.PartialUser], language: str, /) -> None:
        # <<inherited docstring from zeolite.localisation.AbstractLanguageProvider>>.
        self._languages[hikari.Snowflake(user)] = language

    async def delete_user_language(self, user: hikari.SnowflakeishOr[hikari.PartialUser], /) -> None:
        # <<inherited docstring from zeolite.localisation.AbstractLanguageProvider>>.
        self._languages.pop(hikari.Snowflake(user), None)


class LocalisationManager:
    """Resolves localised strings for users.

    Setting a language provider registers a middleware on the client which
    records each invoking user's language before the rest of the chain runs.
    """

    __slots__ = ("_client", "_middleware", "_provider", "_strings", "_user_languages")

    def __init__(
        self,
        client: clients.Client,
        /,
        *,
        strings: typing.Optional[StringTable] = None,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        """Initialise a localisation manager.

        Parameters
        ----------
        client
            The client to register the language middleware with.
        strings
            The string table to use.

            If not provided then a new one is made with `default_language`.
        default_language
            The default language of the string table when `strings` isn't passed.
        """
        self._client = client
        self._middleware = self._resolve_language
        self._provider: typing.Optional[AbstractLanguageProvider] = None
        self._strings = strings or StringTable(default_language=default_language)
        self._user_languages: dict[hikari.Snowflake, str] = {}

    @property
    def provider(self) -> typing.Optional[AbstractLanguageProvider]:
        """The language provider, if set."""
        return self._provider

    @property
    def strings(self) -> StringTable:
        """The string table used to look up strings."""
        return self._strings

    def set_language_provider(self, provider: typing.Optional[AbstractLanguageProvider], /) -> Self:
        """Set the language provider.

        Parameters
        ----------
        provider
            The language provider to use.

            If [None][] then the language middleware is removed and all users
            use the default language.

        Returns
        -------
        Self
            The localisation manager to enable chained calls.
        """
        if provider is None:
            self._client.remove_middleware(self._middleware)
            self._user_languages.clear()

        elif self._provider is None:
            self._client.add_middleware(self._middleware)

        self._provider = provider
        return self

    def get_user_language(self, user: hikari.SnowflakeishOr[hikari.PartialUser], /) -> str:
        """Get the last resolved language of a user.

        This falls back to the string table's default language.
        """
        return self._user_languages.get(hikari.Snowflake(user)) or self._strings.default_language

    def get_string(
        self, user: hikari.SnowflakeishOr[hikari.PartialUser], key: str, /, *args: typing.Any, **kwargs: typing.Any
    ) -> str:
        """Get a localised string for a user.

        Parameters
        ----------
        user
            Object or ID of the user.
        key
            Key of the string.
        *args
            Positional arguments to format the string with.
        **kwargs
            Keyword arguments to format the string with.

        Returns
        -------
        str
            The formatted string.
        """
        return self._strings.lookup(self.get_user_language(user), key, *args, **kwargs)

    async def _resolve_language(self, ctx: context.Context, next_: abc.NextSig, /) -> None:
        assert self._provider is not None
        if language := await self._provider.get_user_language(ctx):
            self._user_languages[ctx.user.id] = language

        else:
            self._user_languages.pop(ctx.user.id, None)

        await next_()
