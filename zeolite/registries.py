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
"""Registries which load commands and extensions from source files."""
from __future__ import annotations

__all__: list[str] = ["CommandRegistry", "ExtensionRegistry", "ModuleLoader"]

import asyncio
import importlib.machinery as importlib_machinery
import importlib.util as importlib_util
import inspect
import logging
import pathlib
import types
import typing
from collections import abc as collections

from . import _internal
from . import abc
from . import errors

if typing.TYPE_CHECKING:
    from typing_extensions import Self

    from . import clients

_T = typing.TypeVar("_T")
_LOGGER: typing.Final[logging.Logger] = logging.getLogger("hikari.zeolite.registries")

_PathT = typing.Union[str, pathlib.Path]


class _SourceLoader(importlib_machinery.SourceFileLoader):
    """Source file loader which never reads or writes bytecode caches."""

    def get_code(self, fullname: str) -> types.CodeType:
        path = self.get_filename(fullname)
        return self.source_to_code(self.get_data(path), path)


def _get_path_module(module_path: pathlib.Path, /) -> types.ModuleType:
    module_name = module_path.name.rsplit(".", 1)[0]
    spec = importlib_util.spec_from_file_location(
        module_name, module_path, loader=_SourceLoader(module_name, str(module_path))
    )

    # https://github.com/python/typeshed/issues/2793
    if not spec or not spec.loader:
        raise ModuleNotFoundError(f"Module not found at {module_path}", name=module_name, path=str(module_path))

    module = importlib_util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _find_export(module: types.ModuleType, module_path: pathlib.Path, base: type[_T], /) -> typing.Union[_T, type[_T]]:
    exported = getattr(module, "__all__", None)
    if exported is not None and isinstance(exported, collections.Iterable):
        _LOGGER.debug("Scanning %s module based on its declared __all__", module_path)
        exported = typing.cast("collections.Iterable[typing.Any]", exported)
        iterator = (getattr(module, name, None) for name in exported if isinstance(name, str))

    else:
        _LOGGER.debug("Scanning all public members on %s", module_path)
        iterator = (member for name, member in inspect.getmembers(module) if not name.startswith("_"))

    found: dict[int, typing.Union[_T, type[_T]]] = {}
    for member in iterator:
        if isinstance(member, base) or (
            isinstance(member, type)
            and issubclass(member, base)
            and not inspect.isabstract(member)
            and member.__module__ == module.__name__
        ):
            found[id(member)] = member

    if len(found) != 1:
        raise errors.LoadError(
            f"{module_path} must export exactly one {base.__name__}, found {len(found)}", module_path
        )

    return next(iter(found.values()))


def _instantiate(export: typing.Union[_T, type[_T]], /) -> _T:
    if isinstance(export, type):
        return typing.cast("type[_T]", export)()

    return export


class ModuleLoader:
    """Imports modules from paths, caching them by their normalised path."""

    __slots__ = ("_modules",)

    def __init__(self) -> None:
        self._modules: dict[pathlib.Path, types.ModuleType] = {}

    def __contains__(self, path: object, /) -> bool:
        return isinstance(path, (str, pathlib.Path)) and _internal.normalize_path(pathlib.Path(path)) in self._modules

    def import_path(self, path: _PathT, /) -> types.ModuleType:
        """Import the module at a path.

        Parameters
        ----------
        path
            Path of the module's source file.

        Returns
        -------
        types.ModuleType
            The imported module.

            If the path was already imported and hasn't been invalidated then
            the cached module is returned.

        Raises
        ------
        ModuleNotFoundError
            If no module could be found at the path.
        """
        path = _internal.normalize_path(pathlib.Path(path))
        if module := self._modules.get(path):
            return module

        module = _get_path_module(path)
        self._modules[path] = module
        return module

    def invalidate(self, path: _PathT, /) -> bool:
        """Drop the cached module for a path.

        Returns
        -------
        bool
            Whether a module was cached for the path.
        """
        return self._modules.pop(_internal.normalize_path(pathlib.Path(path)), None) is not None


class _Registry:
    __slots__ = ("_client", "_directory", "_loader", "_paths")

    def __init__(
        self,
        client: clients.Client,
        /,
        *,
        directory: typing.Optional[_PathT] = None,
        loader: typing.Optional[ModuleLoader] = None,
    ) -> None:
        self._client = client
        self._directory = _internal.normalize_path(pathlib.Path(directory)) if directory else None
        self._loader = loader or ModuleLoader()
        self._paths: dict[str, pathlib.Path] = {}

    def __contains__(self, name: object, /) -> bool:
        return name in self._paths

    def __iter__(self) -> collections.Iterator[str]:
        return iter(list(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    @property
    def directory(self) -> typing.Optional[pathlib.Path]:
        """The directory relative paths are resolved against."""
        return self._directory

    @property
    def loader(self) -> ModuleLoader:
        """The module loader used to import source files."""
        return self._loader

    def path_of(self, name: str, /) -> typing.Optional[pathlib.Path]:
        """Get the source path an entry was loaded from."""
        return self._paths.get(name)

    def set_directory(self, directory: typing.Optional[_PathT], /) -> Self:
        """Set the directory relative paths are resolved against.

        Parameters
        ----------
        directory
            The directory to set or [None][] to unset it.

        Returns
        -------
        Self
            The registry instance to enable chained calls.
        """
        self._directory = _internal.normalize_path(pathlib.Path(directory)) if directory else None
        return self

    def _resolve_path(self, path: _PathT, /) -> pathlib.Path:
        path = pathlib.Path(path)
        if not path.is_absolute() and self._directory:
            path = self._directory / path

        return _internal.normalize_path(path)

    def _resolve_directory(self, directory: typing.Optional[_PathT], /) -> pathlib.Path:
        if directory is not None:
            self.set_directory(directory)

        if self._directory is None:
            raise RuntimeError(f"{type(self).__name__} directory not set")

        return self._directory


class CommandRegistry(_Registry):
    """Registry of the commands a client can dispatch to.

    Mutations are synchronous, so they're atomic with respect to dispatch.
    """

    __slots__ = ("_commands",)

    def __init__(
        self,
        client: clients.Client,
        /,
        *,
        directory: typing.Optional[_PathT] = None,
        loader: typing.Optional[ModuleLoader] = None,
    ) -> None:
        """Initialise a command registry.

        Parameters
        ----------
        client
            The client commands are loaded into.
        directory
            The directory relative paths are resolved against.
        loader
            The module loader to use.

            If not provided then a new one is made.
        """
        super().__init__(client, directory=directory, loader=loader)
        self._commands: dict[str, abc.Command] = {}

    @property
    def commands(self) -> collections.Mapping[str, abc.Command]:
        """Read-only view of the registered commands."""
        return types.MappingProxyType(self._commands)

    def get(self, name: str, /) -> typing.Optional[abc.Command]:
        """Get a registered command by name."""
        return self._commands.get(name)

    def load(self, path: _PathT, /) -> abc.Command:
        """Load a command from a source file.

        The module should export exactly one [zeolite.abc.Command][] instance
        or concrete subclass (which is initialised with no arguments). When the
        module declares `__all__` only those members are considered.

        Parameters
        ----------
        path
            Path of the command's source file.

            Relative paths are resolved against the registry's directory.

        Returns
        -------
        zeolite.abc.Command
            The loaded command.

            If its pre-load check returned [False][] then this command won't
            have been registered.

        Raises
        ------
        zeolite.errors.LoadError
            If the module couldn't be imported, doesn't export exactly one
            command, the command failed to initialise or a command with the
            same name is already registered.
        """
        path = self._resolve_path(path)
        _LOGGER.debug("Loading command from %s", path)
        try:
            with _internal.WrapLoadError(f"Failed to load command from {path}", path):
                command = _instantiate(_find_export(self._loader.import_path(path), path, abc.Command))
                should_register = command.pre_load(self._client)

        except errors.LoadError:
            self._loader.invalidate(path)
            raise

        if not should_register:
            self._loader.invalidate(path)
            _LOGGER.warning("Command %s from %s didn't load due to its pre-load check", command.name, path)
            return command

        if command.name in self._commands:
            self._loader.invalidate(path)
            _LOGGER.warning("Attempted to load already existing command %s from %s", command.name, path)
            raise errors.LoadError(f"Command {command.name} already exists", path)

        self._commands[command.name] = command
        self._paths[command.name] = path
        _LOGGER.info("Loaded command %s", command.name)
        return command

    def unload(self, name: str, /) -> abc.Command:
        """Unload a command.

        Parameters
        ----------
        name
            Name of the command to unload.

        Returns
        -------
        zeolite.abc.Command
            The unloaded command.

        Raises
        ------
        zeolite.errors.NotFoundError
            If the command isn't registered.
        """
        if name not in self._commands:
            raise errors.NotFoundError(f"Command {name} does not exist", name)

        self._loader.invalidate(self._paths.pop(name))
        command = self._commands.pop(name)
        _LOGGER.info("Unloaded command %s", name)
        return command

    def reload(self, name: str, /, *, rollback: bool = False) -> abc.Command:
        """Reload a command from the path it was loaded from.

        Parameters
        ----------
        name
            Name of the command to reload.
        rollback
            Whether to restore the previous command if loading the new one fails.

            By default a failed reload leaves the command unregistered.

        Returns
        -------
        zeolite.abc.Command
            The reloaded command.

        Raises
        ------
        zeolite.errors.NotFoundError
            If the command isn't registered.
        zeolite.errors.LoadError
            If loading the new command failed.
        """
        path = self._paths.get(name)
        if path is None:
            raise errors.NotFoundError(f"Command {name} does not exist", name)

        old_command = self.unload(name)
        try:
            return self.load(path)

        except errors.LoadError:
            if rollback:
                _LOGGER.warning("Failed to reload command %s, restoring the previous definition", name)
                self._commands[name] = old_command
                self._paths[name] = path

            else:
                _LOGGER.error("Failed to reload command %s, it is now unloaded", name)

            raise

    def load_all(self, directory: typing.Optional[_PathT] = None, /) -> int:
        """Load every command in a directory.

        Files starting with `_` are skipped. This stops at the first failure.

        Parameters
        ----------
        directory
            The directory to load from.

            If provided then this also becomes the registry's directory,
            otherwise the registry's current directory is used.

        Returns
        -------
        int
            The number of command files loaded.

        Raises
        ------
        RuntimeError
            If no directory was provided or set.
        zeolite.errors.LoadError
            If loading a command failed.
        """
        directory = self._resolve_directory(directory)
        paths = _internal.scan_directory(directory)
        for path in paths:
            self.load(path)

        _LOGGER.info("Loaded %s commands from %s", len(paths), directory)
        return len(paths)


class ExtensionRegistry(_Registry):
    """Registry of the extensions loaded into a client.

    Load, unload and reload calls are serialised by a lock as they await the
    extensions' lifecycle hooks.
    """

    __slots__ = ("_extensions", "_lock")

    def __init__(
        self,
        client: clients.Client,
        /,
        *,
        directory: typing.Optional[_PathT] = None,
        loader: typing.Optional[ModuleLoader] = None,
    ) -> None:
        """Initialise an extension registry.

        Parameters
        ----------
        client
            The client extensions are loaded into.
        directory
            The directory relative paths are resolved against.
        loader
            The module loader to use.

            If not provided then a new one is made.
        """
        super().__init__(client, directory=directory, loader=loader)
        self._extensions: dict[str, abc.Extension] = {}
        self._lock: typing.Optional[asyncio.Lock] = None

    @property
    def extensions(self) -> collections.Mapping[str, abc.Extension]:
        """Read-only view of the loaded extensions."""
        return types.MappingProxyType(self._extensions)

    def get(self, name: str, /) -> typing.Optional[abc.Extension]:
        """Get a loaded extension by name."""
        return self._extensions.get(name)

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()

        return self._lock

    async def _load(self, path: pathlib.Path, /) -> abc.Extension:
        _LOGGER.debug("Loading extension from %s", path)
        try:
            with _internal.WrapLoadError(f"Failed to load extension from {path}", path):
                extension = _instantiate(_find_export(self._loader.import_path(path), path, abc.Extension))

            if extension.name in self._extensions:
                _LOGGER.warning("Attempted to load already existing extension %s from %s", extension.name, path)
                raise errors.LoadError(f"Extension {extension.name} already exists", path)

            with _internal.WrapLoadError(f"Extension {extension.name} failed to load", path):
                await _internal.maybe_await(extension.on_load(self._client))

        except errors.LoadError:
            self._loader.invalidate(path)
            raise

        self._extensions[extension.name] = extension
        self._paths[extension.name] = path
        _LOGGER.info("Loaded extension %s", extension.name)
        return extension

    async def _unload(self, name: str, /) -> abc.Extension:
        extension = self._extensions.get(name)
        if extension is None:
            raise errors.NotFoundError(f"Extension {name} does not exist", name)

        await _internal.maybe_await(extension.on_unload(self._client))
        self._loader.invalidate(self._paths.pop(name))
        del self._extensions[name]
        _LOGGER.info("Unloaded extension %s", name)
        return extension

    async def load(self, path: _PathT, /) -> abc.Extension:
        """Load an extension from a source file.

        The extension's `on_load` hook is awaited before it's registered.

        Parameters
        ----------
        path
            Path of the extension's source file.

            Relative paths are resolved against the registry's directory.

        Returns
        -------
        zeolite.abc.Extension
            The loaded extension.

        Raises
        ------
        zeolite.errors.LoadError
            If the module couldn't be imported, doesn't export exactly one
            extension, the extension failed to initialise, an extension with
            the same name is already loaded or `on_load` raised.
        """
        async with self._get_lock():
            return await self._load(self._resolve_path(path))

    async def unload(self, name: str, /) -> abc.Extension:
        """Unload an extension.

        The extension's `on_unload` hook is awaited before it's removed; if
        the hook raises then the extension stays loaded.

        Parameters
        ----------
        name
            Name of the extension to unload.

        Returns
        -------
        zeolite.abc.Extension
            The unloaded extension.

        Raises
        ------
        zeolite.errors.NotFoundError
            If the extension isn't loaded.
        """
        async with self._get_lock():
            return await self._unload(name)

    async def reload(self, name: str, /, *, rollback: bool = False) -> abc.Extension:
        """Reload an extension from the path it was loaded from.

        Parameters
        ----------
        name
            Name of the extension to reload.
        rollback
            Whether to restore the previous extension if loading the new one fails.

            The previous extension's `on_load` hook is called again when it's restored.

        Returns
        -------
        zeolite.abc.Extension
            The reloaded extension.

        Raises
        ------
        zeolite.errors.NotFoundError
            If the extension isn't loaded.
        zeolite.errors.LoadError
            If loading the new extension failed.
        """
        async with self._get_lock():
            path = self._paths.get(name)
            if path is None:
                raise errors.NotFoundError(f"Extension {name} does not exist", name)

            old_extension = await self._unload(name)
            try:
                return await self._load(path)

            except errors.LoadError:
                if not rollback:
                    _LOGGER.error("Failed to reload extension %s, it is now unloaded", name)
                    raise

                _LOGGER.warning("Failed to reload extension %s, restoring the previous instance", name)
                try:
                    await _internal.maybe_await(old_extension.on_load(self._client))

                except Exception:
                    _LOGGER.exception("Failed to restore extension %s", name)

                else:
                    self._extensions[name] = old_extension
                    self._paths[name] = path

                raise

    async def load_all(self, directory: typing.Optional[_PathT] = None, /) -> int:
        """Load every extension in a directory.

        Files starting with `_` are skipped. This stops at the first failure.

        Parameters
        ----------
        directory
            The directory to load from.

            If provided then this also becomes the registry's directory,
            otherwise the registry's current directory is used.

        Returns
        -------
        int
            The number of extension files loaded.

        Raises
        ------
        RuntimeError
            If no directory was provided or set.
        zeolite.errors.LoadError
            If loading an extension failed.
        """
        async with self._get_lock():
            directory = self._resolve_directory(directory)
            paths = _internal.scan_directory(directory)
            for path in paths:
                await self._load(path)

        _LOGGER.info("Loaded %s extensions from %s", len(paths), directory)
        return len(paths)

    async def run_exit_hooks(self) -> None:
        """Call every loaded extension's `on_exit` hook in load order.

        Errors raised by the hooks are logged and don't stop the other hooks
        from being called.
        """
        _LOGGER.info("Calling the on_exit hooks of %s extensions", len(self._extensions))
        for name, extension in list(self._extensions.items()):
            try:
                await _internal.maybe_await(extension.on_exit(self._client))

            except Exception:
                _LOGGER.exception("The on_exit hook of extension %s raised", name)
