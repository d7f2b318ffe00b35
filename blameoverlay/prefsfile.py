# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of BlameOverlay, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import json
import logging
import os

from blameoverlay.qt import *

logger = logging.getLogger(__name__)


class PrefsFile:
    """
    Mixin for dataclasses that are persisted as a JSON file
    in the user's config directory.

    Fields whose names begin with an underscore are not saved.
    """

    _filename = ""
    _allowSaveInTestMode = False

    def __post_init__(self):
        self._dirty = False

    def setDirty(self):
        self._dirty = True

    def isDirty(self) -> bool:
        return self._dirty

    @classmethod
    def getParentDir(cls) -> str:
        if APP_TESTMODE and not cls._allowSaveInTestMode:
            return ""
        path = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.GenericConfigLocation)
        return os.path.join(path, APP_SYSTEM_NAME)

    def fullPath(self, parentDir: str = "") -> str:
        parentDir = parentDir or self.getParentDir()
        if not parentDir:
            return ""
        return os.path.join(parentDir, self._filename)

    def write(self, force=False, parentDir: str = "") -> str:
        """
        Write the file to disk if it's dirty (or if force is set).
        Return the path that was written, or an empty string if nothing was written.
        """
        if not force and not self._dirty:
            return ""

        path = self.fullPath(parentDir)
        if not path:
            # Nowhere to save (e.g. test mode)
            return ""

        os.makedirs(os.path.dirname(path), exist_ok=True)

        data = {}
        for field in dataclasses.fields(self):
            if field.name.startswith("_"):
                continue
            value = getattr(self, field.name)
            if isinstance(value, enum.Enum):
                value = value.value
            data[field.name] = value

        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent='\t')

        self._dirty = False
        logger.debug(f"Wrote {path}")
        return path

    def load(self, parentDir: str = "") -> bool:
        path = self.fullPath(parentDir)
        if not path:
            return False

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return False
        except (OSError, ValueError) as exc:
            logger.warning(f"Couldn't load {path}: {exc}")
            return False

        if not isinstance(data, dict):
            logger.warning(f"Ignoring {path}: not a JSON object")
            return False

        fields = {field.name: field for field in dataclasses.fields(self) if not field.name.startswith("_")}

        for key, value in data.items():
            try:
                field = fields[key]
            except KeyError:
                logger.warning(f"{self._filename}: unknown key '{key}'")
                continue

            default = getattr(self, key)
            try:
                value = self._coerce(default, value)
            except (TypeError, ValueError):
                logger.warning(f"{self._filename}: bad value for '{key}': {value!r}")
                continue

            setattr(self, field.name, value)

        self._dirty = False
        return True

    @staticmethod
    def _coerce(default, value):
        if isinstance(default, enum.Enum):
            return type(default)(value)
        # bool is a subclass of int, so check it first
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise TypeError("expected bool")
            return value
        if isinstance(default, int):
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError("expected int")
            return value
        if not isinstance(value, type(default)):
            raise TypeError(f"expected {type(default).__name__}")
        return value
