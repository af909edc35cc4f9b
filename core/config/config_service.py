"""Typed, layered configuration loader with precedence handling."""
from __future__ import annotations

import os
import configparser
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from threading import RLock
from typing import Any, Dict, Mapping, Optional, Tuple, get_type_hints

logger = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
#  Paths & default definitions
# --------------------------------------------------------------------------- #

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULTS_INI = CONFIG_DIR / "defaults.ini"
ENV_PREFIX = "PDFSIGN_"


_DEFAULTS: Dict[str, Dict[str, str]] = {
    "Compositing": {
        "padding_top": "4",
        "padding_left": "8",
        "signature_max_width": "200",
        "signature_max_height": "100",
        "output_suffix": "-signed",
    },
    "Session": {
        "default_font_size": "14",
        "default_font_family": "Helvetica",
        "signature_x": "50",
        "signature_y": "50",
    },
    "Logging": {
        "level": "INFO",
        "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
    },
}


# --------------------------------------------------------------------------- #
#  Datamodels
# --------------------------------------------------------------------------- #

@dataclass
class CompositingConfig:
    padding_top: float = 4.0
    padding_left: float = 8.0
    signature_max_width: float = 200.0
    signature_max_height: float = 100.0
    output_suffix: str = "-signed"


@dataclass
class SessionConfig:
    default_font_size: float = 14.0
    default_font_family: str = "Helvetica"
    signature_x: float = 50.0
    signature_y: float = 50.0


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


# --------------------------------------------------------------------------- #
#  Helpers
# --------------------------------------------------------------------------- #

def _read_ini(path: Path) -> Dict[str, Dict[str, str]]:
    # interpolation off: the logging format contains literal '%(' sequences
    cp = configparser.ConfigParser(interpolation=None)
    cp.read(path, encoding="utf-8")
    return {section: dict(cp.items(section)) for section in cp.sections()}


def _apply(target: Dict[str, Dict[str, str]], source: Dict[str, Dict[str, str]],
           layer: str, origin: str,
           sources: Dict[Tuple[str, str], Dict[str, str]]) -> None:
    """Overlay ``source`` onto ``target``; keys outside the known sections are skipped."""
    for section, items in source.items():
        known = _DEFAULTS.get(section)
        if known is None:
            logger.warning("Ignoring unknown config section [%s] from %s", section, origin)
            continue
        sec = target.setdefault(section, {})
        for key, value in items.items():
            if key not in known:
                logger.warning("Ignoring unknown config key %s.%s from %s", section, key, origin)
                continue
            sec[key] = value
            sources[(section, key)] = {"layer": layer, "source": origin}


def _build_dataclass(cls: type, section: str, data: Mapping[str, str]) -> Any:
    hints = get_type_hints(cls)
    kwargs = {}
    for field in fields(cls):
        if field.name not in data:
            continue
        raw = data[field.name]
        try:
            kwargs[field.name] = hints[field.name](raw)
        except ValueError as exc:
            raise ValueError(f"Invalid value for {section}.{field.name}: {raw!r}") from exc
    return cls(**kwargs)


def _env_overlays(environ: Mapping[str, str]) -> Dict[str, Dict[str, str]]:
    result: Dict[str, Dict[str, str]] = {}
    for env_key, value in environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        remainder = env_key[len(ENV_PREFIX):]
        parts = remainder.split("__", 1)
        if len(parts) != 2:
            continue
        section, key = parts
        result.setdefault(section.title(), {})[key.lower()] = value
    return result


def _user_config_path(environ: Mapping[str, str]) -> Path:
    if os.name == "nt":
        appdata = environ.get("APPDATA") or (Path.home() / "AppData" / "Roaming")
        return Path(appdata) / "PDFSign" / "config.ini"
    base = environ.get("XDG_CONFIG_HOME") or (Path.home() / ".config")
    return Path(base) / "pdfsign" / "config.ini"


# --------------------------------------------------------------------------- #
#  ConfigService
# --------------------------------------------------------------------------- #


class ConfigService:
    """Facade merging layered configuration with type safety.

    Precedence (lowest first): embedded defaults, ``defaults.ini``,
    ``PDFSIGN_<SECTION>__<KEY>`` environment variables, user config file.
    Nothing is ever written back to disk.
    """

    def __init__(self, *, defaults_ini: Optional[Path] = None,
                 user_ini: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None) -> None:
        self._lock = RLock()
        self._environ = environ
        self._defaults_ini = Path(defaults_ini) if defaults_ini else DEFAULTS_INI
        self._user_ini = Path(user_ini) if user_ini else _user_config_path(self._env)
        self.reload()

    @property
    def _env(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    # ------------------------------------------------------------------ #
    def reload(self) -> None:
        with self._lock:
            merged: Dict[str, Dict[str, str]] = {}
            sources: Dict[Tuple[str, str], Dict[str, str]] = {}

            # Layer 0: embedded defaults
            _apply(merged, _DEFAULTS, "code", "embedded", sources)

            # Layer 1: defaults.ini
            if self._defaults_ini.exists():
                _apply(merged, _read_ini(self._defaults_ini), "defaults.ini",
                       str(self._defaults_ini), sources)

            # Layer 2: environment variables
            _apply(merged, _env_overlays(self._env), "env", "os.environ", sources)

            # Layer 3: user overrides
            if self._user_ini.exists():
                _apply(merged, _read_ini(self._user_ini), "user", str(self._user_ini), sources)

            self._sources = sources

            self.compositing = _build_dataclass(CompositingConfig, "Compositing", merged["Compositing"])
            self.session = _build_dataclass(SessionConfig, "Session", merged["Session"])
            self.logging = _build_dataclass(LoggingConfig, "Logging", merged["Logging"])

    # ------------------------------------------------------------------ #
    def meta_source(self, section: str, key: str) -> Dict[str, str] | None:
        """Which layer (and file) the effective value of ``section.key`` came from."""
        return self._sources.get((section, key))


# Global singleton
config_service = ConfigService()
