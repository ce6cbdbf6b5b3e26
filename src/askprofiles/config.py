"""
Configuration loading for askprofiles.

- settings.ini in XDG config dir (~/.config/askprofiles/settings.ini)

Provides:
- Settings: the parsed INI file and where it came from.
- ToolSettings: the typed view the profile manager is built from.
"""

from __future__ import annotations

import configparser
import enum
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .platform import settings_path


DEFAULT_SETTINGS = {
    "cli": {
        "executable": "ask",
        "list_profiles_args": "init -l",
        "init_command": "init",
        "empty_profile_marker": "There is no profile in your cli config file.",
    },
    "cache": {
        "empty_result_policy": "keep",
    },
    "notice": {
        "message": "No ASK CLI profile was found. Please initialize the ASK CLI first.",
        "action_label": "Initialize ASK CLI",
        "doc_url": "https://developer.amazon.com/docs/smapi/ask-cli-command-reference.html#init-command",
    },
}


class EmptyResultPolicy(str, enum.Enum):
    """What a refresh does to the cache when the tool reports zero profiles."""

    KEEP = "keep"
    CLEAR = "clear"


@dataclass
class Settings:
    config: configparser.ConfigParser
    path: Path

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> str:
        return self.config.get(section, key, fallback=fallback)  # type: ignore[no-any-return]


@dataclass(frozen=True)
class ToolSettings:
    executable: str
    list_profiles_args: List[str]
    init_command: str
    empty_profile_marker: str
    empty_result_policy: EmptyResultPolicy
    notice_message: str
    notice_action_label: str
    doc_url: str

    @property
    def list_profiles_argv(self) -> List[str]:
        return [self.executable, *self.list_profiles_args]


def load_settings(path: Optional[Path] = None) -> Settings:
    ini_path = path or settings_path()

    parser = configparser.ConfigParser(interpolation=None)
    # preload defaults
    for section, kv in DEFAULT_SETTINGS.items():
        parser.add_section(section)
        for k, v in kv.items():
            parser.set(section, k, v)

    if ini_path.exists():
        parser.read(ini_path, encoding="utf-8")

    return Settings(parser, ini_path)


def tool_settings_from(settings: Settings) -> ToolSettings:
    raw_policy = settings.get("cache", "empty_result_policy", fallback="keep").strip().lower()
    try:
        policy = EmptyResultPolicy(raw_policy)
    except ValueError:
        allowed = ", ".join(p.value for p in EmptyResultPolicy)
        raise ValueError(
            f"[cache] empty_result_policy must be one of {allowed}, got {raw_policy!r}"
        ) from None

    return ToolSettings(
        executable=settings.get("cli", "executable").strip(),
        list_profiles_args=shlex.split(settings.get("cli", "list_profiles_args")),
        init_command=settings.get("cli", "init_command").strip(),
        empty_profile_marker=settings.get("cli", "empty_profile_marker"),
        empty_result_policy=policy,
        notice_message=settings.get("notice", "message"),
        notice_action_label=settings.get("notice", "action_label"),
        doc_url=settings.get("notice", "doc_url").strip(),
    )
