#!/usr/bin/env python3
"""
askprofiles CLI

Lists the ASK CLI profiles known to `ask init -l` and helps with first-time setup.

Subcommands:
  - list [--json] [--no-prompt]
  - refresh
  - setup
  - config show-paths [--json]

Exit codes:
  0: success
  1: ASK CLI not functional or general error
  2: invalid arguments
  4: no profiles configured
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from typing import Dict

from .config import ToolSettings, load_settings, tool_settings_from
from .errors import ToolExecutionError
from .integrations import ConsoleNotifier, GioLinkOpener, SubprocessCommandRunner
from .logging_setup import setup_logging
from .platform import log_path, settings_path
from .profile_manager import ProfileCache, ProfileLister, ProfileManager


EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_NO_PROFILES = 4


def build_manager(tool: ToolSettings) -> ProfileManager:
    return ProfileManager(
        cache=ProfileCache(),
        lister=ProfileLister(tool.list_profiles_argv),
        settings=tool,
        notifier=ConsoleNotifier(),
        command_runner=SubprocessCommandRunner(tool.executable),
        link_opener=GioLinkOpener(),
    )


def _manager_from_config() -> ProfileManager:
    return build_manager(tool_settings_from(load_settings()))


def cmd_list(args: argparse.Namespace) -> int:
    manager = _manager_from_config()
    try:
        profiles = manager.get_profile_list()
    except ToolExecutionError as e:
        print(str(e), file=sys.stderr)
        return EXIT_ERROR

    if not profiles:
        if not args.no_prompt:
            manager.show_profile_missing_and_setup_notice()
            manager.join_background()
        else:
            print("no profiles configured", file=sys.stderr)
        return EXIT_NO_PROFILES

    if args.json:
        print(json.dumps([asdict(p) for p in profiles], ensure_ascii=False, indent=2))
    else:
        for p in profiles:
            ref = p.cloud_credential_ref if p.cloud_credential_ref is not None else "-"
            print(f"{p.profile_name}\t{ref}")
    return EXIT_OK


def cmd_refresh(_args: argparse.Namespace) -> int:
    manager = _manager_from_config()
    try:
        result = manager.refresh()
    except ToolExecutionError as e:
        print(str(e), file=sys.stderr)
        return EXIT_ERROR
    print(f"{result.outcome.value}: {len(result.records)} profile(s), {result.skipped} line(s) skipped")
    return EXIT_OK


def cmd_setup(_args: argparse.Namespace) -> int:
    manager = _manager_from_config()
    manager.show_profile_missing_and_setup_notice()
    manager.join_background()
    return EXIT_OK


def _config_paths() -> Dict[str, str]:
    return {
        "settings": str(settings_path()),
        "state_log": str(log_path()),
    }


def cmd_config_show_paths(args: argparse.Namespace) -> int:
    paths = _config_paths()
    if getattr(args, "json", False):
        print(json.dumps(paths, ensure_ascii=False, indent=2))
    else:
        for k, v in paths.items():
            print(f"{k}: {v}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="askprofiles", description="ASK CLI profile cache")
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="override ASKPROFILES_LOG_LEVEL for this run",
    )
    sub = p.add_subparsers(dest="sub")

    p_list = sub.add_parser("list", help="list ASK CLI profiles and their AWS profiles")
    p_list.add_argument("--json", action="store_true", help="print as JSON")
    p_list.add_argument("--no-prompt", action="store_true", help="do not offer to run 'ask init' when empty")
    p_list.set_defaults(func=cmd_list)

    p_refresh = sub.add_parser("refresh", help="run 'ask init -l' once and report the outcome")
    p_refresh.set_defaults(func=cmd_refresh)

    p_setup = sub.add_parser("setup", help="offer to initialize the ASK CLI")
    p_setup.set_defaults(func=cmd_setup)

    p_cfg = sub.add_parser("config", help="configuration utilities")
    sub_cfg = p_cfg.add_subparsers(dest="sub_cfg")
    p_cfg_paths = sub_cfg.add_parser("show-paths", help="print important file paths")
    p_cfg_paths.add_argument("--json", action="store_true", help="print as JSON")
    p_cfg_paths.set_defaults(func=cmd_config_show_paths)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_USAGE

    setup_logging(args.log_level)
    try:
        return args.func(args)
    except ValueError as e:
        # invalid settings.ini values
        print(str(e), file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
