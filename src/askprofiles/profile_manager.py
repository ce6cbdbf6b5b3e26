"""Profile cache and manager for askprofiles.

Implements:
- ProfileCache: ordered in-memory list of ProfileRecord, handed out as copies.
- ProfileLister: runs `ask init -l` synchronously and captures its output.
- ProfileManager:
  - init() / refresh() -> RefreshResult
  - get_profile_list() -> list[ProfileRecord] (refreshes when the cache is empty)
  - clear_cached_profile()
  - show_profile_missing_and_setup_notice()

Refresh rules:
- stderr containing the empty-profile marker, blank stdout, or a table with
  no data rows is CONFIRMED_EMPTY. The cache is kept or cleared according to
  EmptyResultPolicy (default: kept).
- A table whose rows are all malformed is UNCHANGED_DUE_TO_ERROR; the cache is
  never touched.
- Otherwise the cache is replaced in one assignment with the parsed records.
- Failing to start the tool, or a non-zero exit without the marker, raises
  ToolExecutionError.
"""

from __future__ import annotations

import enum
import logging
import subprocess
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from .config import EmptyResultPolicy, ToolSettings
from .errors import ToolExecutionError
from .integrations import CommandRunner, LinkOpener, Notifier
from .parser import ParseError, ProfileRecord, parse_listing


logger = logging.getLogger(__name__)


class ProfileCache:
    def __init__(self) -> None:
        self._profiles: List[ProfileRecord] = []

    def snapshot(self) -> List[ProfileRecord]:
        return list(self._profiles)

    def replace(self, records: List[ProfileRecord]) -> None:
        self._profiles = list(records)

    def clear(self) -> None:
        self._profiles = []

    def is_empty(self) -> bool:
        return not self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


@dataclass(frozen=True)
class ListingOutput:
    stdout: str
    stderr: str
    returncode: int


class ProfileLister:
    """Runs the configured listing command and returns its raw output."""

    def __init__(self, argv: List[str]) -> None:
        self._argv = list(argv)

    def list_profiles(self) -> ListingOutput:
        logger.debug("Running %s", " ".join(self._argv))
        try:
            proc = subprocess.run(self._argv, shell=False, capture_output=True, text=True)
        except OSError as e:
            raise ToolExecutionError(str(e)) from e
        except UnicodeDecodeError as e:
            raise ToolExecutionError(f"unreadable output from {self._argv[0]}: {e}") from e
        return ListingOutput(proc.stdout or "", proc.stderr or "", proc.returncode)


class RefreshOutcome(enum.Enum):
    POPULATED = "populated"
    CONFIRMED_EMPTY = "confirmed_empty"
    UNCHANGED_DUE_TO_ERROR = "unchanged_due_to_error"


@dataclass
class RefreshResult:
    outcome: RefreshOutcome
    records: List[ProfileRecord] = field(default_factory=list)
    skipped_lines: List[ParseError] = field(default_factory=list)
    cache_changed: bool = False

    @property
    def skipped(self) -> int:
        return len(self.skipped_lines)


class ProfileManager:
    def __init__(
        self,
        cache: ProfileCache,
        lister: ProfileLister,
        settings: ToolSettings,
        notifier: Notifier,
        command_runner: CommandRunner,
        link_opener: LinkOpener,
    ) -> None:
        self._cache = cache
        self._lister = lister
        self._settings = settings
        self._notifier = notifier
        self._command_runner = command_runner
        self._link_opener = link_opener
        self._background: List[threading.Thread] = []

    @property
    def cache(self) -> ProfileCache:
        return self._cache

    def init(self) -> RefreshResult:
        """
        Eager refresh at startup. Raises ToolExecutionError when the ASK CLI
        cannot be run; an empty profile list is not an error.
        """
        return self.refresh()

    def refresh(self) -> RefreshResult:
        output = self._lister.list_profiles()

        marker = self._settings.empty_profile_marker
        if marker and marker in output.stderr:
            logger.info("ASK CLI reports no profiles")
            return self._confirmed_empty()

        if output.returncode != 0:
            detail = output.stderr.strip() or f"exit {output.returncode}"
            raise ToolExecutionError(detail)

        if not output.stdout.strip():
            logger.info("ASK CLI printed an empty profile list")
            return self._confirmed_empty()

        parsed = parse_listing(output.stdout)
        for err in parsed.errors:
            logger.warning("Skipping malformed profile line %r: %s", err.raw_line, err.reason)

        if parsed.row_count == 0:
            return self._confirmed_empty()

        if not parsed.records:
            logger.warning("No parsable profile lines (%d skipped); cache unchanged", parsed.skipped)
            return RefreshResult(
                RefreshOutcome.UNCHANGED_DUE_TO_ERROR,
                skipped_lines=parsed.errors,
            )

        self._cache.replace(parsed.records)
        logger.info("Cached %d profile(s) (%d line(s) skipped)", len(parsed.records), parsed.skipped)
        return RefreshResult(
            RefreshOutcome.POPULATED,
            records=list(parsed.records),
            skipped_lines=parsed.errors,
            cache_changed=True,
        )

    def _confirmed_empty(self) -> RefreshResult:
        changed = False
        if self._settings.empty_result_policy is EmptyResultPolicy.CLEAR and not self._cache.is_empty():
            self._cache.clear()
            changed = True
            logger.info("Profile cache cleared after empty listing")
        return RefreshResult(RefreshOutcome.CONFIRMED_EMPTY, cache_changed=changed)

    def get_profile_list(self) -> List[ProfileRecord]:
        if self._cache.is_empty():
            self.refresh()
        # pass a new copy of the list
        return self._cache.snapshot()

    def clear_cached_profile(self) -> None:
        self._cache.clear()

    def show_profile_missing_and_setup_notice(self) -> None:
        """
        Tell the user there is no profile and offer to run `ask init`.

        Picking the action starts the init command and opens the init-command
        docs as two independent background tasks. Nothing here raises; task
        failures end up in the log.
        """
        label = self._settings.notice_action_label
        try:
            action = self._notifier.show_error_choice(self._settings.notice_message, label)
        except Exception:
            logger.exception("Could not show the missing-profile notice")
            return
        if action != label:
            return
        self._start_background("init-command", self._command_runner.run, self._settings.init_command)
        self._start_background("open-docs", self._link_opener.open, self._settings.doc_url)

    def _start_background(self, name: str, fn: Callable[..., Any], *args: Any) -> threading.Thread:
        def _task() -> None:
            try:
                fn(*args)
            except Exception:
                logger.exception("Background task %s failed", name)

        t = threading.Thread(target=_task, name=f"askprofiles-{name}", daemon=True)
        self._background.append(t)
        t.start()
        return t

    def join_background(self, timeout: Optional[float] = None) -> None:
        pending, self._background = self._background, []
        for t in pending:
            t.join(timeout=timeout)
