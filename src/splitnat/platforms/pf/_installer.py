# Copyright (C) 2026 Linuxfabrik <info@linuxfabrik.ch>
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# On Debian systems, the complete text of the GNU General Public License
# version 2 can be found in /usr/share/common-licenses/GPL-2.
#
# SPDX-License-Identifier: GPL-2.0-or-later

"""Validate, install and activate a generated pf anchor.

Install order:

1. syntax-check the rendered anchor on its own (nothing touched yet)
2. replace the anchor file, unless its content is already identical
3. add the anchor references to ``pf.conf`` if missing (backup first)
4. syntax-check the complete ``pf.conf``; on any failure every file
   replaced in steps 2 and 3 is restored
5. enable IP forwarding
6. reload and enable pf

All writes go through a ``FileWriter`` and are atomic (temporary file
in the destination directory, then rename).
"""

from __future__ import annotations

import abc
import dataclasses
import logging
import os
import re
import tempfile
from pathlib import Path

from splitnat.core._commands import CommandRunner, is_root
from splitnat.core._errors import CommandFailed, ConfigValidationFailed, SplitNatError
from splitnat.core.options import DEFAULT_SETTINGS, Settings, SudoMode

from ._os_configurator import OSConfigurator_pf

logger = logging.getLogger(__name__)

_ERROR_RE = re.compile(r'error', re.IGNORECASE)


def use_sudo(settings: Settings) -> bool:
    if settings.use_sudo == SudoMode.ALWAYS:
        return True
    if settings.use_sudo == SudoMode.NEVER:
        return False
    return not is_root()


# -----------------------------
# File writers
# -----------------------------


class FileWriter(abc.ABC):
    """Capability to read and atomically replace system files."""

    @abc.abstractmethod
    def read_text(self, path: str) -> str | None:
        """Return the file content, or None if it does not exist."""

    @abc.abstractmethod
    def write_text(self, path: str, content: str, mode: int = 0o644) -> None: ...

    @abc.abstractmethod
    def copy(self, src: str, dst: str) -> None: ...

    @abc.abstractmethod
    def remove(self, path: str) -> None: ...

    def exists(self, path: str) -> bool:
        return Path(path).exists()


class LocalFileWriter(FileWriter):
    """Write with the current process's privileges."""

    def read_text(self, path: str) -> str | None:
        try:
            return Path(path).read_text(encoding='utf-8')
        except FileNotFoundError:
            return None

    def write_text(self, path: str, content: str, mode: int = 0o644) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=target.parent, prefix=f'.{target.name}.')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.chmod(tmp, mode)
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def copy(self, src: str, dst: str) -> None:
        content = self.read_text(src)
        if content is None:
            raise FileNotFoundError(src)
        self.write_text(dst, content, Path(src).stat().st_mode & 0o777)

    def remove(self, path: str) -> None:
        Path(path).unlink(missing_ok=True)


class SudoFileWriter(FileWriter):
    """Write root-owned files through ``sudo install`` and ``sudo mv``."""

    def __init__(self, runner: CommandRunner) -> None:
        self.runner = runner

    def read_text(self, path: str) -> str | None:
        try:
            return Path(path).read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except PermissionError:
            proc = self.runner.run(['cat', path], check=False, privileged=True)
            return proc.stdout if proc.returncode == 0 else None

    def write_text(self, path: str, content: str, mode: int = 0o644) -> None:
        staged = f'{path}.splitnat-new'
        with tempfile.NamedTemporaryFile(
            'w', encoding='utf-8', suffix='.conf', delete=False
        ) as f:
            f.write(content)
            local = f.name
        try:
            self.runner.run(
                ['install', '-m', f'{mode:o}', local, staged],
                privileged=True,
            )
            self.runner.run(['mv', '-f', staged, path], privileged=True)
        finally:
            Path(local).unlink(missing_ok=True)

    def copy(self, src: str, dst: str) -> None:
        self.runner.run(['cp', '-p', src, dst], privileged=True)

    def remove(self, path: str) -> None:
        self.runner.run(['rm', '-f', path], privileged=True)


# -----------------------------
# pfctl
# -----------------------------


class Pfctl:
    def __init__(self, settings: Settings, runner: CommandRunner) -> None:
        self.settings = settings
        self.runner = runner

    def validate(self, path: str, anchor: str | None = None) -> None:
        """Parse *path* without loading it (``pfctl -n``)."""
        cmd = [self.settings.pfctl, '-n']
        if anchor:
            cmd += ['-a', anchor]
        cmd += ['-f', path]
        proc = self.runner.run(cmd, check=False, privileged=True)
        output = f'{proc.stdout}{proc.stderr}'
        if proc.returncode != 0 or _ERROR_RE.search(output):
            raise ConfigValidationFailed(
                f'pf configuration {path} has syntax errors',
                hint=output.strip(),
                output=output,
            )
        logger.debug('pfctl accepted %s', path)

    def reload(self, pf_conf: str) -> None:
        """Disable, reload and re-enable pf for a clean state."""
        self.runner.run([self.settings.pfctl, '-d'], check=False, privileged=True)
        try:
            self.runner.run([self.settings.pfctl, '-f', pf_conf], privileged=True)
        except CommandFailed:
            # -d keeps the loaded ruleset, so -e brings back the previous one
            proc = self.runner.run([self.settings.pfctl, '-e'], check=False, privileged=True)
            if proc.returncode == 0 or 'already enabled' in proc.stderr:
                logger.error(
                    'Loading %s failed; pf re-enabled with the previous ruleset, '
                    'the new files stay in place',
                    pf_conf,
                )
            else:
                logger.error(
                    'Loading %s failed and pf could not be re-enabled; pf is DISABLED',
                    pf_conf,
                )
            raise
        proc = self.runner.run([self.settings.pfctl, '-e'], check=False, privileged=True)
        if proc.returncode != 0 and 'already enabled' not in proc.stderr:
            raise CommandFailed([self.settings.pfctl, '-e'], proc.returncode, proc.stderr)


# -----------------------------
# Installer
# -----------------------------


@dataclasses.dataclass
class InstallResult:
    anchor_path: str
    anchor_changed: bool = False
    pf_conf_patched: bool = False
    pf_conf_backed_up: bool = False
    ip_forwarding: bool = False
    reloaded: bool = False


class PfInstaller:
    def __init__(
        self,
        settings: Settings = DEFAULT_SETTINGS,
        runner: CommandRunner | None = None,
        writer: FileWriter | None = None,
    ) -> None:
        self.settings = settings
        if runner is None:
            runner = CommandRunner(sudo=use_sudo(settings))
        self.runner = runner
        if writer is None:
            writer = SudoFileWriter(runner) if runner.sudo else LocalFileWriter()
        self.writer = writer
        self.pfctl = Pfctl(settings, runner)
        self.oscnf = OSConfigurator_pf(settings)

    def validate_anchor(self, anchor_text: str) -> None:
        with tempfile.NamedTemporaryFile(
            'w', encoding='utf-8', prefix='splitnat-', suffix='.conf', delete=False
        ) as f:
            f.write(anchor_text)
            tmp = f.name
        try:
            self.pfctl.validate(tmp, anchor=self.settings.anchor_name)
        finally:
            Path(tmp).unlink(missing_ok=True)

    def install(self, anchor_text: str) -> InstallResult:
        s = self.settings
        result = InstallResult(anchor_path=s.anchor_path)

        self.validate_anchor(anchor_text)

        # (path, previous content or None) for every file replaced
        replaced: list[tuple[str, str | None]] = []
        try:
            current = self.writer.read_text(s.anchor_path)
            if current == anchor_text:
                logger.info('Anchor %s is up to date', s.anchor_path)
            else:
                self.writer.write_text(s.anchor_path, anchor_text, 0o644)
                replaced.append((s.anchor_path, current))
                result.anchor_changed = True
                logger.info('Wrote anchor %s', s.anchor_path)

            pf_text = self.writer.read_text(s.pf_conf)
            if pf_text is not None and self.oscnf.has_anchor_references(pf_text):
                logger.info('Anchor already referenced in %s', s.pf_conf)
            else:
                if pf_text is not None and not self.writer.exists(s.pf_conf_backup):
                    self.writer.copy(s.pf_conf, s.pf_conf_backup)
                    result.pf_conf_backed_up = True
                    logger.info('Backed up %s to %s', s.pf_conf, s.pf_conf_backup)
                self.writer.write_text(s.pf_conf, self.oscnf.patch_pf_conf(pf_text or ''), 0o644)
                replaced.append((s.pf_conf, pf_text))
                result.pf_conf_patched = True
                logger.info('Added anchor %s to %s', s.anchor_name, s.pf_conf)

            self.pfctl.validate(s.pf_conf)
        except (SplitNatError, OSError):
            self._rollback(replaced)
            raise

        if s.ip_forwarding:
            self.runner.run(self.oscnf.ip_forward_command(), privileged=True)
            result.ip_forwarding = True

        self.pfctl.reload(s.pf_conf)
        result.reloaded = True
        return result

    def _rollback(self, replaced: list[tuple[str, str | None]]) -> None:
        for path, previous in reversed(replaced):
            logger.warning('Restoring %s', path)
            try:
                if previous is None:
                    self.writer.remove(path)
                else:
                    self.writer.write_text(path, previous, 0o644)
            except (SplitNatError, OSError) as e:
                logger.error('Could not restore %s: %s', path, e)
