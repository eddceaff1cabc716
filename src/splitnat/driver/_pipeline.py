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

"""PipelineDriver: runs discovery, normalization, generation and install.

The OS is queried exactly once, when the snapshot is taken; every later
stage works on that snapshot or on the previous stage's output.  Any
stage failure raises a ``SplitNatError`` and aborts the run before
anything is written.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING

from splitnat.compiler import (
    BaseCompiler,
    InterfaceResolver,
    RouteExtractor,
    RuleGenerator,
    normalize_routes,
)
from splitnat.core.objects import CIDRBlock, InterfaceRef, RuleSet, Unrecognized
from splitnat.core.options import DEFAULT_SETTINGS, Settings
from splitnat.inspector import NetworkInspector, NetworkSnapshot

if TYPE_CHECKING:
    from splitnat.core._commands import CommandRunner
    from splitnat.platforms.pf import FileWriter, InstallResult

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class PipelineResult:
    snapshot: NetworkSnapshot
    ruleset: RuleSet
    anchor_text: str
    raw_routes: tuple[str, ...] = ()

    @property
    def bridge(self) -> InterfaceRef:
        return self.ruleset.bridge

    @property
    def vpn(self) -> InterfaceRef:
        return self.ruleset.vpn

    @property
    def wan(self) -> InterfaceRef:
        return self.ruleset.wan

    @property
    def warnings(self) -> tuple[str, ...]:
        return self.ruleset.warnings


class PipelineDriver(BaseCompiler):
    """Orchestrates one SplitNAT run.

    Handles:
    - Taking the network snapshot
    - Resolving bridge, WAN and VPN interfaces
    - Normalizing VPN routes and generating the rule set
    - Rendering the pf anchor
    - Handing the anchor to the installer
    """

    def __init__(
        self,
        inspector: NetworkInspector | None = None,
        settings: Settings = DEFAULT_SETTINGS,
    ) -> None:
        super().__init__()
        if inspector is None:
            from splitnat.inspector import DarwinInspector

            inspector = DarwinInspector(settings)
        self.inspector = inspector
        self.settings = settings
        self.quiet: bool = False

    def info(self, msg: str) -> None:
        """Print a progress message."""
        logger.debug(msg)
        if not self.quiet:
            print(msg)

    def compile(self) -> PipelineResult:
        """Discover, normalize and render, without touching the system."""
        from splitnat.platforms.pf._renderer import AnchorRenderer

        self.reset()

        self.info('Detecting network interfaces ...')
        snapshot = self.inspector.snapshot()

        resolver = InterfaceResolver(self.settings)
        bridge, wan = resolver.resolve(snapshot)
        self.info(f'  Bridge interface: {bridge.name}')
        self.info(f'  WAN interface:    {wan.name}')

        extractor = RouteExtractor()
        vpn, raw_routes = extractor.extract(snapshot)
        self.info(f'  VPN interface:    {vpn.name}')

        RouteExtractor.check_routes(vpn, raw_routes)
        self.info(f'Found {len(raw_routes)} VPN route(s), normalizing ...')
        destinations = normalize_routes(raw_routes)
        for dst in destinations:
            if isinstance(dst, Unrecognized):
                self.warning(f'Route {dst.raw!r} is not a recognized network, used verbatim')
            self.info(f'  {dst}')
        self._check_overlaps(destinations)

        warnings = [
            *resolver.get_warnings(),
            *extractor.get_warnings(),
            *self.get_warnings(),
        ]
        ruleset = RuleGenerator().generate(bridge, vpn, wan, destinations, warnings)
        anchor_text = AnchorRenderer(self.settings).render(ruleset)
        logger.debug('Rendered anchor: %d bytes', len(anchor_text))

        return PipelineResult(
            snapshot=snapshot,
            ruleset=ruleset,
            anchor_text=anchor_text,
            raw_routes=tuple(raw_routes),
        )

    def _check_overlaps(self, destinations) -> None:
        """Warn about destinations contained in another destination."""
        blocks = [d for d in destinations if isinstance(d, CIDRBlock)]
        for inner in blocks:
            for outer in blocks:
                if inner is not outer and inner.network.subnet_of(outer.network):
                    self.warning(f'VPN route {inner} is contained in {outer}')
                    break

    def install(
        self,
        result: PipelineResult,
        runner: CommandRunner | None = None,
        writer: FileWriter | None = None,
    ) -> InstallResult:
        from splitnat.platforms.pf._installer import PfInstaller

        self.info(f'Installing pf anchor {self.settings.anchor_name} ...')
        installer = PfInstaller(self.settings, runner=runner, writer=writer)
        return installer.install(result.anchor_text)

    def run(
        self,
        runner: CommandRunner | None = None,
        writer: FileWriter | None = None,
    ) -> tuple[PipelineResult, InstallResult]:
        result = self.compile()
        return result, self.install(result, runner=runner, writer=writer)
