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

"""Routing table entries."""

from __future__ import annotations

import dataclasses

# BSD route flag marking a host (as opposed to network) route
HOST_ROUTE_FLAG = 'H'

DEFAULT_DESTINATIONS = frozenset({'default', '0.0.0.0/0', '0/0'})


@dataclasses.dataclass(frozen=True)
class RouteEntry:
    """One row of the routing table, exactly as reported by the OS.

    ``destination`` is kept verbatim (``10.110.1/27``, ``172.16``,
    ``default``, ...); normalization happens later in the pipeline.
    """

    destination: str
    interface: str
    flags: str = ''
    gateway: str = ''

    @property
    def is_host_route(self) -> bool:
        return HOST_ROUTE_FLAG in self.flags

    @property
    def is_default(self) -> bool:
        return self.destination in DEFAULT_DESTINATIONS
