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

"""Pipeline stages turning a network snapshot into a rule set."""

from ._base import BaseCompiler, CompilerStatus
from ._extractor import RouteExtractor, is_private_destination, is_vpn_route
from ._generator import RuleGenerator
from ._normalizer import NORMALIZATION_RULES, normalize_route, normalize_routes
from ._resolver import InterfaceResolver

__all__ = [
    'NORMALIZATION_RULES',
    'BaseCompiler',
    'CompilerStatus',
    'InterfaceResolver',
    'RouteExtractor',
    'RuleGenerator',
    'is_private_destination',
    'is_vpn_route',
    'normalize_route',
    'normalize_routes',
]
