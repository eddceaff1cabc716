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

"""Route token normalization.

BSD ``netstat -rn`` abbreviates network destinations by dropping
trailing zero octets and, for classful masks, the prefix length:
``10.110.1/27``, ``10.9``, ``172.16``.  pf needs exact CIDR blocks, so
each token is matched against an ordered table of patterns and the
first hit rewrites it.  Tokens that match nothing are passed through
unchanged as ``Unrecognized``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

from splitnat.core.objects import CIDRBlock, Unrecognized

logger = logging.getLogger(__name__)

_O = r'(\d+)'
_M = r'/(\d+)'


def _cidr(*octets: str, prefixlen: str) -> str:
    padded = list(octets) + ['0'] * (4 - len(octets))
    return f'{".".join(padded)}/{prefixlen}'


# (pattern, transform) pairs in priority order
NORMALIZATION_RULES: tuple[tuple[re.Pattern, Callable[[re.Match], str]], ...] = (
    # a.b.c.d/m
    (re.compile(rf'^{_O}\.{_O}\.{_O}\.{_O}{_M}$'), lambda m: _cidr(*m.groups()[:4], prefixlen=m[5])),
    # a.b.c/m
    (re.compile(rf'^{_O}\.{_O}\.{_O}{_M}$'), lambda m: _cidr(*m.groups()[:3], prefixlen=m[4])),
    # a.b/m
    (re.compile(rf'^{_O}\.{_O}{_M}$'), lambda m: _cidr(*m.groups()[:2], prefixlen=m[3])),
    # a/m
    (re.compile(rf'^{_O}{_M}$'), lambda m: _cidr(m[1], prefixlen=m[2])),
    # 172.16 is the one classless shorthand printed without a mask
    (re.compile(r'^172\.16$'), lambda m: '172.16.0.0/12'),
    # a.b.c.d
    (re.compile(rf'^{_O}\.{_O}\.{_O}\.{_O}$'), lambda m: _cidr(*m.groups(), prefixlen='32')),
    # a.b.c
    (re.compile(rf'^{_O}\.{_O}\.{_O}$'), lambda m: _cidr(*m.groups(), prefixlen='24')),
    # a.b
    (re.compile(rf'^{_O}\.{_O}$'), lambda m: _cidr(*m.groups(), prefixlen='16')),
)


def normalize_route(token: str) -> CIDRBlock | Unrecognized:
    """Map one raw route destination to a CIDR block.

    Shorthand that expands to something that is not a valid IPv4
    network (``300.1/16``, ``10/40``) is returned as ``Unrecognized``
    rather than raising.  Host bits are zeroed: ``10.1.2.3/24``
    becomes ``10.1.2.0/24``.
    """
    for pattern, transform in NORMALIZATION_RULES:
        m = pattern.match(token)
        if m is None:
            continue
        address, prefixlen = transform(m).split('/')
        try:
            return CIDRBlock.from_network(address, int(prefixlen))
        except ValueError:
            logger.debug('Route %r matched %s but is not a valid network', token, pattern.pattern)
            return Unrecognized(token)
    return Unrecognized(token)


def normalize_routes(tokens: Iterable[str]) -> list[CIDRBlock | Unrecognized]:
    """Normalize, deduplicate and sort route destinations.

    The result is sorted by its text form so the generated anchor is
    byte-identical across runs for the same routing table.
    """
    by_text: dict[str, CIDRBlock | Unrecognized] = {}
    for token in tokens:
        result = normalize_route(token)
        if isinstance(result, Unrecognized):
            logger.debug('Cannot normalize VPN route %r, using it verbatim', token)
        by_text.setdefault(str(result), result)
    return [by_text[text] for text in sorted(by_text)]
