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

"""CLI entry point: detect the VPN split, generate and install the pf anchor."""

import argparse
import logging
import sys
import time
from pathlib import Path

import splitnat
import splitnat.core
import splitnat.core.options
import splitnat.inspector
from splitnat.driver import PipelineDriver

__author__ = 'Linuxfabrik GmbH, Zurich/Switzerland'

DESCRIPTION = """SplitNAT routes Multipass guest traffic through a split-tunnel VPN on macOS.
Detects the VM bridge, the internet interface and the VPN tunnel with its private routes,
then generates and installs a pf anchor that NATs VPN destinations onto the tunnel and
everything else onto the internet interface."""

LOG_FORMAT = '%(levelname)s: %(message)s'


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog='splitnat',
        description=DESCRIPTION,
    )

    parser.add_argument(
        '-c',
        '--config',
        default=None,
        dest='CONFIG',
        help=f'path to the settings file. Default: ${splitnat.core.options.ENV_VAR}, '
        'then ~/.config/splitnat/config.yml, then /etc/splitnat/config.yml',
    )

    parser.add_argument(
        '-n',
        '--dry-run',
        action='store_true',
        dest='DRY_RUN',
        help='print the generated anchor to stdout, install nothing',
    )

    parser.add_argument(
        '-o',
        '--output',
        default='',
        dest='OUTPUT',
        help='write the generated anchor to this file, install nothing',
    )

    parser.add_argument(
        '--snapshot',
        default='',
        dest='SNAPSHOT',
        help='read interfaces and routes from this YAML file instead of the live system',
    )

    parser.add_argument(
        '-v',
        '--verbose',
        action='count',
        default=0,
        dest='VERBOSE',
        help='verbose output (repeat for higher verbosity)',
    )

    parser.add_argument(
        '-V',
        '--version',
        action='version',
        version=f'%(prog)s: v{splitnat.__version__} by {__author__}',
    )

    return parser.parse_args(argv)


def setup_logging(verbose):
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr, level=level)


def print_error(err):
    print(f'Error: {err.message}', file=sys.stderr)
    if err.hint:
        print(file=sys.stderr)
        print(err.hint, file=sys.stderr)


def print_summary(result, install_result, settings):
    print()
    print('SplitNAT is active.')
    print(f'  Guests on {result.bridge.name} reach {len(result.ruleset.destinations)} '
          f'VPN network(s) through {result.vpn.name}')
    print(f'  All other guest traffic leaves through {result.wan.name}')
    print(f'  Anchor: {install_result.anchor_path}'
          + ('' if install_result.anchor_changed else ' (unchanged)'))
    if install_result.pf_conf_backed_up:
        print(f'  Original pf.conf saved as {settings.pf_conf_backup}')
    if result.warnings:
        print(f'  {len(result.warnings)} warning(s), see the anchor header')
    print()
    print('Run splitnat again after reconnecting the VPN or restarting Multipass.')


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.VERBOSE)
    t_start = time.monotonic()

    try:
        settings = splitnat.core.options.load_settings(args.CONFIG)

        if args.SNAPSHOT:
            inspector = splitnat.inspector.StaticInspector.from_yaml(args.SNAPSHOT, settings)
        else:
            inspector = splitnat.inspector.DarwinInspector(settings)

        driver = PipelineDriver(inspector, settings)
        driver.quiet = args.DRY_RUN
        result = driver.compile()

        if args.DRY_RUN:
            sys.stdout.write(result.anchor_text)
            return 0

        if args.OUTPUT:
            Path(args.OUTPUT).write_text(result.anchor_text, encoding='utf-8')
            print(f'Anchor written to {args.OUTPUT}')
            return 0

        install_result = driver.install(result)
    except splitnat.core.SplitNatError as e:
        print_error(e)
        return e.exit_code
    except OSError as e:
        print(f'Error: {e}', file=sys.stderr)
        return 1

    print_summary(result, install_result, settings)

    elapsed = time.monotonic() - t_start
    logging.getLogger(__name__).info('Finished in %.2fs', elapsed)
    return 0


if __name__ == '__main__':
    sys.exit(main())
