#!/usr/bin/env python3
"""
LG IP Control CLI

Command-line interface for LG TVs with the IP Control function enabled.

Commands:
  power off                    - Turn the TV off
  query <what>                 - current-app, mac-addresses, mute, volume
  set volume|mute|input <v>    - Change a setting
  key press <key>              - Simulate a remote control key
  custom command <raw...>      - Send any command

Examples:
  lgtv -k ABCDEFGH -t 192.168.0.2 query volume
  lgtv -k ABCDEFGH -t 192.168.0.2 set volume 12
  lgtv --tv living_room power off
  lgtv -k ABCDEFGH custom command POWER off | xxd -r -p | nc 192.168.0.2 9761
  lgtv-wake -t 192.168.0.255 -m DE:AD:BE:EF:00:01
"""

import argparse
import logging
import sys
from typing import Mapping, Optional, Sequence

from .client import DEFAULT_PORT, DEFAULT_SALT, DEFAULT_SALT_STRING, send_wol_packet
from .commands import COMMANDS, Command, resolve_command
from .config import DEFAULT_CONFIG_FILE, TVConfig, TVRegistry
from .errors import LGTVError, ValidationError
from .models import parse_iv, parse_mac_address, parse_salt

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _byte_sequence(parse, option: str):
    """argparse type for a delimited hex byte sequence option."""
    def convert(value: str) -> bytes:
        try:
            return parse(value)
        except ValidationError as e:
            raise argparse.ArgumentTypeError(
                f"Error while converting parameter {option} ({e})"
            ) from e
    return convert


def configure_logging(quiet: bool = False, debug: bool = False):
    """Configure logging once; everything goes to stderr so stdout stays clean."""
    if quiet:
        logging.basicConfig(level=logging.CRITICAL + 1)  # Disable all logging
    elif debug:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)
    else:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)


def build_parser(commands: Mapping[str, Command] = COMMANDS) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lgtv",
        description="Control LG TVs over the network with the IP Control function.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
If --target-host is not given, the encrypted request is printed to stdout as
hex and nothing is sent. The reply then has to be handled by the caller.
        """,
    )

    parser.add_argument('-k', '--keycode', metavar='ABCDEFGH',
                        help='Keycode shown by the TV when IP Control was enabled (shared secret)')
    parser.add_argument('-t', '--target-host', metavar='x.x.x.x',
                        help='Host of the TV (without port)')
    parser.add_argument('-p', '--target-port', type=int, metavar='9761',
                        help=f'Control port of the TV (default: {DEFAULT_PORT})')
    parser.add_argument('--salt', type=_byte_sequence(parse_salt, '--salt'),
                        metavar='00-11-...-ff',
                        help=f'Hyphen separated 16-byte key derivation salt (default: {DEFAULT_SALT_STRING})')
    parser.add_argument('--iv', type=_byte_sequence(parse_iv, '--iv'),
                        metavar='00-11-...-ff',
                        help='Hyphen separated 16-byte IV (default: random per message)')
    parser.add_argument('--config', default=DEFAULT_CONFIG_FILE,
                        help=f'YAML file with named TVs (default: {DEFAULT_CONFIG_FILE})')
    parser.add_argument('--tv', help='Name of a TV from the config file')
    parser.add_argument('-q', '--quiet', action='store_true', help='Disable all log output')
    parser.add_argument('-d', '--debug', action='store_true',
                        help='Verbose output of each step (overrides --quiet)')

    subparsers = parser.add_subparsers(dest='command', metavar='<command>')
    subparsers.required = True

    for command in commands.values():
        subparser = subparsers.add_parser(
            command.name,
            help=command.info,
            description=command.info,
            epilog=command.after_help,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        subparser.add_argument('action', choices=list(command.actions), metavar='<action>')
        subparser.add_argument('parameters', nargs=argparse.REMAINDER,
                               help='Value substituted into the command (e.g. the volume)')

    return parser


def _merge_settings(args: argparse.Namespace) -> TVConfig:
    """Combine --tv settings with explicit options (options win)."""
    base: Optional[TVConfig] = None
    if args.tv:
        base = TVRegistry(args.config).get(args.tv)

    keycode = args.keycode or (base.keycode if base else None)
    if not keycode:
        raise ValidationError("A keycode is required (-k/--keycode or --tv)")

    return TVConfig(
        name=base.name if base else "cli",
        host=args.target_host or (base.host if base else ""),
        keycode=keycode,
        port=args.target_port or (base.port if base else DEFAULT_PORT),
        salt=args.salt or (base.salt if base else DEFAULT_SALT),
        mac_address=base.mac_address if base else None,
        broadcast=base.broadcast if base else None,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(quiet=args.quiet and not args.debug, debug=args.debug)

    try:
        settings = _merge_settings(args)
        to_send = resolve_command(args.command, args.action, args.parameters)
    except ValidationError as e:
        parser.error(str(e))

    client = settings.create_client(debug=args.debug)

    try:
        if not settings.host:
            # Offline mode: just show the encrypted requests
            for command in to_send:
                print(client.encode(command, iv=args.iv).hex())
            return 0

        for command, reply in client.iter_commands(to_send, iv=args.iv):
            print(reply.partition("\n")[0])
        return 0

    except LGTVError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("Interrupted by user", file=sys.stderr)
        return 130


def build_wake_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lgtv-wake",
        description="Wake an LG TV with a wake-on-LAN packet.",
    )
    parser.add_argument('-t', '--target-ip', metavar='192.168.0.255',
                        help="Target of the wake-on-LAN packet, usually your subnet's broadcast address")
    parser.add_argument('-m', '--mac-address', metavar='DE:AD:BE:EF:00:01',
                        type=_byte_sequence(parse_mac_address, '--mac-address'),
                        help='The MAC address of your TV')
    parser.add_argument('--config', default=DEFAULT_CONFIG_FILE,
                        help=f'YAML file with named TVs (default: {DEFAULT_CONFIG_FILE})')
    parser.add_argument('--tv', help='Name of a TV from the config file')
    parser.add_argument('-d', '--debug', action='store_true', help='Enable debug output')
    return parser


def wake_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_wake_parser()
    args = parser.parse_args(argv)

    configure_logging(debug=args.debug)

    target_ip = args.target_ip
    mac_address = args.mac_address.hex(':') if args.mac_address else None

    try:
        if args.tv:
            tv = TVRegistry(args.config).get(args.tv)
            target_ip = target_ip or tv.broadcast
            mac_address = mac_address or tv.mac_address
    except ValidationError as e:
        parser.error(str(e))

    if not target_ip or not mac_address:
        parser.error("both a target IP (-t) and a MAC address (-m) are required")

    try:
        send_wol_packet(target_ip, mac_address)
    except LGTVError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
