# netprobe/cli.py
"""
Command-line interface for netprobe.

Examples:
  python3 -m netprobe
  python3 -m netprobe run --config netprobe.json --out-dir reports
  python3 -m netprobe run --gateway 192.168.1.1 --dns-server 192.168.1.1
  python3 -m netprobe discover
  python3 -m netprobe show-config --config netprobe.json

Exit codes for `run`: 0 no check failed, 1 at least one FAIL, 2 bad config.
"""

import argparse
import json
import logging
import sys

from .logging_setup import setup_logging
from . import config as config_mod
from . import net_utils
from . import report as report_mod
from . import runner

LOG = logging.getLogger("netprobe.cli")

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG = 2


def build_parser():
    p = argparse.ArgumentParser(prog="netprobe", description="Run-once network diagnostics.")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every check as it runs")
    sub = p.add_subparsers(dest="cmd")

    r = sub.add_parser("run", help="Run all checks and print the report")
    r.add_argument("--config", default=None, help="JSON config file (default: built-in targets)")
    r.add_argument("--gateway", default=None, help="Default gateway IP (skips autodetection)")
    r.add_argument("--dns-server", default=None, help="Primary DNS server IP (skips autodetection)")
    r.add_argument("--out-dir", default=None, help="Also write the report into this directory")
    r.add_argument("--quiet", action="store_true", help="Do not print the report to stdout")

    sub.add_parser("discover", help="Print the detected gateway and DNS server")

    s = sub.add_parser("show-config", help="Print the effective configuration as JSON")
    s.add_argument("--config", default=None)

    return p


def _print_progress(completed, total, label):
    print(f"\r[{completed * 100 // total:3d}%] {label[:50]:<50}", end="", file=sys.stderr, flush=True)
    if completed == total:
        print(file=sys.stderr)


def cmd_run(args):
    try:
        cfg = config_mod.load_config(args.config)
    except config_mod.ConfigError as e:
        LOG.error("Configuration error: %s", e)
        return EXIT_CONFIG

    snapshot = net_utils.discover_snapshot(gateway=args.gateway, dns_server=args.dns_server)
    LOG.info("Gateway=%s DNS server=%s", snapshot.default_gateway, snapshot.primary_dns_server)

    result = runner.run_diagnostics(cfg, snapshot, progress=None if args.quiet else _print_progress)
    text = report_mod.render_report(result, cfg)

    if not args.quiet:
        print(text)
    if args.out_dir:
        path = report_mod.write_report(text, args.out_dir)
        print(f"Report written to {path}")

    return EXIT_FAILURES if result.any_failed else EXIT_OK


def cmd_discover(args):
    snap = net_utils.discover_snapshot()
    print(f"Default gateway   : {snap.default_gateway or 'not found'}")
    print(f"Primary DNS server: {snap.primary_dns_server or 'not found'}")
    return EXIT_OK


def cmd_show_config(args):
    try:
        cfg = config_mod.load_config(args.config)
    except config_mod.ConfigError as e:
        LOG.error("Configuration error: %s", e)
        return EXIT_CONFIG
    print(json.dumps(cfg.to_dict(), indent=2))
    return EXIT_OK


def main(argv=None):
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)
    if args.cmd is None:
        # No sub-command: run with defaults
        args = parser.parse_args(list(argv) + ["run"])

    setup_logging(verbose=args.verbose)

    if args.cmd == "run":
        return cmd_run(args)
    if args.cmd == "discover":
        return cmd_discover(args)
    if args.cmd == "show-config":
        return cmd_show_config(args)

    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
