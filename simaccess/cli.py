"""
Command-line interface for simaccess.
"""

import argparse
import sys

# Ensure logging subsystem is initialised immediately
import simaccess.core.log  # noqa: F401

from . import __version__
from .core import config
from .core.errors import SimAccessError
from .core.log import print_and_log, set_level, LOG__GENERAL


def build_parser():
    parser = argparse.ArgumentParser(
        description="simaccess - BlueZ Sim Access Profile client control"
    )
    parser.add_argument("--version", action="version", version=f"simaccess {__version__}")
    parser.add_argument("--config", help="Settings file (default: ~/.config/simaccess/config.yaml)")
    parser.add_argument("--adapter", help="Adapter name or object path (default from settings)")

    subparsers = parser.add_subparsers(dest="mode", help="Operation mode")

    subparsers.add_parser("status", help="Show whether a SAP client is connected")
    subparsers.add_parser("disconnect", help="Disconnect the SAP client")

    monitor_parser = subparsers.add_parser("monitor", help="Print SAP property changes")
    monitor_parser.add_argument("--time", type=int, default=30, help="Listen duration seconds")
    monitor_parser.add_argument("--objects", action="store_true", help="Also print BlueZ objects added/removed")

    return parser


def parse_args(args=None):
    return build_parser().parse_args(args)


def _make_transport(settings):
    from .dbuslayer.system_bus import SystemBusTransport

    if settings["bus"] == config.BUS_SESSION:
        import dbus

        return SystemBusTransport(bus_factory=dbus.SessionBus)
    return SystemBusTransport()


def _run_monitor(sap, duration: int, objects: bool) -> None:
    import threading

    from gi.repository import GLib

    channels = [sap.subscribe()]
    cancel_objects = None
    if objects:
        om_channel, cancel_objects = sap.subscribe_object_manager()
        channels.append(om_channel)

    def _drain(channel):
        for event in channel:
            print_and_log(f"[signal] {event}", LOG__GENERAL)

    workers = [threading.Thread(target=_drain, args=(c,), daemon=True) for c in channels]
    for worker in workers:
        worker.start()

    mainloop = GLib.MainLoop()
    GLib.timeout_add_seconds(duration, lambda: mainloop.quit() or False)
    try:
        mainloop.run()
    except KeyboardInterrupt:
        pass
    finally:
        if cancel_objects is not None:
            cancel_objects()
        sap.unsubscribe()
        for worker in workers:
            worker.join(timeout=1.0)


def main(args=None, transport=None):
    """Main entry point for simaccess."""
    args = parse_args(args)

    try:
        settings = config.load_settings(args.config)
    except config.ConfigError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    set_level(settings["log_level"])

    if not args.mode:
        build_parser().print_help()
        return 0

    from .dbuslayer.sim_access import SimAccess

    adapter = args.adapter or settings["adapter"]

    try:
        if transport is None:
            transport = _make_transport(settings)
        with SimAccess.for_adapter(adapter, transport=transport) as sap:
            if args.mode == "status":
                state = "yes" if sap.get_connected() else "no"
                print_and_log(f"Connected: {state}", LOG__GENERAL)
            elif args.mode == "disconnect":
                sap.disconnect()
            elif args.mode == "monitor":
                _run_monitor(sap, args.time, args.objects)
        return 0
    except SimAccessError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
