"""CLI entry point for the aviation weather dashboard."""

import argparse
import asyncio
import logging

from airwx.config.loader import load_config
from airwx.config.schema import AppConfig
from airwx.pipeline.dashboard import DashboardState
from airwx.reporting.formatters import format_dashboard_json, format_dashboard_text
from airwx.storage.database import connect, run_migrations

DEFAULT_CONFIG = "airwx.yaml"
DEFAULT_DB = "data/airwx.db"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="airwx",
        description="Aviation weather dashboard (METAR / TAF / ASOS)",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--db", default=DEFAULT_DB, help="SQLite state DB path")

    sub = parser.add_subparsers(dest="command")

    # serve
    serve_p = sub.add_parser("serve", help="Run the weather proxy server")
    serve_p.add_argument("--host", default=None, help="Bind address")
    serve_p.add_argument("--port", type=int, default=None, help="Bind port")

    # show
    show_p = sub.add_parser("show", help="Render the dashboard once")
    show_p.add_argument(
        "--force", action="store_true", help="Ignore the cached payload"
    )
    show_p.add_argument("--json", action="store_true", help="Emit JSON")

    # watch
    watch_p = sub.add_parser("watch", help="Render and auto refresh")
    watch_p.add_argument(
        "--interval", type=float, default=None, help="Seconds between refreshes"
    )

    # stations list / add / remove
    st_p = sub.add_parser("stations", help="Manage the airport list")
    st_sub = st_p.add_subparsers(dest="stations_command")
    st_sub.add_parser("list", help="Show configured airports")
    add_p = st_sub.add_parser("add", help="Add an airport")
    add_p.add_argument("id", help="ICAO id, e.g. KEWR")
    add_p.add_argument("--name", default="", help="Display name")
    rm_p = st_sub.add_parser("remove", help="Remove an airport")
    rm_p.add_argument("id", help="ICAO id")

    # cache clear
    cache_p = sub.add_parser("cache", help="Payload cache operations")
    cache_sub = cache_p.add_subparsers(dest="cache_command")
    cache_sub.add_parser("clear", help="Drop the cached payload")

    # config show
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    if args.command == "serve":
        return _cmd_serve(config, args)
    elif args.command == "show":
        return _cmd_show(config, args)
    elif args.command == "watch":
        return _cmd_watch(config, args)
    elif args.command == "stations":
        return _cmd_stations(config, args)
    elif args.command == "cache":
        return _cmd_cache(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _state(config: AppConfig, args) -> DashboardState:
    conn = connect(args.db)
    run_migrations(conn)
    return DashboardState(config, conn)


def _print_dashboard(state: DashboardState) -> None:
    dash = state.config.dashboard
    print(
        format_dashboard_text(
            state.views,
            state.alerts,
            state.cards,
            fetched_at=state.payload.fetched_at if state.payload else None,
            error=state.last_error,
            fresh_minutes=dash.age_fresh_minutes,
            stale_minutes=dash.age_stale_minutes,
        )
    )


def _cmd_serve(config: AppConfig, args) -> int:
    import uvicorn

    from airwx.server.app import create_app

    host = args.host or config.server.host
    port = args.port or config.server.port
    uvicorn.run(create_app(config), host=host, port=port)
    return 0


def _cmd_show(config: AppConfig, args) -> int:
    state = _state(config, args)
    try:
        ok = asyncio.run(state.refresh(force=args.force))
        if args.json and ok:
            print(format_dashboard_json(state.views, state.alerts))
        else:
            _print_dashboard(state)
        return 0 if ok else 1
    finally:
        state.conn.close()


def _cmd_watch(config: AppConfig, args) -> int:
    from airwx.daemon import AutoRefresher

    state = _state(config, args)
    refresher = AutoRefresher(state, interval=args.interval, on_render=_print_dashboard)
    try:
        asyncio.run(refresher.run())
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Watch interrupted by keyboard")
    finally:
        state.conn.close()
    return 0


def _cmd_stations(config: AppConfig, args) -> int:
    state = _state(config, args)
    try:
        if args.stations_command == "list":
            for s in state.stations:
                print(f"{s.id}  {s.name}")
            return 0
        elif args.stations_command == "add":
            if not state.add_station(args.id, args.name):
                print(f"Not added: {args.id!r} is too short, empty or already listed")
                return 1
            print(f"Added {args.id.strip().upper()}")
            return 0
        elif args.stations_command == "remove":
            if not state.remove_station(args.id):
                print(f"Not listed: {args.id}")
                return 1
            print(f"Removed {args.id.strip().upper()}")
            return 0
        else:
            print("Use: stations list | stations add ID | stations remove ID")
            return 1
    finally:
        state.conn.close()


def _cmd_cache(config: AppConfig, args) -> int:
    if args.cache_command != "clear":
        print("Use: cache clear")
        return 1
    state = _state(config, args)
    state.clear_cache()
    state.conn.close()
    print("Weather data cache cleared")
    return 0


def _cmd_config(config: AppConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    print("Use: config show")
    return 1
