#!/usr/bin/env python3
"""
StockLedger management CLI.

Usage:
    python manage.py start       Start the API server in the background
    python manage.py stop        SIGTERM the background server
    python manage.py restart     stop, then start
    python manage.py dev         Foreground server with auto-reload
    python manage.py status      Check if the server is running
    python manage.py migrate     Apply pending SQLite migrations
"""

import argparse
import asyncio
import os
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".stockledger.pid"
APP_PATH = "stockledger.api.main:app"


def _is_pid_alive(pid: int) -> bool:
    """Signal 0 probes the process without affecting it."""
    try:
        os.kill(pid, 0)
    except OSError:
        return False
    return True


def _read_pid() -> int | None:
    """Read PID from the PID file, dropping it when stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None
    if _is_pid_alive(pid):
        return pid
    PID_FILE.unlink(missing_ok=True)
    return None


def _is_port_free(host: str, port: int) -> bool:
    """True when nothing is listening on host:port."""
    bind_host = "127.0.0.1" if host == "0.0.0.0" else host
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind((bind_host, port))
    except OSError:
        return False
    return True


def _wait_for_exit(pid: int, timeout: float = 5.0) -> bool:
    """Poll until the process exits. Returns True if it did."""
    for _ in range(int(timeout / 0.1)):
        if not _is_pid_alive(pid):
            return True
        time.sleep(0.1)
    return not _is_pid_alive(pid)


def _uvicorn_cmd(host: str, port: int, reload: bool = False) -> list[str]:
    # Single worker: product locks are per process.
    cmd = [sys.executable, "-m", "uvicorn", APP_PATH, "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")
    return cmd


def cmd_start(args: argparse.Namespace) -> None:
    """Start the server in the background and record its PID."""
    running = _read_pid()
    if running is not None:
        print(f"StockLedger is already running as PID {running}; use restart or stop.")
        sys.exit(1)

    if not _is_port_free(args.host, args.port):
        print(f"Error: port {args.port} is in use by another process.")
        sys.exit(1)

    print(f"Launching uvicorn on {args.host}:{args.port}")
    proc = subprocess.Popen(_uvicorn_cmd(args.host, args.port), cwd=str(ROOT_DIR))
    PID_FILE.write_text(str(proc.pid))

    print(f"StockLedger running as PID {proc.pid}")
    print(f"  API:      http://{args.host}:{args.port}/api/products")
    print(f"  Health:   http://{args.host}:{args.port}/api/health")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server with SIGTERM, escalating to SIGKILL."""
    pid = _read_pid()
    if pid is None:
        print("StockLedger is not running.")
        return

    print(f"Sending SIGTERM to PID {pid}")
    try:
        os.kill(pid, signal.SIGTERM)
    except OSError:
        pass

    if not _wait_for_exit(pid):
        print("Server did not exit after SIGTERM; sending SIGKILL.")
        try:
            os.kill(pid, signal.SIGKILL)
        except OSError:
            pass
        _wait_for_exit(pid, timeout=2.0)

    PID_FILE.unlink(missing_ok=True)
    if _is_pid_alive(pid):
        print(f"PID {pid} is still alive; check it manually.")
    else:
        print("Server stopped.")


def cmd_restart(args: argparse.Namespace) -> None:
    """Restart with the same bind arguments."""
    cmd_stop(args)
    cmd_start(args)


def cmd_dev(args: argparse.Namespace) -> None:
    """Run the server in the foreground with --reload."""
    print(f"Starting server on {args.host}:{args.port} (reload mode). Press Ctrl+C to stop.")
    proc = subprocess.Popen(_uvicorn_cmd(args.host, args.port, reload=True), cwd=str(ROOT_DIR))
    try:
        proc.wait()
    except KeyboardInterrupt:
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
        print("\nDev server stopped.")


def cmd_status(args: argparse.Namespace) -> None:
    """Report the PID, or whether the port is taken by something else."""
    pid = _read_pid()
    if pid is not None:
        print(f"running (PID {pid})")
    elif not _is_port_free(args.host, args.port):
        print(f"stopped, but port {args.port} is taken by another process")
    else:
        print(f"stopped (port {args.port} is free)")


def cmd_migrate(args: argparse.Namespace) -> None:
    """Apply pending migrations to the configured SQLite database."""
    from stockledger.config import configure_logging
    from stockledger.infrastructure.storage.sqlite.migrations import run_migrations

    configure_logging()
    db_path = Path(args.db) if args.db else None
    results = asyncio.run(run_migrations(db_path))

    if not results:
        print("Database is up to date.")
        return
    for result in results:
        state = "ok" if result.success else f"FAILED: {result.error}"
        print(f"  {result.version} {result.name}: {state}")
    if not all(r.success for r in results):
        sys.exit(1)


def _add_bind_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="StockLedger management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_text in (
        ("start", cmd_start, "Start the server"),
        ("stop", cmd_stop, "Stop the server"),
        ("restart", cmd_restart, "Restart the server"),
        ("dev", cmd_dev, "Run the server with auto-reload"),
        ("status", cmd_status, "Check if the server is running"),
    ):
        p = sub.add_parser(name, help=help_text)
        _add_bind_args(p)
        p.set_defaults(func=func)

    p_migrate = sub.add_parser("migrate", help="Apply pending SQLite migrations")
    p_migrate.add_argument("--db", default=None, help="Database path (default: from settings)")
    p_migrate.set_defaults(func=cmd_migrate)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
