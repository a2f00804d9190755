#!/usr/bin/env python3
"""
Billing service management CLI.

Usage:
    python manage.py start                 Start the API server
    python manage.py stop                  Graceful shutdown
    python manage.py status                Check if server is running
    python manage.py render BILL.json      Render a saved bill to a PDF invoice
"""

import argparse
import asyncio
import os
import platform
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".billing.pid"

IS_WINDOWS = platform.system() == "Windows"


def _is_pid_alive(pid: int) -> bool:
    """Check if a process with the given PID is running."""
    if IS_WINDOWS:
        try:
            result = subprocess.run(
                ["tasklist", "/FI", f"PID eq {pid}", "/NH"],
                capture_output=True,
                text=True,
            )
            return str(pid) in result.stdout
        except OSError:
            return False
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _read_pid() -> int | None:
    """Read PID from the PID file, return None if missing or stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None
    if _is_pid_alive(pid):
        return pid
    # Stale PID file
    PID_FILE.unlink(missing_ok=True)
    return None


def _kill_pid(pid: int) -> bool:
    """Send termination signal to a process. Returns True if successful."""
    try:
        if IS_WINDOWS:
            subprocess.run(["taskkill", "/PID", str(pid), "/T", "/F"], capture_output=True)
        else:
            os.kill(pid, signal.SIGTERM)
        return True
    except OSError:
        return False


def _is_port_free(port: int) -> bool:
    """Check if a port is available for binding."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False


def cmd_start(args: argparse.Namespace) -> None:
    """Start the uvicorn server in the background."""
    existing_pid = _read_pid()
    if existing_pid is not None:
        print(f"Server already running (PID {existing_pid}). Use 'stop' first.")
        sys.exit(1)

    if not _is_port_free(args.port):
        print(f"Error: Port {args.port} is in use.")
        sys.exit(1)

    uvicorn_cmd = [
        sys.executable, "-m", "uvicorn",
        "src.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if args.reload:
        uvicorn_cmd.append("--reload")

    print(f"Starting server on {args.host}:{args.port}...")
    if IS_WINDOWS:
        proc = subprocess.Popen(
            uvicorn_cmd,
            cwd=str(ROOT_DIR),
            creationflags=subprocess.CREATE_NEW_PROCESS_GROUP,
        )
    else:
        proc = subprocess.Popen(uvicorn_cmd, cwd=str(ROOT_DIR))

    PID_FILE.write_text(str(proc.pid))
    print(f"Server started (PID {proc.pid}).")
    print(f"  API:      http://{args.host}:{args.port}/api")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server."""
    pid = _read_pid()
    if pid is None:
        print("Server is not running.")
        return

    print(f"Stopping server (PID {pid})...")
    if _kill_pid(pid):
        for _ in range(30):
            if not _is_pid_alive(pid):
                break
            time.sleep(0.1)
        else:
            print("Warning: Process did not exit within 3 seconds.")

    PID_FILE.unlink(missing_ok=True)
    if not _is_pid_alive(pid):
        print("Server stopped.")
    else:
        print("Warning: Server may still be running.")


def cmd_status(args: argparse.Namespace) -> None:
    """Check if the server is running."""
    pid = _read_pid()
    if pid is not None:
        print(f"Server is running (PID {pid}).")
    elif not _is_port_free(args.port):
        print(f"No PID file. Port {args.port} is in use by another process.")
    else:
        print(f"Server is not running (port {args.port} is free).")


def cmd_render(args: argparse.Namespace) -> None:
    """Render a bill JSON document and save or print the invoice."""
    from src.application.services import get_invoice_renderer, get_issuer
    from src.application.use_cases import ExportInvoiceUseCase
    from src.config import configure_logging, get_settings
    from src.core.entities.bill import Bill
    from src.core.exceptions import BillingError
    from src.core.interfaces.export_sink import ExportMode
    from src.infrastructure.export import LocalExportSink

    configure_logging(args.log_level)

    try:
        bill = Bill.model_validate_json(Path(args.bill).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Error: cannot read bill from {args.bill}: {e}")
        sys.exit(1)

    export_settings = get_settings().export
    if args.out:
        export_settings = export_settings.model_copy(update={"output_dir": Path(args.out)})

    use_case = ExportInvoiceUseCase(
        renderer=get_invoice_renderer(),
        sink=LocalExportSink(export_settings),
        issuer=get_issuer(),
    )
    mode = ExportMode.PRINT if args.print else ExportMode.DOWNLOAD

    try:
        result = asyncio.run(use_case.execute(bill, mode))
    except BillingError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    if result.fell_back:
        print(f"Warning: {mode.value} failed, used {result.receipt.mode.value} instead.")
    print(f"Invoice {bill.bill_number} -> {result.receipt.location} ({result.file_size} bytes)")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Billing service management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # start
    p_start = sub.add_parser("start", help="Start the API server")
    p_start.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    p_start.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    p_start.add_argument("--reload", action="store_true", help="Reload on code changes")
    p_start.set_defaults(func=cmd_start)

    # stop
    p_stop = sub.add_parser("stop", help="Stop the server")
    p_stop.set_defaults(func=cmd_stop)

    # status
    p_status = sub.add_parser("status", help="Check if server is running")
    p_status.add_argument("--port", type=int, default=8000, help="Port to check (default: 8000)")
    p_status.set_defaults(func=cmd_status)

    # render
    p_render = sub.add_parser("render", help="Render a bill JSON file to a PDF invoice")
    p_render.add_argument("bill", help="Path to a bill JSON document")
    p_render.add_argument("--out", help="Output directory (default: EXPORT_OUTPUT_DIR)")
    p_render.add_argument("--print", action="store_true", help="Send to the printer instead of saving")
    p_render.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override LOG_LEVEL",
    )
    p_render.set_defaults(func=cmd_render)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
