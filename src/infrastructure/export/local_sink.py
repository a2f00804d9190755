"""
Local filesystem / print-command export sink.

``save`` writes the PDF into the configured output directory. ``print``
writes it to a temporary file and hands it to the system print command
(``lp`` by default); a missing command, non-zero exit or timeout is an
``ExportError`` so callers can fall back to saving.
"""

import asyncio
import tempfile
from pathlib import Path

from src.config import get_logger, get_settings
from src.config.settings import ExportSettings
from src.core.exceptions import ExportError
from src.core.interfaces.export_sink import ExportMode, ExportReceipt, IExportSink

logger = get_logger(__name__)


class LocalExportSink(IExportSink):
    """Saves invoices to disk and prints them through a shell command."""

    def __init__(self, export_settings: ExportSettings | None = None):
        self._settings = export_settings or get_settings().export

    @property
    def output_dir(self) -> Path:
        return self._settings.output_dir

    async def save(self, document: bytes, file_name: str) -> ExportReceipt:
        target = self.output_dir / Path(file_name).name
        try:
            await asyncio.to_thread(self._write, target, document)
        except OSError as e:
            raise ExportError(ExportMode.DOWNLOAD.value, str(e)) from e

        logger.info("invoice_saved", path=str(target), size_bytes=len(document))
        return ExportReceipt(mode=ExportMode.DOWNLOAD, file_name=target.name, location=str(target))

    async def print(self, document: bytes, file_name: str) -> ExportReceipt:
        command = list(self._settings.print_command)
        if not command:
            raise ExportError(ExportMode.PRINT.value, "no print command configured")

        with tempfile.TemporaryDirectory(prefix="invoice-print-") as tmp:
            spool = Path(tmp) / Path(file_name).name
            try:
                await asyncio.to_thread(spool.write_bytes, document)
                proc = await asyncio.create_subprocess_exec(
                    *command,
                    str(spool),
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                raise ExportError(ExportMode.PRINT.value, f"cannot run {command[0]}: {e}") from e

            try:
                _, stderr = await asyncio.wait_for(
                    proc.communicate(), timeout=self._settings.print_timeout
                )
            except asyncio.TimeoutError as e:
                proc.kill()
                await proc.wait()
                raise ExportError(
                    ExportMode.PRINT.value,
                    f"{command[0]} timed out after {self._settings.print_timeout}s",
                ) from e

            if proc.returncode != 0:
                reason = stderr.decode(errors="replace").strip() or f"exit code {proc.returncode}"
                raise ExportError(ExportMode.PRINT.value, reason)

        logger.info("invoice_sent_to_printer", file_name=file_name, command=command[0])
        return ExportReceipt(mode=ExportMode.PRINT, file_name=file_name, location=command[0])

    @staticmethod
    def _write(target: Path, document: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(document)
