"""
Print Dispatcher
================

Resolves a printer, renders a job into commands and transmits them.
Holds no state between calls; no retries.
"""

import logging
from typing import List, Optional, Callable

from . import config
from .commands import Line, Image, Raw, Cut
from .exceptions import PrinterNotFoundError, PrinterOfflineError, TransportFailureError
from .handlers import BaseHandler
from .imaging import load_image, rasterize_pdf
from .liveness import probe
from .models import (
    PrintJob, TextJob, InvoiceJob, ImageJob, DocumentJob,
    DispatchReceipt, ClientRecord, PrinterRecord,
)
from .renderer import render_invoice
from .storage import PrinterRegistry

logger = logging.getLogger(__name__)


class PrintDispatcher:
    """Sends print jobs to printers from the registry."""

    def __init__(
        self,
        registry: PrinterRegistry,
        handler_class: type,
        probe_before_print: bool = config.PROBE_BEFORE_PRINT,
        probe_timeout: float = config.PROBE_TIMEOUT,
        print_timeout: float = config.PRINT_TIMEOUT,
        line_width: int = config.LINE_WIDTH,
        paper_width: int = config.PAPER_WIDTH_DOTS,
        probe_fn: Callable[..., bool] = probe,
    ):
        self.registry = registry
        self.handler_class = handler_class
        self.probe_before_print = probe_before_print
        self.probe_timeout = probe_timeout
        self.print_timeout = print_timeout
        self.line_width = line_width
        self.paper_width = paper_width
        self.probe_fn = probe_fn

    def resolve(self, printer_id: Optional[str]) -> PrinterRecord:
        """
        Find an enabled printer by id or name.

        Raises:
            PrinterNotFoundError: no enabled printer matches
        """
        printer = self.registry.find_enabled(printer_id) if printer_id else None
        if printer is None:
            raise PrinterNotFoundError(printer_id)
        return printer

    def render(self, job: PrintJob) -> List:
        """Turn a job into commands ending with ``Cut``."""
        if isinstance(job, TextJob):
            return [Line(job.text), Cut()]

        if isinstance(job, InvoiceJob):
            return render_invoice(job.company, job.master, job.lines)

        if isinstance(job, ImageJob):
            return [Image(load_image(job.image_path, self.paper_width)), Cut()]

        if isinstance(job, DocumentJob):
            if not job.convert:
                return [Raw(job.document_path.read_bytes()), Cut()]
            pages = rasterize_pdf(job.document_path, self.paper_width)
            return [Image(page) for page in pages] + [Cut()]

        raise TypeError(f'Unsupported job: {job!r}')

    def make_handler(self, printer: PrinterRecord) -> BaseHandler:
        return self.handler_class(printer, timeout=self.print_timeout,
                                  line_width=self.line_width)

    def dispatch(self, printer_id: Optional[str], job: PrintJob,
                 client: Optional[ClientRecord] = None) -> DispatchReceipt:
        """
        Print ``job`` on the printer named by ``printer_id``.

        Args:
            printer_id: Printer id (case-insensitive) or name
            job: Job to print
            client: Authenticated client, if authentication is enabled

        Returns:
            Receipt naming the printer and job mode

        Raises:
            PrinterNotFoundError: unknown or disabled printer
            PrinterOfflineError: liveness probe failed
            PayloadInvalidError: job content could not be rendered
            TransportFailureError: transmission failed
        """
        printer = self.resolve(printer_id)
        source = client.id if client else 'anonymous'

        if self.probe_before_print and not self.probe_fn(printer.ip, printer.port,
                                                         self.probe_timeout):
            logger.warning(f"Printer {printer.id} offline at {printer.ip}:{printer.port}")
            raise PrinterOfflineError(printer.id, printer.ip, printer.port)

        commands = self.render(job)
        logger.info(f"Dispatching {job.mode} job to {printer.id} for {source}")

        try:
            result = self.make_handler(printer).print_commands(commands)
        except TransportFailureError as e:
            logger.error(f"{job.mode} job to {printer.id} failed: {e.message}")
            raise

        logger.info(f"Printed {job.mode} job on {printer.id}: {result}")
        return DispatchReceipt(printer_id=printer.id, mode=job.mode)
