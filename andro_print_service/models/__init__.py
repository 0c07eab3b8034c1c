"""
AndroPrint Service Models
"""

from .printer import PrinterRecord, Connection
from .client import ClientRecord
from .job import (
    PrintJob, TextJob, InvoiceJob, ImageJob, DocumentJob,
    CompanyInfo, BillHeader, LineItem, DispatchReceipt,
    classify_job, image_job, document_job,
)

__all__ = [
    'PrinterRecord', 'Connection', 'ClientRecord',
    'PrintJob', 'TextJob', 'InvoiceJob', 'ImageJob', 'DocumentJob',
    'CompanyInfo', 'BillHeader', 'LineItem', 'DispatchReceipt',
    'classify_job', 'image_job', 'document_job',
]
