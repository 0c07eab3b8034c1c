"""
Print Job Model
===============

Print jobs are transient: built once from a request by ``classify_job`` (or
the image/document constructors), consumed once by the dispatcher, never
persisted.
"""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, List, Union

from ..exceptions import PayloadInvalidError


def to_number(value: Any) -> float:
    """Coerce ``value`` to float; absent or non-numeric values become 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def _pick(data: Dict[str, Any], *keys: str) -> Optional[str]:
    """First non-empty value among ``keys``, as a string."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != '':
            return str(value)
    return None


# =============================================================================
# Invoice Payload
# =============================================================================

@dataclass
class CompanyInfo:
    name: str = ""
    address: Optional[str] = None
    phone: Optional[str] = None
    tax_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'CompanyInfo':
        data = data if isinstance(data, dict) else {}
        return cls(
            name=_pick(data, 'name', 'companyName') or '',
            address=_pick(data, 'address'),
            phone=_pick(data, 'phone', 'mobile'),
            tax_id=_pick(data, 'taxId', 'tax_id', 'gstin'),
        )


@dataclass
class BillHeader:
    bill_no: str = ""
    date: str = ""
    time: str = ""
    party_name: Optional[str] = None
    net_amount: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'BillHeader':
        data = data if isinstance(data, dict) else {}
        return cls(
            bill_no=_pick(data, 'billNo', 'bill_no') or '',
            date=_pick(data, 'date', 'billDate') or '',
            time=_pick(data, 'time', 'billTime') or '',
            party_name=_pick(data, 'partyName', 'party_name', 'customer'),
            net_amount=to_number(data.get('netAmount', data.get('net_amount'))),
        )


@dataclass
class LineItem:
    name: str = ""
    qty: float = 0.0
    total: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> 'LineItem':
        data = data if isinstance(data, dict) else {}
        return cls(
            name=_pick(data, 'itemName', 'name') or '',
            qty=to_number(data.get('qty', data.get('quantity'))),
            total=to_number(data.get('total', data.get('amount'))),
        )


# =============================================================================
# Job Variants
# =============================================================================

@dataclass
class PrintJob:
    """Base class of the job variants; ``mode`` tags the variant."""

    mode = 'unknown'


@dataclass
class TextJob(PrintJob):
    mode = 'text'

    text: str = ""


@dataclass
class InvoiceJob(PrintJob):
    mode = 'invoice'

    company: CompanyInfo = field(default_factory=CompanyInfo)
    master: BillHeader = field(default_factory=BillHeader)
    lines: List[LineItem] = field(default_factory=list)


@dataclass
class ImageJob(PrintJob):
    mode = 'image'

    image_path: Path = None


@dataclass
class DocumentJob(PrintJob):
    mode = 'document'

    document_path: Path = None
    convert: bool = True


@dataclass
class DispatchReceipt:
    """Result of a successful dispatch."""

    printer_id: str
    mode: str

    def to_dict(self) -> Dict[str, Any]:
        return {'success': True, 'printerId': self.printer_id, 'mode': self.mode}


# =============================================================================
# Classification
# =============================================================================

def classify_job(body: Any) -> Union[TextJob, InvoiceJob]:
    """
    Build the job described by a ``/print`` request body.

    An object with a ``master`` field is an invoice; otherwise a string
    ``text`` field makes a text job.

    Raises:
        PayloadInvalidError: body matches neither shape
    """
    if not isinstance(body, dict):
        raise PayloadInvalidError('Request body must be a JSON object')

    if isinstance(body.get('master'), dict):
        lines = body.get('lines') or []
        if not isinstance(lines, list):
            raise PayloadInvalidError('Invoice lines must be a list')
        return InvoiceJob(
            company=CompanyInfo.from_dict(body.get('company')),
            master=BillHeader.from_dict(body['master']),
            lines=[LineItem.from_dict(line) for line in lines],
        )

    text = body.get('text')
    if isinstance(text, str) and text:
        return TextJob(text=text)

    raise PayloadInvalidError('Unsupported payload: expected "text" or invoice "master"')


def resolve_upload(reference: Any, upload_dir: Union[str, Path]) -> Path:
    """
    Resolve a stored-file reference inside ``upload_dir``.

    Raises:
        PayloadInvalidError: missing reference, outside the upload
            directory, or not an existing file
    """
    if not isinstance(reference, str) or not reference:
        raise PayloadInvalidError('File reference required')

    root = Path(upload_dir).resolve()
    path = (root / reference).resolve()
    if root != path and root not in path.parents:
        raise PayloadInvalidError('File reference outside upload directory')
    if not path.is_file():
        raise PayloadInvalidError(f'File not found: {reference}')
    return path


def image_job(body: Any, upload_dir: Union[str, Path]) -> ImageJob:
    """Build an ``ImageJob`` from ``{"file": <reference>}``."""
    body = body if isinstance(body, dict) else {}
    return ImageJob(image_path=resolve_upload(body.get('file'), upload_dir))


def document_job(body: Any, upload_dir: Union[str, Path], convert: bool) -> DocumentJob:
    """Build a ``DocumentJob`` from ``{"file": <reference>}``."""
    body = body if isinstance(body, dict) else {}
    return DocumentJob(document_path=resolve_upload(body.get('file'), upload_dir),
                       convert=convert)
