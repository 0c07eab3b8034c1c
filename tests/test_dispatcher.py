import pytest
from PIL import Image as PILImage

from andro_print_service import imaging
from andro_print_service.commands import Line, Image, Raw, Cut, Row
from andro_print_service.dispatcher import PrintDispatcher
from andro_print_service.exceptions import (
    PrinterNotFoundError, PrinterOfflineError, TransportFailureError, PayloadInvalidError,
)
from andro_print_service.handlers import BaseHandler
from andro_print_service.models import (
    PrinterRecord, TextJob, ImageJob, DocumentJob, ClientRecord, classify_job,
)
from andro_print_service.storage import MemoryStorage, PrinterRegistry

from tests.helpers import printer_payload


class RecordingHandler(BaseHandler):
    sent = []
    fail_with = None

    def send(self, commands):
        if self.fail_with:
            raise self.fail_with
        RecordingHandler.sent.append((self.printer.id, commands))
        return {'method': 'recording'}


@pytest.fixture(autouse=True)
def reset_handler():
    RecordingHandler.sent = []
    RecordingHandler.fail_with = None


@pytest.fixture
def registry():
    registry = PrinterRegistry(MemoryStorage())
    registry.save(PrinterRecord.from_dict(printer_payload('Cash-1', name='Front Till')))
    registry.save(PrinterRecord.from_dict(printer_payload('OFF-1', enabled=False)))
    return registry


@pytest.fixture
def probes():
    return []


@pytest.fixture
def dispatcher(registry, probes):
    def fake_probe(ip, port, timeout):
        probes.append((ip, port, timeout))
        return True

    return PrintDispatcher(registry, RecordingHandler, probe_fn=fake_probe,
                           probe_timeout=0.25, paper_width=32)


def test_text_job_is_line_then_cut(dispatcher, probes):
    receipt = dispatcher.dispatch('Cash-1', TextJob(text='Hello'))

    assert receipt.printer_id == 'Cash-1'
    assert receipt.mode == 'text'
    assert receipt.to_dict() == {'success': True, 'printerId': 'Cash-1', 'mode': 'text'}
    assert RecordingHandler.sent == [('Cash-1', [Line('Hello'), Cut()])]
    assert probes == [('127.0.0.1', 9100, 0.25)]


@pytest.mark.parametrize('key', ['cash-1', 'CASH-1', 'Front Till'])
def test_printer_resolution_by_id_or_name(dispatcher, key):
    assert dispatcher.dispatch(key, TextJob(text='x')).printer_id == 'Cash-1'


@pytest.mark.parametrize('key', ['OFF-1', 'nope', None, ''])
def test_unknown_or_disabled_printer(dispatcher, key):
    with pytest.raises(PrinterNotFoundError):
        dispatcher.dispatch(key, TextJob(text='x'))
    assert RecordingHandler.sent == []


def test_offline_printer_is_not_sent_to(registry):
    dispatcher = PrintDispatcher(registry, RecordingHandler,
                                 probe_fn=lambda ip, port, timeout: False)

    with pytest.raises(PrinterOfflineError) as exc:
        dispatcher.dispatch('Cash-1', TextJob(text='x'))

    assert exc.value.reason == 'offline'
    assert RecordingHandler.sent == []


def test_probe_can_be_skipped(registry):
    def explode(*args):
        raise AssertionError('probe should not run')

    dispatcher = PrintDispatcher(registry, RecordingHandler, probe_before_print=False,
                                 probe_fn=explode)

    assert dispatcher.dispatch('Cash-1', TextJob(text='x')).mode == 'text'


def test_transport_failure_propagates(dispatcher):
    RecordingHandler.fail_with = TransportFailureError('Connection refused', 'Cash-1')

    with pytest.raises(TransportFailureError):
        dispatcher.dispatch('Cash-1', TextJob(text='x'), ClientRecord(id='clt-000001'))


def test_invoice_job_is_rendered(dispatcher):
    job = classify_job({'company': {'name': 'Cafe'}, 'master': {'billNo': '1'},
                        'lines': [{'itemName': 'Tea', 'qty': 1, 'total': 2}]})

    assert dispatcher.dispatch('Cash-1', job).mode == 'invoice'

    commands = RecordingHandler.sent[0][1]
    assert commands[0] == Line('Cafe', align='center', bold=True)
    assert sum(isinstance(c, Row) for c in commands) == 1
    assert isinstance(commands[-1], Cut)


def test_image_job_is_scaled_to_paper_width(dispatcher, tmp_path):
    path = tmp_path / 'wide.png'
    PILImage.new('RGB', (64, 20), (0, 0, 0)).save(path)

    assert dispatcher.dispatch('Cash-1', ImageJob(image_path=path)).mode == 'image'

    image, cut = RecordingHandler.sent[0][1]
    assert isinstance(image, Image) and isinstance(cut, Cut)
    assert image.image.size == (32, 10)
    assert image.image.mode == '1'


def test_unreadable_image_is_payload_invalid(dispatcher, tmp_path):
    path = tmp_path / 'not-an-image.png'
    path.write_text('hello')

    with pytest.raises(PayloadInvalidError):
        dispatcher.dispatch('Cash-1', ImageJob(image_path=path))
    assert RecordingHandler.sent == []


def test_document_is_rasterized_page_by_page(dispatcher, tmp_path, monkeypatch):
    path = tmp_path / 'menu.pdf'
    path.write_bytes(b'%PDF-1.4')
    pages = [PILImage.new('RGB', (20, 30), 'white'), PILImage.new('RGB', (20, 30), 'black')]
    monkeypatch.setattr(imaging, 'convert_from_path', lambda *args, **kwargs: pages)

    assert dispatcher.dispatch('Cash-1', DocumentJob(document_path=path)).mode == 'document'

    commands = RecordingHandler.sent[0][1]
    assert [type(c) for c in commands] == [Image, Image, Cut]


def test_document_without_conversion_is_passed_through(dispatcher, tmp_path):
    path = tmp_path / 'menu.pdf'
    path.write_bytes(b'%PDF-1.4 body')

    dispatcher.dispatch('Cash-1', DocumentJob(document_path=path, convert=False))

    assert RecordingHandler.sent[0][1] == [Raw(b'%PDF-1.4 body'), Cut()]
