"""Tests for printer probing and the print fallback cascade."""

from __future__ import annotations

from fakes import FakePrintHost
from pdv.printing.dispatcher import SAMPLE_LINES, SAMPLE_META, SAMPLE_PAYMENT, SAMPLE_TOTALS, PrintDispatcher


def _print(host: FakePrintHost) -> bool:
    return PrintDispatcher(host).print_receipt(SAMPLE_META, SAMPLE_LINES, SAMPLE_TOTALS, SAMPLE_PAYMENT)


def test_viewer_prints_and_closes(fake_host: FakePrintHost) -> None:
    assert _print(fake_host) is True
    assert fake_host.calls == ["open_viewer"]
    assert fake_host.viewer_options == [{"print_on_load": True, "auto_close": True}]


def test_viewer_error_falls_back_to_in_place_print() -> None:
    host = FakePrintHost(viewer=RuntimeError("window creation failed"))
    assert _print(host) is True
    assert host.calls == ["open_viewer", "inject", "print_current", "remove"]
    assert len(host.printed) == 1


def test_refused_viewer_falls_back_to_in_place_print() -> None:
    host = FakePrintHost(viewer=False)
    assert _print(host) is True
    assert host.calls == ["open_viewer", "inject", "print_current", "remove"]


def test_both_strategies_failing_returns_false_and_cleans_up() -> None:
    host = FakePrintHost(viewer=False, print_error=OSError("printer offline"))
    assert _print(host) is False
    assert host.calls[-1] == "remove"
    assert host.printed == []


def test_no_print_support_skips_everything() -> None:
    host = FakePrintHost(printing=False)
    assert _print(host) is False
    assert host.calls == []


def test_preview_never_falls_back_or_prints() -> None:
    host = FakePrintHost(viewer=False)
    assert PrintDispatcher(host).preview_sample() is False
    assert host.calls == ["open_viewer"]
    assert host.viewer_options == [{"print_on_load": False, "auto_close": False}]
    assert "window.print()" not in host.viewer_documents[0].html


def test_test_print_uses_sample_sale(fake_host: FakePrintHost) -> None:
    assert PrintDispatcher(fake_host).test_print() is True
    html = fake_host.viewer_documents[0].html
    assert "Teste Sistema" in html
    assert "R$ 35,77" in html


def test_thermal_printer_detected_by_vendor_id() -> None:
    host = FakePrintHost(vendor_ids=[0x1234, 0x04B8])
    capability = PrintDispatcher(host).probe()
    assert capability.thermal_device_detected is True
    assert capability.generic_print_available is True
    assert "térmica detectada" in capability.message


def test_unknown_vendor_is_not_thermal() -> None:
    capability = PrintDispatcher(FakePrintHost(vendor_ids=[0x1234])).probe()
    assert capability.thermal_device_detected is False
    assert "impressora padrão" in capability.message


def test_no_enumeration_means_no_thermal_printer() -> None:
    host = FakePrintHost(vendor_ids=[0x04B8], enumeration=False)
    assert PrintDispatcher(host).detect_thermal_printer() is False


def test_enumeration_error_is_reported_as_not_detected() -> None:
    class BrokenHost(FakePrintHost):
        def authorized_vendor_ids(self):
            raise PermissionError("denied")

    assert PrintDispatcher(BrokenHost()).detect_thermal_printer() is False


def test_probe_is_recomputed_each_call() -> None:
    host = FakePrintHost(printing=False)
    dispatcher = PrintDispatcher(host)
    assert dispatcher.probe().generic_print_available is False
    host.printing = True
    assert dispatcher.probe().generic_print_available is True


def test_nothing_available_message() -> None:
    capability = PrintDispatcher(FakePrintHost(printing=False)).probe()
    assert "Nenhuma impressora detectada" in capability.message
