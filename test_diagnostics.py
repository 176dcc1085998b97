import pytest

from diagnostics import Diagnostic, DiagnosticLedger, AggregatedDiagnosticError

# ────────────────────────────────
# region Ledger
# ────────────────────────────────

def test_ledger_add_items_reset():
    ledger = DiagnosticLedger()
    assert len(ledger) == 0
    ledger.add(where="bisection", what="no sign change", consequence="midpoint returned")
    ledger.add(where="precision", what="non-positive", consequence="0 decimals", severity="info")
    items = ledger.items()
    assert len(items) == 2
    assert isinstance(items[0], Diagnostic)
    assert items[0].severity == "warn"
    assert items[0].data == {}
    ledger.reset()
    assert ledger.items() == []

def test_ledger_items_is_a_copy():
    ledger = DiagnosticLedger()
    ledger.add(where="a", what="b", consequence="c")
    ledger.items().clear()
    assert len(ledger) == 1

def test_ledger_escalated_skips_info():
    ledger = DiagnosticLedger()
    ledger.add(where="a", what="b", consequence="c", severity="info")
    assert ledger.escalated() == []
    ledger.add(where="d", what="e", consequence="f", severity="error")
    assert [d.where for d in ledger.escalated()] == ["d"]

def test_ledger_rejects_unknown_severity():
    ledger = DiagnosticLedger()
    with pytest.raises(ValueError, match="severity"):
        ledger.add(where="a", what="b", consequence="c", severity="fatal")

def test_ledger_format():
    ledger = DiagnosticLedger()
    ledger.add(where="refine", what="no sign change", consequence="midpoint returned", data={"interval": (1, 2)})
    text = ledger.format()
    assert "[warn] refine: no sign change" in text
    assert "midpoint returned" in text
    assert "(1, 2)" in text

# endregion

def test_aggregated_error_carries_items():
    item = Diagnostic(where="a", what="b", consequence="c")
    err = AggregatedDiagnosticError("boom", items=[item])
    assert isinstance(err, RuntimeError)
    assert err.items == [item]
    assert AggregatedDiagnosticError("boom").items == []
