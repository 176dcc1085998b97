'''
Diagnostics ledger (what it is, how to use it)
----------------------------------------------
The root finder records places where it had to defuse a condition instead of failing
(e.g., an isolating interval whose endpoints do not bracket a sign change, a non-positive
precision, the square-free time gate falling back to numeric GCD). Each public
RealRootFinder method resets the ledger on entry and adds entries via `_add_diag(...)`.

• Inspect: after a call, use `get_diagnostics()` to obtain a list of `Diagnostic`
  items. Call `format_diagnostics()` for a human-readable summary.

• Typical use: if warnings are present, re-run with a coarser precision, the
  "mpmath" evaluation backend, or inspect the input polynomial's conditioning.
  Construct the finder with `strict=True` to turn recorded warnings into an
  AggregatedDiagnosticError. The ledger is the programmatic source of truth;
  logging is only informational.

API:
  - ledger.reset()
  - ledger.add(**fields)
  - ledger.items() -> list[Diagnostic]
  - ledger.format() -> str
'''
from dataclasses import dataclass, field
from typing import Any, List

SEVERITIES = ("info", "warn", "error")

@dataclass
class Diagnostic:
    where: str
    what: str
    consequence: str
    data: dict = field(default_factory=dict)
    severity: str = "warn"  # "info" | "warn" | "error"

class DiagnosticLedger:
    def __init__(self): self._items: List[Diagnostic] = []
    def __len__(self): return len(self._items)
    def reset(self): self._items.clear()
    def add(self, **kw):
        item = Diagnostic(**kw)
        if item.severity not in SEVERITIES:
            raise ValueError(f"Unknown severity {item.severity!r}; expected one of {SEVERITIES}.")
        self._items.append(item)
    def items(self) -> List[Diagnostic]: return list(self._items)
    def escalated(self) -> List[Diagnostic]:
        return [d for d in self._items if d.severity in ("warn", "error")]
    def format(self) -> str:
        lines=[]
        for d in self._items:
            lines.append(
                f"[{d.severity}] {d.where}: {d.what}\n"
                f"  ⇒ {d.consequence}\n"
                f"  Data: {d.data}"
            )
        return "\n".join(lines)

class AggregatedDiagnosticError(RuntimeError):
    """Raised in strict mode when diagnostics of warning severity were recorded during a call."""
    def __init__(self, message: str, items: List[Any] = None):
        super().__init__(message)
        self.items = items or []
