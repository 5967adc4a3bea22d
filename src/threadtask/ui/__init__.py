"""Qt helpers for handing work from task threads back to the UI thread."""
from .marshal import run_on_context

__all__ = ["run_on_context"]
