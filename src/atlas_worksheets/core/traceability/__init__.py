"""
Rastreabilidade do Atlas Worksheets.

Toda operação estrutural relevante (criação, rename, edição, remoção,
batches e downloads) é registrada como evento explícito no `EventLog`.
"""

from .event_log import EventLog, load_event_log, save_event_log

__all__ = ["EventLog", "save_event_log", "load_event_log"]
