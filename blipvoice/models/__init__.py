from blipvoice.models.call_record import CallRecord, CallStatus, TERMINAL_STATUSES

__all__ = ["CallRecord", "CallStatus", "TERMINAL_STATUSES"]
