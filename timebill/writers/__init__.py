"""Writers for persisting invoices to the timebill store."""

from timebill.writers.invoice_writer import InvoiceHeader, InvoiceWriter

__all__ = ["InvoiceHeader", "InvoiceWriter"]
