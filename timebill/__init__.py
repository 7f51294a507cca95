"""timebill: turn unbilled tracked time into invoices."""
