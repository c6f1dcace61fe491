"""ERP ledger posting and reversal engine."""
