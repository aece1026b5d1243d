"""Job domain - the job ledger"""
