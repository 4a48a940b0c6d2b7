"""Call center data: call detail records (CDR) and CIS data requests."""
