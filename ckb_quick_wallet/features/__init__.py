"""Feature modules for CKB Quick Wallet."""
