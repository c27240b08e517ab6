"""
Command Line Interface Package

Command Structure:
- ledger-sync: Main entry point with utility commands (version, config)
- ledger-sync sync: Mirror PASELI movements into a Money Forward wallet
- ledger-sync balance: Show the PASELI balance
- ledger-sync categories: List Money Forward categories
"""
