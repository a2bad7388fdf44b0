"""
Command implementations for the walletops CLI.

Each module registers one or more top-level commands:
- swap:     Swap tokens through Bebop (resolve, approve, quote, execute)
- balance:  Custody-service balances (single queries and per-asset holdings)
- transfer: Native withdrawals and arbitrary transactions
- chain:    Read-only queries against public JSON-RPC nodes
"""
