"""
EVM helpers: address checks, unit conversion, ABI encoding and read-only
JSON-RPC calls against public nodes.

Uses httpx + eth-abi + eth-utils; signing never happens locally.
"""
