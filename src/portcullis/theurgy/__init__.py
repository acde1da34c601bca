"""
Theurgy - Command implementations for Portcullis.

Each module corresponds to a top-level CLI command:
- chain: Probe the RPC endpoint (chain id, latest block)
- token: ERC-20 metadata and balances
- nft:   ERC-721 metadata, ownership and balances
- call:  Raw read-only contract calls
- gate:  Evaluate token requirements for a wallet
"""
