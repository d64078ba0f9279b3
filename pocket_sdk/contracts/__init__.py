"""
pocket_sdk.contracts
====================

Deployment collaborators. Only `deployer` lives here; it shells out to the
`aptos` CLI and is never imported by the core SDK.
"""
