"""
JSON-RPC Implementation Module

Request/reply semantics independent of the underlying transport:
- coercion: string-to-type conversion driven by parameter type tags
- description: service description model (system.describe)
- codec: request/reply envelope encoding and validation
- client: JSON-RPC client with describe-on-connect handshake
- proxy: interface stubs routing method calls to the client
- service: server side dispatcher hosted by server adapters
"""
