"""
Domain service interfaces.
"""

from greffier.domain.services.i_rpc_transport import IRpcTransport, SignatureStatus
from greffier.domain.services.i_signer import ISigner

__all__ = ["IRpcTransport", "ISigner", "SignatureStatus"]
