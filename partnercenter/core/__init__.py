"""Core client logic.

Module Structure:
    - api/            : Partner Center REST client, templates, auth, connections
    - transformer.py  : Partner Center JSON ↔ dataclass transformations
    - validators.py   : Input validation (identifiers, domains, UPNs)

Import explicitly when needed:
    from partnercenter.core.api import PartnerCenterConnectionFactory
    from partnercenter.core.transformer import PayloadTransformer
    from partnercenter.core.validators import require_identifier
"""
