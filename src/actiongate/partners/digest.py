"""HTTP Digest partner backend (RFC 2617, MD5) over configured partner keys."""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import secrets
from collections.abc import Mapping

from actiongate.config import PartnerConfig
from actiongate.errors import AuthorizationError
from actiongate.partners.base import Partner, PartnerAuthorization

logger = logging.getLogger(__name__)

_PARAM_RE = re.compile(r'(\w+)\s*=\s*(?:"((?:[^"\\]|\\.)*)"|([^\s,]+))')

REQUIRED_FIELDS = ("username", "realm", "nonce", "uri", "response")


def parse_digest(credentials: str) -> dict[str, str]:
    """Parse the key=value list of a Digest Authorization header."""
    result: dict[str, str] = {}
    for m in _PARAM_RE.finditer(credentials):
        key, quoted, bare = m.group(1), m.group(2), m.group(3)
        result[key.lower()] = quoted.replace('\\"', '"') if quoted is not None else bare
    return result


def _md5(value: str) -> str:
    return hashlib.md5(value.encode()).hexdigest()


def expected_response(
    fields: Mapping[str, str], key: str, method: str, realm: str
) -> str:
    """Compute the digest response a partner holding *key* would send."""
    ha1 = _md5(f"{fields['username']}:{realm}:{key}")
    ha2 = _md5(f"{method}:{fields['uri']}")
    qop = fields.get("qop")
    if qop in ("auth", "auth-int"):
        return _md5(
            f"{ha1}:{fields['nonce']}:{fields.get('nc', '')}:"
            f"{fields.get('cnonce', '')}:{qop}:{ha2}"
        )
    return _md5(f"{ha1}:{fields['nonce']}:{ha2}")


class DigestPartner(Partner):
    """Verifies one request's Digest credential."""

    def __init__(self, partners: Mapping[str, PartnerConfig], realm: str) -> None:
        super().__init__()
        self._partners = partners
        self._realm = realm

    def _challenge(self) -> dict[str, str]:
        nonce = secrets.token_hex(16)
        return {
            "WWW-Authenticate": f'Digest realm="{self._realm}", qop="auth", nonce="{nonce}"'
        }

    async def authorize(self) -> bool:
        digest = self.auth_params.get("digest")
        if not digest:
            raise AuthorizationError(
                "ERROR_MISSING_AUTHORIZATION",
                "This action requires partner authorization",
                401,
                headers=self._challenge(),
            )

        fields = parse_digest(digest)
        missing = [f for f in REQUIRED_FIELDS if not fields.get(f)]
        if missing:
            raise AuthorizationError(
                "ERROR_INVALID_AUTHORIZATION",
                f"Malformed digest credential (missing {', '.join(missing)})",
                400,
                at="Authorization",
            )

        if fields["realm"] != self._realm:
            logger.debug("Digest realm mismatch: %r", fields["realm"])
            return False

        uri = self.auth_params.get("uri")
        if uri is not None and fields["uri"] != uri:
            logger.debug("Digest uri %r does not match request %r", fields["uri"], uri)
            return False

        partner = self._partners.get(fields["username"])
        if partner is None:
            logger.debug("Unknown partner: %r", fields["username"])
            return False

        method = (self.auth_params.get("method") or "GET").upper()
        expected = expected_response(fields, partner.key, method, self._realm)
        if not hmac.compare_digest(expected, fields["response"].lower()):
            logger.debug("Digest mismatch for partner %r", partner.partner_id)
            return False

        if partner.actions is not None and self.action not in partner.actions:
            logger.debug("Partner %r may not call %r", partner.partner_id, self.action)
            return False

        return True


class DigestPartnerAuthorization(PartnerAuthorization):
    """Hands out DigestPartner principals bound to the configured partners."""

    def __init__(self, partners: Mapping[str, PartnerConfig], realm: str) -> None:
        self._partners = dict(partners)
        self._realm = realm

    def get_partner(self) -> DigestPartner:
        return DigestPartner(self._partners, self._realm)
