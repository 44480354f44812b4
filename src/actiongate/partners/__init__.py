"""Partner authorization backends."""

from actiongate.partners.base import Partner, PartnerAuthorization
from actiongate.partners.digest import DigestPartner, DigestPartnerAuthorization

__all__ = ["DigestPartner", "DigestPartnerAuthorization", "Partner", "PartnerAuthorization"]
