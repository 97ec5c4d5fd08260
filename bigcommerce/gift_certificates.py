from __future__ import annotations
import logging
from typing import List, Optional
from urllib.parse import quote

from .envelope import encode_payload
from .exceptions import NoContentError
from .models import GiftCertificate

logger = logging.getLogger(__name__)

GIFT_CERTIFICATES_PATH = '/v2/gift_certificates'


class GiftCertificatesMixin:
    """v2 endpoints: bodies are bare JSON, not wrapped in ``data``."""

    def get_gift_certificate_by_code(self, code: str) -> Optional[GiftCertificate]:
        try:
            found = self.fetch_one(f"{GIFT_CERTIFICATES_PATH}?code={quote(code)}",
                                   List[GiftCertificate], envelope=False)
        except NoContentError:
            return None
        return found[0] if found else None

    def create_gift_certificate(self, certificate: GiftCertificate) -> GiftCertificate:
        logger.info('Creating gift certificate with body: %s', encode_payload(certificate).decode('utf-8'))
        return self.mutate('POST', GIFT_CERTIFICATES_PATH, certificate, GiftCertificate, envelope=False)

    def update_gift_certificate(self, certificate: GiftCertificate) -> GiftCertificate:
        return self.mutate('PUT', f"{GIFT_CERTIFICATES_PATH}/{certificate.id}", certificate,
                           GiftCertificate, envelope=False)
