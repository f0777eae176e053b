"""Placeholder key/address generators and the client config exporter.

``generate_public_key`` and ``generate_allowed_address`` only produce values
that look right. They are not key material and the address is not checked
against peers already on the router; replace both with real key-pair
generation and address allocation before using this against real clients.
"""
import io
import logging
import random
import string
from typing import Mapping, Optional

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from .settings import settings

logger = logging.getLogger(__name__)

KEY_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/"
KEY_LENGTH = 44

PLACEHOLDER_PRIVATE_KEY = "ABCD1234567890ABCD1234567890ABCD1234567890="
PLACEHOLDER_SERVER_PUBLIC_KEY = "EFGH1234567890EFGH1234567890EFGH1234567890="

CLIENT_TEMPLATE = """[Interface]
PrivateKey = {private_key}
Address = {address}
DNS = {dns}

[Peer]
PublicKey = {public_key}
Endpoint = {endpoint}:{port}
AllowedIPs = 0.0.0.0/0
PersistentKeepalive = 25"""


def generate_public_key(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return "".join(rng.choice(KEY_ALPHABET) for _ in range(KEY_LENGTH))


def generate_allowed_address(rng: Optional[random.Random] = None, base: Optional[str] = None) -> str:
    if base is None:
        base = settings.allowed_address_base
    rng = rng or random
    return f"{base}.{rng.randint(1, 254)}/32"


def render_client_config(
    peer: Mapping,
    dns: str = "1.1.1.1",
    default_address: str = "10.0.0.10/32",
    default_endpoint: str = "vpn.stacasa.local",
    default_port: int = 51820,
) -> str:
    return CLIENT_TEMPLATE.format(
        private_key=PLACEHOLDER_PRIVATE_KEY,
        address=peer.get("allowed-address") or default_address,
        dns=dns,
        public_key=peer.get("public-key") or PLACEHOLDER_SERVER_PUBLIC_KEY,
        endpoint=peer.get("endpoint-address") or default_endpoint,
        port=peer.get("endpoint-port") or default_port,
    )


def peer_id(peer: Mapping) -> str:
    return str(peer.get("id") or peer.get(".id") or "")


def display_name(peer: Mapping) -> str:
    return peer.get("name") or peer.get("endpoint-address") or f"peer-{peer_id(peer)}"


def config_filename(peer: Mapping) -> str:
    return f"{peer.get('name') or peer.get('endpoint-address') or 'peer-config'}.conf"


def to_qr(text: str) -> bytes:
    """PNG bytes of ``text`` as a QR code, or ``b""`` if encoding fails."""
    try:
        qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=6, border=2)
        qr.add_data(text)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()
    except Exception:
        logger.exception("QR code generation failed")
        return b""
