import base64
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509 import ocsp
from cryptography.x509.oid import NameOID

from sigreport.raw import ValidationDocument


# ============================== CERTIFICATES / OCSP ==================================

def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _subject(common_name, serial_number=None, given_name=None, surname=None) -> x509.Name:
    attrs = [x509.NameAttribute(NameOID.COUNTRY_NAME, "EE"), x509.NameAttribute(NameOID.COMMON_NAME, common_name)]
    if serial_number:
        attrs.append(x509.NameAttribute(NameOID.SERIAL_NUMBER, serial_number))
    if given_name:
        attrs.append(x509.NameAttribute(NameOID.GIVEN_NAME, given_name))
    if surname:
        attrs.append(x509.NameAttribute(NameOID.SURNAME, surname))
    return x509.Name(attrs)


def _build_certificate(key, name: x509.Name) -> x509.Certificate:
    now = datetime.now(timezone.utc)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .sign(key, hashes.SHA256())
    )


@pytest.fixture(scope="session")
def signing_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def make_cert(signing_key):
    """
    Self-signed certificate as base64 DER, the way the engine hands it over.
    """
    def _make(common_name="TESTNUMBER,SIGNER", serial_number="PNOEE-30303039914",
              given_name="SIGNER", surname="TESTNUMBER") -> str:
        name = _subject(common_name, serial_number, given_name, surname)
        cert = _build_certificate(signing_key, name)
        return _b64(cert.public_bytes(serialization.Encoding.DER))
    return _make


@pytest.fixture(scope="session")
def make_ocsp(signing_key):
    """
    Successful OCSP response as base64 DER; nonce=None builds one without a nonce.
    """
    responder = _build_certificate(signing_key, _subject("TEST of SK OCSP RESPONDER"))

    def _make(nonce: Optional[bytes] = b"nonce-0123456789") -> str:
        builder = (
            ocsp.OCSPResponseBuilder()
            .add_response(
                cert=responder,
                issuer=responder,
                algorithm=hashes.SHA1(),
                cert_status=ocsp.OCSPCertStatus.GOOD,
                this_update=datetime.now(timezone.utc),
                next_update=None,
                revocation_time=None,
                revocation_reason=None,
            )
            .responder_id(ocsp.OCSPResponderEncoding.HASH, responder)
        )
        if nonce is not None:
            builder = builder.add_extension(x509.OCSPNonce(nonce), critical=False)
        response = builder.sign(signing_key, hashes.SHA256())
        return _b64(response.public_bytes(serialization.Encoding.DER))
    return _make


# ============================== RAW ENGINE FACTS ==================================

@pytest.fixture
def raw_signature(make_cert):
    """
    One signature as the engine reports it. Keys are snake_case; pass overrides the same way.
    """
    def _make(sig_id="S0", **overrides):
        data = {
            "id": sig_id,
            "indication": "TOTAL_PASSED",
            "qualification": "QESIG",
            "signature_format": "XAdES_BASELINE_LT",
            "signature_method": "http://www.w3.org/2001/04/xmldsig-more#ecdsa-sha256",
            "claimed_signing_time": "2024-03-01T10:00:00Z",
            "best_signature_time": "2024-03-01T10:00:05Z",
            "signing_certificate": make_cert(),
            "references": ["test.txt", f"#{sig_id}-SignedProperties"],
        }
        data.update(overrides)
        return data
    return _make


@pytest.fixture
def make_raw(raw_signature):
    def _make(document_format="ASICE", container_type="ASiC-E", signatures=None, data_files=None, **extra):
        data = {
            "document_format": document_format,
            "container_type": container_type,
            "signatures": signatures if signatures is not None else [raw_signature()],
            "data_files": data_files if data_files is not None else [
                {"name": "test.txt", "mime_type": "text/plain", "size": 8, "declared_size": 8},
            ],
        }
        data.update(extra)
        return data
    return _make


@pytest.fixture
def document():
    return ValidationDocument(filename="test.asice", content=b"testData")


@pytest.fixture
def fixed_time():
    return datetime(2024, 3, 2, 12, 0, 0, tzinfo=timezone.utc)
