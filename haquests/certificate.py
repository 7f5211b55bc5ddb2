"""Read-only access to an X.509 certificate."""

import datetime
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.x509.oid import ExtensionOID, NameOID

from haquests.errors import ParseError

_SHORT_NAMES = {
    NameOID.COUNTRY_NAME: "C",
    NameOID.STATE_OR_PROVINCE_NAME: "ST",
    NameOID.LOCALITY_NAME: "L",
    NameOID.ORGANIZATION_NAME: "O",
    NameOID.ORGANIZATIONAL_UNIT_NAME: "OU",
    NameOID.COMMON_NAME: "CN",
    NameOID.EMAIL_ADDRESS: "emailAddress",
    NameOID.SERIAL_NUMBER: "serialNumber",
    NameOID.DOMAIN_COMPONENT: "DC",
    NameOID.USER_ID: "UID",
}

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _oneline(name):
    return "".join(
        f"/{_SHORT_NAMES.get(attr.oid, attr.oid.dotted_string)}={attr.value}"
        for attr in name
    )


def _format_time(moment):
    return (
        f"{_MONTHS[moment.month - 1]} {moment.day:2d} "
        f"{moment:%H:%M:%S} {moment.year} GMT"
    )


def _utc(cert, which):
    aware = getattr(cert, f"not_valid_{which}_utc", None)
    if aware is not None:
        return aware
    return getattr(cert, f"not_valid_{which}").replace(tzinfo=datetime.timezone.utc)


class Certificate:
    """An X.509 certificate, or an empty one when none is loaded."""

    def __init__(self, cert=None):
        self._cert = cert

    @classmethod
    def from_pem(cls, data):
        """Load a PEM certificate from bytes or text; raise ParseError if invalid."""
        if isinstance(data, str):
            data = data.encode("ascii", errors="replace")
        try:
            return cls(x509.load_pem_x509_certificate(bytes(data)))
        except ValueError as exc:
            raise ParseError(f"Invalid PEM certificate: {exc}") from exc

    @classmethod
    def from_file(cls, filename):
        """Load a PEM certificate from ``filename``."""
        return cls.from_pem(Path(filename).read_bytes())

    @property
    def subject(self):
        return _oneline(self._cert.subject) if self._cert else ""

    @property
    def issuer(self):
        return _oneline(self._cert.issuer) if self._cert else ""

    @property
    def common_name(self):
        """The first common name of the subject, or ""."""
        if not self._cert:
            return ""
        names = self._cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
        return str(names[0].value) if names else ""

    @property
    def subject_alt_names(self):
        """DNS names from the subjectAltName extension."""
        if not self._cert:
            return []
        try:
            ext = self._cert.extensions.get_extension_for_oid(
                ExtensionOID.SUBJECT_ALTERNATIVE_NAME
            )
        except x509.ExtensionNotFound:
            return []
        return list(ext.value.get_values_for_type(x509.DNSName))

    @property
    def not_before(self):
        return _format_time(_utc(self._cert, "before")) if self._cert else ""

    @property
    def not_after(self):
        return _format_time(_utc(self._cert, "after")) if self._cert else ""

    @property
    def fingerprint(self):
        """SHA-256 fingerprint as colon-separated lower-case hex."""
        if not self._cert:
            return ""
        return self._cert.fingerprint(hashes.SHA256()).hex(":")

    def verify(self):
        """Return True when a certificate is loaded."""
        return self._cert is not None

    def is_expired(self):
        """Return True when past the end of validity, or when nothing is loaded."""
        if not self._cert:
            return True
        return _utc(self._cert, "after") < datetime.datetime.now(datetime.timezone.utc)