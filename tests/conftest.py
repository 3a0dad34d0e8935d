import pytest

from gmfa.core.otpauth import Credential

# RFC 6238 appendix B / RFC 4226 appendix D key: ASCII "12345678901234567890"
RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture
def rfc_secret():
    return RFC_SECRET


@pytest.fixture
def secrets_path(tmp_path):
    return str(tmp_path / "gmfa" / "secrets.conf")


@pytest.fixture
def sample_credentials():
    return [
        Credential(label="GitHub:alice@example.com", secret=RFC_SECRET),
        Credential(label="Broken", secret="not-base32!!"),
    ]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GMFA_SECRETS_FILE", "GMFA_DIGITS", "GMFA_PERIOD"):
        monkeypatch.delenv(name, raising=False)
