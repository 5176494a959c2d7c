from decouple import Csv, config


def _emails(name: str) -> list[str]:
    return [address for address in config(name, cast=Csv(), default="") if "@" in address]


GOOGLE_SSO_CLIENT_ID = config("GOOGLE_SSO_CLIENT_ID", "fake-id")

# Google sign-ins from these addresses get admin-site flags on first login.
GOOGLE_SSO_SUPERUSER_LIST = _emails("GOOGLE_SSO_SUPERUSER_LIST")
GOOGLE_SSO_STAFF_LIST = GOOGLE_SSO_SUPERUSER_LIST + _emails("GOOGLE_SSO_STAFF_LIST")
