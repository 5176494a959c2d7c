from decouple import Csv, config

from .base import API_BASE_URL

MEDIAWIKI_CLIENT_ID = config("MEDIAWIKI_CLIENT_ID", default="fake-mediawiki-client-id")
MEDIAWIKI_CLIENT_SECRET = config("MEDIAWIKI_CLIENT_SECRET", default="fake-mediawiki-client-secret")
MEDIAWIKI_BASE_URL = config("MEDIAWIKI_BASE_URL", default="https://meta.wikimedia.org").rstrip("/")
MEDIAWIKI_REDIRECT_URI = config("MEDIAWIKI_REDIRECT_URI", default=f"{API_BASE_URL}/auth/callback/mediawiki")
MEDIAWIKI_SCOPES = config("MEDIAWIKI_SCOPES", default="basic", cast=Csv())
# MediaWiki rejects API calls without a descriptive User-Agent
MEDIAWIKI_USER_AGENT = config("MEDIAWIKI_USER_AGENT", default="EventFlow/1.0")
MEDIAWIKI_HTTP_TIMEOUT = config("MEDIAWIKI_HTTP_TIMEOUT", default=10.0, cast=float)
MEDIAWIKI_STATE_LIFETIME_SECONDS = config("MEDIAWIKI_STATE_LIFETIME_SECONDS", default=600, cast=int)
