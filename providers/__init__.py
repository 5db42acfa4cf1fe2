"""Search provider clients and the capability protocols the pipeline depends on."""

from providers.apify import ApifyClient
from providers.sociavault import SociaVaultClient

__all__ = ["ApifyClient", "SociaVaultClient"]
