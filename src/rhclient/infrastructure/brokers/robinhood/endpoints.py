"""Robinhood private API endpoint catalog"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

BASE_URL = "https://api.robinhood.com/"


@dataclass(frozen=True)
class Endpoint:
    """Logical resource name and its path relative to the API origin"""

    name: str
    path: str

    def url(self, base_url: str = BASE_URL) -> str:
        return f"{base_url}{self.path}"


_PATHS = {
    "login": "api-token-auth/",
    "investment_profile": "user/investment_profile/",
    "accounts": "accounts/",
    "ach_iav_auth": "ach/iav/auth/",
    "ach_relationships": "ach/relationships/",
    "ach_transfers": "ach/transfers/",
    "ach_deposit_schedules": "ach/deposit_schedules/",
    "applications": "applications/",
    "dividends": "dividends/",
    "edocuments": "documents/",
    "instruments": "instruments/",
    "margin_upgrade": "margin/upgrades/",
    "markets": "markets/",
    "notifications": "notifications/",
    "notifications_devices": "notifications/devices/",
    "orders": "orders/",
    # Individual orders live under orders/{id}/cancel/
    "cancel_order": "orders/",
    "password_reset": "password_reset/request/",
    "quotes": "quotes/",
    "document_requests": "upload/document_requests/",
    "user": "user/",
    "user_additional_info": "user/additional_info/",
    "user_basic_info": "user/basic_info/",
    "user_employment": "user/employment/",
    "user_investment_profile": "user/investment_profile/",
    "watchlists": "watchlists/",
    "positions": "positions/",
    "fundamentals": "fundamentals/",
    "sp500_up": "midlands/movers/sp500/?direction=up",
    "sp500_down": "midlands/movers/sp500/?direction=down",
    "news": "midlands/news/",
}

ENDPOINTS: Mapping[str, Endpoint] = MappingProxyType(
    {name: Endpoint(name, path) for name, path in _PATHS.items()}
)


def endpoint_url(name: str, base_url: str = BASE_URL) -> str:
    """Resolve a logical endpoint name to an absolute URL

    Raises:
        KeyError: If the name is not in the catalog
    """
    return ENDPOINTS[name].url(base_url)
