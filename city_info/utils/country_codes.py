# Role: Static country-name -> ISO-3166 alpha-2 lookup used to narrow GeoNames searches.
# Plain immutable map loaded at import; anything it does not know is passed through only if it already is a code.

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional

COUNTRY_CODES: Mapping[str, str] = MappingProxyType(
    {
        "united states": "US",
        "usa": "US",
        "united kingdom": "GB",
        "uk": "GB",
        "england": "GB",
        "france": "FR",
        "germany": "DE",
        "italy": "IT",
        "spain": "ES",
        "japan": "JP",
        "china": "CN",
        "india": "IN",
        "canada": "CA",
        "australia": "AU",
        "brazil": "BR",
        "russia": "RU",
        "netherlands": "NL",
        "sweden": "SE",
        "norway": "NO",
        "denmark": "DK",
        "switzerland": "CH",
        "austria": "AT",
        "belgium": "BE",
        "poland": "PL",
        "turkey": "TR",
        "egypt": "EG",
        "south africa": "ZA",
        "mexico": "MX",
        "argentina": "AR",
        "thailand": "TH",
        "south korea": "KR",
        "israel": "IL",
        "greece": "GR",
        "portugal": "PT",
        "czech republic": "CZ",
        "hungary": "HU",
        "finland": "FI",
        "ireland": "IE",
        "new zealand": "NZ",
    }
)

_ALPHA2 = re.compile(r"^[A-Za-z]{2}$")


def country_code_for(country: Optional[str]) -> Optional[str]:
    # 1) exact lowercase name match
    # 2) pass-through if the hint already looks like a 2-letter code
    if not country:
        return None

    hint = country.strip()
    code = COUNTRY_CODES.get(hint.lower())
    if code:
        return code

    if _ALPHA2.match(hint):
        return hint.upper()

    return None
