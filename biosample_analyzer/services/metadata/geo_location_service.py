"""
Geographic location validation for ``geo_loc_name``-style attributes.

Accepts either a decimal latitude/longitude pair or a place name that names a
country from the INSDC country list. The ontology search backend is never
used for these values.

Accepted shapes:
    "USA: Maryland, Bethesda"    (INSDC country:region)
    "Paris, France"              (country as a comma-separated segment)
    "38.98 N 77.11 W"            (INSDC lat_lon)
    "38.98, -77.11"              (signed decimal degrees)
"""

import re
from typing import Dict, Optional, Tuple

from biosample_analyzer.utils.logger import get_logger

logger = get_logger(__name__)

# INSDC controlled vocabulary for /country (current and historical names)
INSDC_COUNTRIES: Tuple[str, ...] = (
    "Afghanistan", "Albania", "Algeria", "American Samoa", "Andorra", "Angola",
    "Anguilla", "Antarctica", "Antigua and Barbuda", "Arctic Ocean", "Argentina",
    "Armenia", "Aruba", "Ashmore and Cartier Islands", "Atlantic Ocean",
    "Australia", "Austria", "Azerbaijan", "Bahamas", "Bahrain", "Baltic Sea",
    "Baker Island", "Bangladesh", "Barbados", "Bassas da India", "Belarus",
    "Belgium", "Belize", "Benin", "Bermuda", "Bhutan", "Bolivia", "Borneo",
    "Bosnia and Herzegovina", "Botswana", "Bouvet Island", "Brazil",
    "British Virgin Islands", "Brunei", "Bulgaria", "Burkina Faso", "Burundi",
    "Cambodia", "Cameroon", "Canada", "Cape Verde", "Cayman Islands",
    "Central African Republic", "Chad", "Chile", "China", "Christmas Island",
    "Clipperton Island", "Cocos Islands", "Colombia", "Comoros", "Cook Islands",
    "Coral Sea Islands", "Costa Rica", "Cote d'Ivoire", "Croatia", "Cuba",
    "Curacao", "Cyprus", "Czechia", "Czech Republic",
    "Democratic Republic of the Congo", "Denmark", "Djibouti", "Dominica",
    "Dominican Republic", "Ecuador", "Egypt", "El Salvador", "Equatorial Guinea",
    "Eritrea", "Estonia", "Eswatini", "Ethiopia", "Europa Island",
    "Falkland Islands (Islas Malvinas)", "Faroe Islands", "Fiji", "Finland",
    "France", "French Guiana", "French Polynesia",
    "French Southern and Antarctic Lands", "Gabon", "Gambia", "Gaza Strip",
    "Georgia", "Germany", "Ghana", "Gibraltar", "Glorioso Islands", "Greece",
    "Greenland", "Grenada", "Guadeloupe", "Guam", "Guatemala", "Guernsey",
    "Guinea", "Guinea-Bissau", "Guyana", "Haiti",
    "Heard Island and McDonald Islands", "Honduras", "Hong Kong",
    "Howland Island", "Hungary", "Iceland", "India", "Indian Ocean", "Indonesia",
    "Iran", "Iraq", "Ireland", "Isle of Man", "Israel", "Italy", "Jamaica",
    "Jan Mayen", "Japan", "Jarvis Island", "Jersey", "Johnston Atoll", "Jordan",
    "Juan de Nova Island", "Kazakhstan", "Kenya", "Kerguelen Archipelago",
    "Kingman Reef", "Kiribati", "Kosovo", "Kuwait", "Kyrgyzstan", "Laos",
    "Latvia", "Lebanon", "Lesotho", "Liberia", "Libya", "Liechtenstein",
    "Line Islands", "Lithuania", "Luxembourg", "Macau", "Madagascar", "Malawi",
    "Malaysia", "Maldives", "Mali", "Malta", "Marshall Islands", "Martinique",
    "Mauritania", "Mauritius", "Mayotte", "Mediterranean Sea", "Mexico",
    "Micronesia, Federated States of", "Midway Islands", "Moldova", "Monaco",
    "Mongolia", "Montenegro", "Montserrat", "Morocco", "Mozambique", "Myanmar",
    "Namibia", "Nauru", "Navassa Island", "Nepal", "Netherlands",
    "New Caledonia", "New Zealand", "Nicaragua", "Niger", "Nigeria", "Niue",
    "Norfolk Island", "North Korea", "North Macedonia", "North Sea",
    "Northern Mariana Islands", "Norway", "Oman", "Pacific Ocean", "Pakistan",
    "Palau", "Palmyra Atoll", "Panama", "Papua New Guinea", "Paracel Islands",
    "Paraguay", "Peru", "Philippines", "Pitcairn Islands", "Poland", "Portugal",
    "Puerto Rico", "Qatar", "Republic of the Congo", "Reunion", "Romania",
    "Ross Sea", "Russia", "Rwanda", "Saint Barthelemy", "Saint Helena",
    "Saint Kitts and Nevis", "Saint Lucia", "Saint Martin",
    "Saint Pierre and Miquelon", "Saint Vincent and the Grenadines", "Samoa",
    "San Marino", "Sao Tome and Principe", "Saudi Arabia", "Senegal", "Serbia",
    "Seychelles", "Sierra Leone", "Singapore", "Sint Maarten", "Slovakia",
    "Slovenia", "Solomon Islands", "Somalia", "South Africa",
    "South Georgia and the South Sandwich Islands", "South Korea", "South Sudan",
    "Southern Ocean", "Spain", "Spratly Islands", "Sri Lanka",
    "State of Palestine", "Sudan", "Suriname", "Svalbard", "Sweden",
    "Switzerland", "Syria", "Taiwan", "Tajikistan", "Tanzania", "Tasman Sea",
    "Thailand", "Timor-Leste", "Togo", "Tokelau", "Tonga",
    "Trinidad and Tobago", "Tromelin Island", "Tunisia", "Turkey",
    "Turkmenistan", "Turks and Caicos Islands", "Tuvalu", "Uganda", "Ukraine",
    "United Arab Emirates", "United Kingdom", "Uruguay", "USA", "Uzbekistan",
    "Vanuatu", "Venezuela", "Viet Nam", "Virgin Islands", "Wake Island",
    "Wallis and Futuna", "West Bank", "Western Sahara", "Yemen", "Zambia",
    "Zimbabwe",
)

# Common spellings mapped onto their INSDC name
COUNTRY_ALIASES: Dict[str, str] = {
    "united states": "USA",
    "united states of america": "USA",
    "us": "USA",
    "uk": "United Kingdom",
    "great britain": "United Kingdom",
    "vietnam": "Viet Nam",
    "korea, south": "South Korea",
    "russian federation": "Russia",
}

_COUNTRY_LOOKUP: Dict[str, str] = {c.lower(): c for c in INSDC_COUNTRIES}
_COUNTRY_LOOKUP.update(COUNTRY_ALIASES)

# "38.98 N 77.11 W"
_LAT_LON_INSDC = re.compile(
    r"^(?P<lat>\d{1,2}(?:\.\d+)?)\s*(?P<ns>[NS])\s+(?P<lon>\d{1,3}(?:\.\d+)?)\s*(?P<ew>[EW])$",
    re.IGNORECASE,
)
# "38.98, -77.11" or "38.98 -77.11"
_LAT_LON_DECIMAL = re.compile(
    r"^(?P<lat>[+-]?\d{1,2}(?:\.\d+)?)\s*[,\s]\s*(?P<lon>[+-]?\d{1,3}(?:\.\d+)?)$"
)


def parse_lat_lon(value: str) -> Optional[Tuple[float, float]]:
    """
    Parse a latitude/longitude pair.

    Returns:
        (latitude, longitude) in signed decimal degrees, or None if the value
        is not a coordinate pair or is out of range
    """
    text = value.strip()
    match = _LAT_LON_INSDC.match(text)
    if match:
        lat = float(match.group("lat"))
        lon = float(match.group("lon"))
        if match.group("ns").upper() == "S":
            lat = -lat
        if match.group("ew").upper() == "W":
            lon = -lon
    else:
        match = _LAT_LON_DECIMAL.match(text)
        if not match:
            return None
        lat = float(match.group("lat"))
        lon = float(match.group("lon"))

    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return lat, lon


def find_country(value: str) -> Optional[str]:
    """
    Find the INSDC country named by a place-name value.

    The segment before the first ``:`` is checked first (INSDC layout), then
    every ``,``-separated segment.

    Returns:
        Canonical INSDC country name, or None
    """
    text = value.strip()
    if ":" in text:
        head = text.split(":", 1)[0].strip().lower()
        if head in _COUNTRY_LOOKUP:
            return _COUNTRY_LOOKUP[head]

    whole = text.lower()
    if whole in _COUNTRY_LOOKUP:
        return _COUNTRY_LOOKUP[whole]

    for segment in re.split(r"[,:]", text):
        key = segment.strip().lower()
        if key in _COUNTRY_LOOKUP:
            return _COUNTRY_LOOKUP[key]
    return None


class GeographicLocationValidator:
    """Checks place-name and coordinate values without any remote lookup."""

    def validate(self, value: str) -> Tuple[bool, Optional[str]]:
        """
        Validate a geographic location value.

        Returns:
            (is_valid, match) where match is the canonical country name when a
            country was recognized, else None
        """
        if parse_lat_lon(value) is not None:
            return True, None

        country = find_country(value)
        if country is not None:
            return True, country

        logger.debug(f"Unrecognized geographic location: {value!r}")
        return False, None
