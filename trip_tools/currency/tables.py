"""Static ISO-3166 -> ISO-4217 mapping and display metadata for currencies."""

from typing import Dict, NamedTuple


class CurrencyMeta(NamedTuple):
    code: str
    symbol: str
    name: str
    decimal_places: int


# One entry per country, primary currency only.
COUNTRY_TO_CURRENCY: Dict[str, str] = {
    "AD": "EUR",  # Andorra
    "AE": "AED",  # United Arab Emirates
    "AF": "AFN",  # Afghanistan
    "AG": "XCD",  # Antigua and Barbuda
    "AI": "XCD",  # Anguilla
    "AL": "ALL",  # Albania
    "AM": "AMD",  # Armenia
    "AO": "AOA",  # Angola
    "AR": "ARS",  # Argentina
    "AS": "USD",  # American Samoa
    "AT": "EUR",  # Austria
    "AU": "AUD",  # Australia
    "AW": "AWG",  # Aruba
    "AX": "EUR",  # Åland Islands
    "AZ": "AZN",  # Azerbaijan
    "BA": "BAM",  # Bosnia and Herzegovina
    "BB": "BBD",  # Barbados
    "BD": "BDT",  # Bangladesh
    "BE": "EUR",  # Belgium
    "BF": "XOF",  # Burkina Faso
    "BG": "BGN",  # Bulgaria
    "BH": "BHD",  # Bahrain
    "BI": "BIF",  # Burundi
    "BJ": "XOF",  # Benin
    "BL": "EUR",  # Saint Barthélemy
    "BM": "BMD",  # Bermuda
    "BN": "BND",  # Brunei
    "BO": "BOB",  # Bolivia
    "BQ": "USD",  # Caribbean Netherlands
    "BR": "BRL",  # Brazil
    "BS": "BSD",  # Bahamas
    "BT": "BTN",  # Bhutan
    "BW": "BWP",  # Botswana
    "BY": "BYN",  # Belarus
    "BZ": "BZD",  # Belize
    "CA": "CAD",  # Canada
    "CC": "AUD",  # Cocos Islands
    "CD": "CDF",  # DR Congo
    "CF": "XAF",  # Central African Republic
    "CG": "XAF",  # Republic of Congo
    "CH": "CHF",  # Switzerland
    "CI": "XOF",  # Côte d'Ivoire
    "CK": "NZD",  # Cook Islands
    "CL": "CLP",  # Chile
    "CM": "XAF",  # Cameroon
    "CN": "CNY",  # China
    "CO": "COP",  # Colombia
    "CR": "CRC",  # Costa Rica
    "CU": "CUP",  # Cuba
    "CV": "CVE",  # Cape Verde
    "CW": "ANG",  # Curaçao
    "CX": "AUD",  # Christmas Island
    "CY": "EUR",  # Cyprus
    "CZ": "CZK",  # Czech Republic
    "DE": "EUR",  # Germany
    "DJ": "DJF",  # Djibouti
    "DK": "DKK",  # Denmark
    "DM": "XCD",  # Dominica
    "DO": "DOP",  # Dominican Republic
    "DZ": "DZD",  # Algeria
    "EC": "USD",  # Ecuador
    "EE": "EUR",  # Estonia
    "EG": "EGP",  # Egypt
    "EH": "MAD",  # Western Sahara
    "ER": "ERN",  # Eritrea
    "ES": "EUR",  # Spain
    "ET": "ETB",  # Ethiopia
    "FI": "EUR",  # Finland
    "FJ": "FJD",  # Fiji
    "FK": "FKP",  # Falkland Islands
    "FM": "USD",  # Micronesia
    "FO": "DKK",  # Faroe Islands
    "FR": "EUR",  # France
    "GA": "XAF",  # Gabon
    "GB": "GBP",  # United Kingdom
    "GD": "XCD",  # Grenada
    "GE": "GEL",  # Georgia
    "GF": "EUR",  # French Guiana
    "GG": "GBP",  # Guernsey
    "GH": "GHS",  # Ghana
    "GI": "GIP",  # Gibraltar
    "GL": "DKK",  # Greenland
    "GM": "GMD",  # Gambia
    "GN": "GNF",  # Guinea
    "GP": "EUR",  # Guadeloupe
    "GQ": "XAF",  # Equatorial Guinea
    "GR": "EUR",  # Greece
    "GT": "GTQ",  # Guatemala
    "GU": "USD",  # Guam
    "GW": "XOF",  # Guinea-Bissau
    "GY": "GYD",  # Guyana
    "HK": "HKD",  # Hong Kong
    "HN": "HNL",  # Honduras
    "HR": "EUR",  # Croatia (joined EUR in 2023)
    "HT": "HTG",  # Haiti
    "HU": "HUF",  # Hungary
    "ID": "IDR",  # Indonesia
    "IE": "EUR",  # Ireland
    "IL": "ILS",  # Israel
    "IM": "GBP",  # Isle of Man
    "IN": "INR",  # India
    "IO": "USD",  # British Indian Ocean Territory
    "IQ": "IQD",  # Iraq
    "IR": "IRR",  # Iran
    "IS": "ISK",  # Iceland
    "IT": "EUR",  # Italy
    "JE": "GBP",  # Jersey
    "JM": "JMD",  # Jamaica
    "JO": "JOD",  # Jordan
    "JP": "JPY",  # Japan
    "KE": "KES",  # Kenya
    "KG": "KGS",  # Kyrgyzstan
    "KH": "KHR",  # Cambodia
    "KI": "AUD",  # Kiribati
    "KM": "KMF",  # Comoros
    "KN": "XCD",  # Saint Kitts and Nevis
    "KP": "KPW",  # North Korea
    "KR": "KRW",  # South Korea
    "KW": "KWD",  # Kuwait
    "KY": "KYD",  # Cayman Islands
    "KZ": "KZT",  # Kazakhstan
    "LA": "LAK",  # Laos
    "LB": "LBP",  # Lebanon
    "LC": "XCD",  # Saint Lucia
    "LI": "CHF",  # Liechtenstein
    "LK": "LKR",  # Sri Lanka
    "LR": "LRD",  # Liberia
    "LS": "LSL",  # Lesotho
    "LT": "EUR",  # Lithuania
    "LU": "EUR",  # Luxembourg
    "LV": "EUR",  # Latvia
    "LY": "LYD",  # Libya
    "MA": "MAD",  # Morocco
    "MC": "EUR",  # Monaco
    "MD": "MDL",  # Moldova
    "ME": "EUR",  # Montenegro
    "MF": "EUR",  # Saint Martin
    "MG": "MGA",  # Madagascar
    "MH": "USD",  # Marshall Islands
    "MK": "MKD",  # North Macedonia
    "ML": "XOF",  # Mali
    "MM": "MMK",  # Myanmar
    "MN": "MNT",  # Mongolia
    "MO": "MOP",  # Macau
    "MP": "USD",  # Northern Mariana Islands
    "MQ": "EUR",  # Martinique
    "MR": "MRU",  # Mauritania
    "MS": "XCD",  # Montserrat
    "MT": "EUR",  # Malta
    "MU": "MUR",  # Mauritius
    "MV": "MVR",  # Maldives
    "MW": "MWK",  # Malawi
    "MX": "MXN",  # Mexico
    "MY": "MYR",  # Malaysia
    "MZ": "MZN",  # Mozambique
    "NA": "NAD",  # Namibia
    "NC": "XPF",  # New Caledonia
    "NE": "XOF",  # Niger
    "NF": "AUD",  # Norfolk Island
    "NG": "NGN",  # Nigeria
    "NI": "NIO",  # Nicaragua
    "NL": "EUR",  # Netherlands
    "NO": "NOK",  # Norway
    "NP": "NPR",  # Nepal
    "NR": "AUD",  # Nauru
    "NU": "NZD",  # Niue
    "NZ": "NZD",  # New Zealand
    "OM": "OMR",  # Oman
    "PA": "PAB",  # Panama (also uses USD)
    "PE": "PEN",  # Peru
    "PF": "XPF",  # French Polynesia
    "PG": "PGK",  # Papua New Guinea
    "PH": "PHP",  # Philippines
    "PK": "PKR",  # Pakistan
    "PL": "PLN",  # Poland
    "PM": "EUR",  # Saint Pierre and Miquelon
    "PN": "NZD",  # Pitcairn
    "PR": "USD",  # Puerto Rico
    "PS": "ILS",  # Palestine
    "PT": "EUR",  # Portugal
    "PW": "USD",  # Palau
    "PY": "PYG",  # Paraguay
    "QA": "QAR",  # Qatar
    "RE": "EUR",  # Réunion
    "RO": "RON",  # Romania
    "RS": "RSD",  # Serbia
    "RU": "RUB",  # Russia
    "RW": "RWF",  # Rwanda
    "SA": "SAR",  # Saudi Arabia
    "SB": "SBD",  # Solomon Islands
    "SC": "SCR",  # Seychelles
    "SD": "SDG",  # Sudan
    "SE": "SEK",  # Sweden
    "SG": "SGD",  # Singapore
    "SH": "SHP",  # Saint Helena
    "SI": "EUR",  # Slovenia
    "SJ": "NOK",  # Svalbard and Jan Mayen
    "SK": "EUR",  # Slovakia
    "SL": "SLE",  # Sierra Leone
    "SM": "EUR",  # San Marino
    "SN": "XOF",  # Senegal
    "SO": "SOS",  # Somalia
    "SR": "SRD",  # Suriname
    "SS": "SSP",  # South Sudan
    "ST": "STN",  # São Tomé and Príncipe
    "SV": "USD",  # El Salvador
    "SX": "ANG",  # Sint Maarten
    "SY": "SYP",  # Syria
    "SZ": "SZL",  # Eswatini
    "TC": "USD",  # Turks and Caicos Islands
    "TD": "XAF",  # Chad
    "TF": "EUR",  # French Southern Territories
    "TG": "XOF",  # Togo
    "TH": "THB",  # Thailand
    "TJ": "TJS",  # Tajikistan
    "TK": "NZD",  # Tokelau
    "TL": "USD",  # Timor-Leste
    "TM": "TMT",  # Turkmenistan
    "TN": "TND",  # Tunisia
    "TO": "TOP",  # Tonga
    "TR": "TRY",  # Turkey
    "TT": "TTD",  # Trinidad and Tobago
    "TV": "AUD",  # Tuvalu
    "TW": "TWD",  # Taiwan
    "TZ": "TZS",  # Tanzania
    "UA": "UAH",  # Ukraine
    "UG": "UGX",  # Uganda
    "UM": "USD",  # U.S. Minor Outlying Islands
    "US": "USD",  # United States
    "UY": "UYU",  # Uruguay
    "UZ": "UZS",  # Uzbekistan
    "VA": "EUR",  # Vatican City
    "VC": "XCD",  # Saint Vincent and the Grenadines
    "VE": "VES",  # Venezuela
    "VG": "USD",  # British Virgin Islands
    "VI": "USD",  # U.S. Virgin Islands
    "VN": "VND",  # Vietnam
    "VU": "VUV",  # Vanuatu
    "WF": "XPF",  # Wallis and Futuna
    "WS": "WST",  # Samoa
    "YE": "YER",  # Yemen
    "YT": "EUR",  # Mayotte
    "ZA": "ZAR",  # South Africa
    "ZM": "ZMW",  # Zambia
    "ZW": "ZWL",  # Zimbabwe
}

CURRENCY_METADATA: Dict[str, CurrencyMeta] = {
    "USD": CurrencyMeta("USD", "$", "US Dollar", 2),
    "EUR": CurrencyMeta("EUR", "€", "Euro", 2),
    "GBP": CurrencyMeta("GBP", "£", "British Pound", 2),
    "JPY": CurrencyMeta("JPY", "¥", "Japanese Yen", 0),
    "AUD": CurrencyMeta("AUD", "A$", "Australian Dollar", 2),
    "CAD": CurrencyMeta("CAD", "C$", "Canadian Dollar", 2),
    "CHF": CurrencyMeta("CHF", "Fr", "Swiss Franc", 2),
    "CNY": CurrencyMeta("CNY", "¥", "Chinese Yuan", 2),
    "INR": CurrencyMeta("INR", "₹", "Indian Rupee", 2),
    "AED": CurrencyMeta("AED", "د.إ", "UAE Dirham", 2),
    "SGD": CurrencyMeta("SGD", "S$", "Singapore Dollar", 2),
    "HKD": CurrencyMeta("HKD", "HK$", "Hong Kong Dollar", 2),
    "NZD": CurrencyMeta("NZD", "NZ$", "New Zealand Dollar", 2),
    "KRW": CurrencyMeta("KRW", "₩", "South Korean Won", 0),
    "MXN": CurrencyMeta("MXN", "$", "Mexican Peso", 2),
    "BRL": CurrencyMeta("BRL", "R$", "Brazilian Real", 2),
    "ZAR": CurrencyMeta("ZAR", "R", "South African Rand", 2),
    "SEK": CurrencyMeta("SEK", "kr", "Swedish Krona", 2),
    "NOK": CurrencyMeta("NOK", "kr", "Norwegian Krone", 2),
    "DKK": CurrencyMeta("DKK", "kr", "Danish Krone", 2),
    "PLN": CurrencyMeta("PLN", "zł", "Polish Zloty", 2),
    "THB": CurrencyMeta("THB", "฿", "Thai Baht", 2),
    "IDR": CurrencyMeta("IDR", "Rp", "Indonesian Rupiah", 0),
    "MYR": CurrencyMeta("MYR", "RM", "Malaysian Ringgit", 2),
    "PHP": CurrencyMeta("PHP", "₱", "Philippine Peso", 2),
    "VND": CurrencyMeta("VND", "₫", "Vietnamese Dong", 0),
    "RUB": CurrencyMeta("RUB", "₽", "Russian Ruble", 2),
    "TRY": CurrencyMeta("TRY", "₺", "Turkish Lira", 2),
    "SAR": CurrencyMeta("SAR", "﷼", "Saudi Riyal", 2),
    "QAR": CurrencyMeta("QAR", "﷼", "Qatari Riyal", 2),
    "KWD": CurrencyMeta("KWD", "د.ك", "Kuwaiti Dinar", 3),
    "BHD": CurrencyMeta("BHD", ".د.ب", "Bahraini Dinar", 3),
    "OMR": CurrencyMeta("OMR", "﷼", "Omani Rial", 3),
    "LKR": CurrencyMeta("LKR", "₨", "Sri Lankan Rupee", 2),
    "PKR": CurrencyMeta("PKR", "₨", "Pakistani Rupee", 2),
    "BDT": CurrencyMeta("BDT", "৳", "Bangladeshi Taka", 2),
    "NPR": CurrencyMeta("NPR", "₨", "Nepalese Rupee", 2),
    "EGP": CurrencyMeta("EGP", "£", "Egyptian Pound", 2),
    "NGN": CurrencyMeta("NGN", "₦", "Nigerian Naira", 2),
    "KES": CurrencyMeta("KES", "KSh", "Kenyan Shilling", 2),
    "COP": CurrencyMeta("COP", "$", "Colombian Peso", 2),
    "ARS": CurrencyMeta("ARS", "$", "Argentine Peso", 2),
    "CLP": CurrencyMeta("CLP", "$", "Chilean Peso", 0),
    "PEN": CurrencyMeta("PEN", "S/", "Peruvian Sol", 2),
}


# Upper-cased English country name -> ISO-3166 alpha-2.
COUNTRY_NAME_TO_ISO2: Dict[str, str] = {
    "VIETNAM": "VN",
    "MALAYSIA": "MY",
    "PERU": "PE",
    "PHILIPPINES": "PH",
    "BRAZIL": "BR",
    "INDIA": "IN",
    "MALDIVES": "MV",
    "LAOS": "LA",
    "THAILAND": "TH",
    "INDONESIA": "ID",
    "JAPAN": "JP",
    "SOUTH KOREA": "KR",
    "CHINA": "CN",
    "SINGAPORE": "SG",
    "AUSTRALIA": "AU",
    "NEW ZEALAND": "NZ",
    "FRANCE": "FR",
    "ITALY": "IT",
    "SPAIN": "ES",
    "GERMANY": "DE",
    "UNITED KINGDOM": "GB",
    "UNITED STATES": "US",
    "CANADA": "CA",
    "MEXICO": "MX",
    "ARGENTINA": "AR",
    "CHILE": "CL",
    "COLOMBIA": "CO",
    "EGYPT": "EG",
    "MOROCCO": "MA",
    "SOUTH AFRICA": "ZA",
    "KENYA": "KE",
    "TANZANIA": "TZ",
    "GREECE": "GR",
    "TURKEY": "TR",
    "UAE": "AE",
    "UNITED ARAB EMIRATES": "AE",
    "SAUDI ARABIA": "SA",
    "QATAR": "QA",
    "SWITZERLAND": "CH",
    "AUSTRIA": "AT",
    "NETHERLANDS": "NL",
    "BELGIUM": "BE",
    "PORTUGAL": "PT",
    "SWEDEN": "SE",
    "NORWAY": "NO",
    "DENMARK": "DK",
    "FINLAND": "FI",
    "ICELAND": "IS",
    "IRELAND": "IE",
    "RUSSIA": "RU",
    "POLAND": "PL",
    "CZECH REPUBLIC": "CZ",
    "HUNGARY": "HU",
    "CROATIA": "HR",
    "NEPAL": "NP",
    "SRI LANKA": "LK",
    "BHUTAN": "BT",
    "CAMBODIA": "KH",
    "MYANMAR": "MM",
    "CUBA": "CU",
    "JAMAICA": "JM",
    "FIJI": "FJ",
    "BALI": "ID",
}
