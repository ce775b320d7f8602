"""Registrar name → country of incorporation.

Order matters: exact names are checked first across the whole table, then
each pattern is tried as a case-insensitive substring in table order.
"""

REGISTRAR_COUNTRIES: list[tuple[str, str]] = [
    ("GoDaddy.com, LLC", "United States"),
    ("NameCheap, Inc.", "United States"),
    ("Google LLC", "United States"),
    ("Squarespace Domains II LLC", "United States"),
    ("Cloudflare, Inc.", "United States"),
    ("Amazon Registrar, Inc.", "United States"),
    ("Network Solutions, LLC", "United States"),
    ("Name.com, Inc.", "United States"),
    ("Porkbun LLC", "United States"),
    ("Dynadot Inc", "United States"),
    ("NameSilo, LLC", "United States"),
    ("Tucows Domains Inc.", "Canada"),
    ("Gandi SAS", "France"),
    ("OVH sas", "France"),
    ("IONOS SE", "Germany"),
    ("Key-Systems GmbH", "Germany"),
    ("Hostinger Operations, UAB", "Lithuania"),
    ("PDR Ltd. d/b/a PublicDomainRegistry.com", "India"),
    ("Alibaba Cloud Computing (Beijing) Co., Ltd.", "China"),
    ("GMO Internet Group, Inc. d/b/a Onamae.com", "Japan"),
    ("Openprovider", "Netherlands"),
    ("Hosting Concepts B.V. d/b/a Registrar.eu", "Netherlands"),
    # substring patterns
    ("GoDaddy", "United States"),
    ("Namecheap", "United States"),
    ("Squarespace", "United States"),
    ("Cloudflare", "United States"),
    ("Amazon", "United States"),
    ("Network Solutions", "United States"),
    ("Porkbun", "United States"),
    ("Dynadot", "United States"),
    ("NameSilo", "United States"),
    ("Epik", "United States"),
    ("Google", "United States"),
    ("Tucows", "Canada"),
    ("Gandi", "France"),
    ("OVH", "France"),
    ("IONOS", "Germany"),
    ("1&1", "Germany"),
    ("Key-Systems", "Germany"),
    ("Hostinger", "Lithuania"),
    ("PublicDomainRegistry", "India"),
    ("Alibaba", "China"),
    ("HiChina", "China"),
    ("GMO Internet", "Japan"),
    ("Registrar.eu", "Netherlands"),
]


def registrar_country(name: str, table: list[tuple[str, str]] | None = None) -> str:
    """Country for a registrar name, or ``"Registrar: <name>"`` when unmatched."""
    table = REGISTRAR_COUNTRIES if table is None else table
    cleaned = (name or "").strip()
    if not cleaned:
        return "Unknown"

    lowered = cleaned.lower()
    for pattern, country in table:
        if pattern.lower() == lowered:
            return country
    for pattern, country in table:
        if pattern.lower() in lowered:
            return country
    return f"Registrar: {cleaned}"
