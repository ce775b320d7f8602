from solcheck.models.records import NOT_FOUND, UNKNOWN, WebsiteInfo
from solcheck.models.upstream import UpstreamResponse
from solcheck.parsers.extract import dig
from solcheck.parsers.whois.registrars import registrar_country


def _date_prefix(value: object) -> str:
    """``2023-03-15T00:00:00Z`` → ``2023-03-15``."""
    if not isinstance(value, str) or len(value) < 10:
        return UNKNOWN
    prefix = value.strip()[:10]
    parts = prefix.split("-")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return UNKNOWN
    return prefix


def normalize_whois(
    response: UpstreamResponse, *, url: str = NOT_FOUND, domain: str = NOT_FOUND
) -> WebsiteInfo:
    if not response.success:
        return WebsiteInfo(url=url, domain=domain)

    payload = response.payload
    country = (
        dig(payload, "registrant", "country")
        or dig(payload, "administrative", "country")
        or UNKNOWN
    )
    registrar = dig(payload, "registrar", "name", default="")
    if not isinstance(registrar, str):
        registrar = ""

    return WebsiteInfo(
        url=url,
        domain=domain,
        registration_date=_date_prefix(dig(payload, "domain", "created_date")),
        registration_country=str(country).strip() or UNKNOWN,
        registrar=registrar.strip() or UNKNOWN,
        registrar_country=registrar_country(registrar),
    )
