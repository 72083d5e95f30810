"""Identifier variants derived from raw schema names.

Every function is pure: the same raw identifier always yields the same
variant, so variants are computed on demand instead of being stored.
"""

import re

import inflection

__all__ = [
    "COMMON_INITIALISMS",
    "camel",
    "lower_first",
    "singular",
    "plural",
    "upper_camel",
    "lower_camel",
    "upper_camel_plural",
    "lower_camel_plural",
    "json_key",
    "with_initialisms",
    "json_key_initialisms",
    "short_name",
    "exact_json",
    "exact",
    "table_key",
    "stream_key",
    "snake",
]

COMMON_INITIALISMS: dict[str, str] = {
    "Acl": "ACL",
    "Api": "API",
    "Ascii": "ASCII",
    "Cpu": "CPU",
    "Css": "CSS",
    "Csv": "CSV",
    "Dns": "DNS",
    "Eof": "EOF",
    "Guid": "GUID",
    "Html": "HTML",
    "Http": "HTTP",
    "Https": "HTTPS",
    "Icmp": "ICMP",
    "Id": "ID",
    "Ip": "IP",
    "Json": "JSON",
    "Kvk": "KVK",
    "Lhs": "LHS",
    "Pdf": "PDF",
    "Pgp": "PGP",
    "Qps": "QPS",
    "Qr": "QR",
    "Ram": "RAM",
    "Rhs": "RHS",
    "Rpc": "RPC",
    "Sla": "SLA",
    "Smtp": "SMTP",
    "Sql": "SQL",
    "Ssh": "SSH",
    "Svg": "SVG",
    "Tcp": "TCP",
    "Tls": "TLS",
    "Ttl": "TTL",
    "Udp": "UDP",
    "Ui": "UI",
    "Uid": "UID",
    "Uri": "URI",
    "Url": "URL",
    "Utf8": "UTF8",
    "Uuid": "UUID",
    "Vm": "VM",
    "Xml": "XML",
    "Xmpp": "XMPP",
    "Xsrf": "XSRF",
    "Xss": "XSS",
}

# inflection treats these as uncountable; generated plural names need an "s".
PLURAL_OVERRIDES: dict[str, str] = {
    "information": "informations",
    "Information": "Informations",
}

_UPPER_RE = re.compile(r"[A-Z]")


def lower_first(s: str) -> str:
    if not s:
        return ""
    return s[0].lower() + s[1:]


def camel(s: str) -> str:
    if not s:
        return ""
    return inflection.camelize(s)


def singular(s: str) -> str:
    """English singular form, e.g. ``user_accounts`` -> ``user_account``."""
    return inflection.singularize(s)


def plural(s: str) -> str:
    """English plural form, e.g. ``table`` -> ``tables``."""
    out = inflection.pluralize(s)
    return PLURAL_OVERRIDES.get(out, out)


def upper_camel(s: str) -> str:
    """PascalCase of the singular form: ``user_accounts`` -> ``UserAccount``."""
    return camel(singular(s))


def lower_camel(s: str) -> str:
    """``upper_camel`` with the first character lower-cased."""
    return lower_first(upper_camel(s))


def upper_camel_plural(s: str) -> str:
    """PascalCase of the plural form; a trailing ``ids`` becomes ``Ids``."""
    out = camel(plural(s))
    if out.endswith("ids"):
        out = out[:-3] + "Ids"
    return out


def lower_camel_plural(s: str) -> str:
    return lower_first(upper_camel_plural(s))


def json_key(s: str) -> str:
    """Lower camel form of the raw identifier with ``id`` suffixes capitalized.

    ``userid`` -> ``userId``, ``user_id`` -> ``userId``; a bare ``id`` stays.
    """
    if not s:
        return ""
    out = inflection.camelize(s, False)
    if out != "id" and out.endswith("id"):
        out = out[:-2] + "Id"
    return out


def with_initialisms(s: str) -> str:
    """Upper-case a known initialism at the end of a camel identifier.

    Windows of 5 down to 2 characters are checked against the tail, so
    ``fooHttpsUrl`` -> ``fooHttpsURL`` and ``apiId`` -> ``apiID``.
    """
    for size in range(5, 1, -1):
        if len(s) >= size:
            replacement = COMMON_INITIALISMS.get(s[-size:])
            if replacement:
                s = s[:-size] + replacement
    return s


def json_key_initialisms(s: str) -> str:
    return with_initialisms(json_key(s))


def short_name(s: str) -> str:
    """Terse alias from the capitals of ``upper_camel``: ``UserAccount`` -> ``ua``."""
    return "".join(_UPPER_RE.findall(upper_camel(s))).lower()


def exact_json(s: str) -> str:
    """Raw identifier with only its first character lower-cased."""
    return lower_first(s)


def exact(s: str) -> str:
    """Camel form of ``exact_json``, keeping the identifier unsingularized."""
    return camel(exact_json(s))


def table_key(s: str) -> str:
    """Graph key of a table: singular lower camel of its name."""
    return lower_camel(s)


def stream_key(s: str) -> str:
    """Graph key of a change stream, taken from the stream name as written."""
    return lower_first(camel(s))


def snake(s: str) -> str:
    return inflection.underscore(s)
