"""Pure string transforms for keys, slugs, URL tokens, and anchor targets.

The documentation encodes a lot of meaning in punctuation and casing:
``(deprecated)`` suffixes on titles, possessives and slashes in operation
names, ``#``-disambiguated URL tokens such as
``{channel.id#DOCS_RESOURCES_CHANNEL/channel-object}``, and anchor targets
like ``#DOCS_RESOURCES_GUILD/guild-member-object``. Every rule that depends
on those conventions lives here so the traversal code never has to.
"""

from __future__ import annotations

import re

DEPRECATED_RE = re.compile(r"\(\s*deprecated\s*\)", re.IGNORECASE)
URL_TOKEN_RE = re.compile(r"\{([^{}]+)\}")

_APOSTROPHES_RE = re.compile(r"['’]")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9-]+")
_HYPHENS_RE = re.compile(r"-{2,}")
_EMAIL_PROTECTED_RE = re.compile(r"/?\[email\s*protected\].*$", re.IGNORECASE)
_ANCHOR_PREFIX_RE = re.compile(r"^(?:DOCS_)?(?:(?:RESOURCES|TOPICS)_)?", re.IGNORECASE)


def is_deprecated(name: str) -> bool:
    """Return ``True`` when a section title carries a ``(deprecated)`` marker."""
    return DEPRECATED_RE.search(name) is not None


def camelize(slug: str) -> str:
    """Join hyphen-separated segments into a camelCase identifier.

    ``"get-channel-messages"`` becomes ``"getChannelMessages"``. Empty
    segments (from doubled or trailing hyphens) are ignored.
    """
    parts = [part for part in slug.split("-") if part]
    if not parts:
        return ""
    return parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])


def slugify(text: str) -> str:
    """Lowercase *text* and reduce it to hyphen-separated ``[a-z0-9]`` runs.

    Used for deep-link anchors and for table markers whose heading has no
    ``id``. Matches the anchors the documentation site generates for its
    own headings (``"Get Channel"`` -> ``"get-channel"``).
    """
    slug = _WHITESPACE_RE.sub("-", text.strip().lower())
    slug = _NON_SLUG_RE.sub("", slug)
    return _HYPHENS_RE.sub("-", slug).strip("-")


def operation_key(name: str) -> str:
    """Derive the camelCase operation key from a section title.

    The title is lowercased, whitespace collapses to hyphens, apostrophes
    and a ``(deprecated)`` marker are dropped, and ``/`` turns into the
    word "or" before camel-casing::

        >>> operation_key("Modify Current User's Nick")
        'modifyCurrentUsersNick'
        >>> operation_key("Add/Remove Guild Member Role (deprecated)")
        'addOrRemoveGuildMemberRole'
    """
    text = DEPRECATED_RE.sub("", name.lower()).strip()
    text = _WHITESPACE_RE.sub("-", text)
    text = _APOSTROPHES_RE.sub("", text)
    text = text.replace("/", "-or-")
    text = _NON_SLUG_RE.sub("", text)
    return camelize(text)


def model_key(anchor_id: str) -> str:
    """Derive a model key from its heading id (``"guild-member-object"`` -> ``"guildMember"``)."""
    text = anchor_id.strip().lower()
    if text.endswith("-object"):
        text = text[: -len("-object")]
    return camelize(text)


def normalize_url_token(token: str) -> str:
    """Drop a ``#``-delimited disambiguator from a URL token.

    ``"channel.id#DOCS_RESOURCES_CHANNEL/channel-object"`` becomes
    ``"channel.id"``.
    """
    return token.split("#", 1)[0].strip()


def clean_url(url: str) -> str:
    """Tidy a URL template copied from a rendered page.

    Rewrites the ``[email protected]`` text that e-mail obfuscation leaves in
    place of ``/@me`` and strips disambiguators from every ``{token}``.
    """
    url = _EMAIL_PROTECTED_RE.sub("/@me", url.strip())
    return URL_TOKEN_RE.sub(lambda m: "{" + normalize_url_token(m.group(1)) + "}", url)


def url_tokens(url: str) -> list[str]:
    """Return the distinct ``{token}`` names in *url*, in order of appearance."""
    tokens: list[str] = []
    for match in URL_TOKEN_RE.finditer(url):
        token = normalize_url_token(match.group(1))
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def anchor_fragment(href: str) -> str:
    """Return the part of *href* after ``#`` (empty when there is none)."""
    if "#" not in href:
        return ""
    return href.split("#", 1)[1]


def is_object_anchor(fragment: str) -> bool:
    """Whether an anchor fragment points at an object section.

    ``...-object`` anchors always qualify. A ``DOCS_`` anchor qualifies only
    when the part after its last ``/`` is a bare object name such as
    ``DOCS_GUILD/member``; hyphenated sub-sections like
    ``DOCS_RESOURCES_CHANNEL/channel-object-channel-flags`` do not.
    """
    if fragment.lower().endswith("-object"):
        return True
    if not fragment.upper().startswith("DOCS_"):
        return False
    name = fragment.rsplit("/", 1)[-1]
    return "/" in fragment and bool(name) and "-" not in name



def type_from_anchor(fragment: str) -> str:
    """Turn an object anchor into a type name.

    The ``DOCS_`` and ``RESOURCES_``/``TOPICS_`` prefixes and the
    ``-object`` suffix are removed and the result is lowercased::

        >>> type_from_anchor("DOCS_GUILD/member")
        'guild/member'
        >>> type_from_anchor("DOCS_RESOURCES_GUILD/guild-member-object")
        'guild/guild-member'
        >>> type_from_anchor("channel-object")
        'channel'
    """
    text = _ANCHOR_PREFIX_RE.sub("", fragment.strip()).lower()
    if text.endswith("-object"):
        text = text[: -len("-object")]
    return text


def clean_field_name(raw: str) -> tuple[str, bool]:
    """Normalize a table ``Field`` cell.

    Surrounding ``*`` markers and whitespace are stripped. A trailing ``?``
    marks an optional field; it is removed and reported through the second
    element of the returned tuple.
    """
    name = raw.strip().strip("*").strip()
    optional = name.endswith("?")
    if optional:
        name = name.rstrip("?").strip().strip("*").strip()
    return name, optional
