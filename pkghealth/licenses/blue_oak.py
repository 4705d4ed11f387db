"""Blue Oak Council license quality ratings."""

from __future__ import annotations

from pkghealth.models.analysis import BlueOakRating

_GOLD = frozenset(
    {
        "MIT",
        "MIT-0",
        "Apache-2.0",
        "Apache-1.1",
        "BSD-2-Clause",
        "BSD-2-Clause-Patent",
        "BlueOak-1.0.0",
        "CC0-1.0",
        "Unlicense",
        "0BSD",
        "UPL-1.0",
        "NCSA",
        "FTL",
        "Fair",
    }
)

_SILVER = frozenset(
    {
        "BSD-3-Clause",
        "BSD-3-Clause-Clear",
        "ISC",
        "PostgreSQL",
        "Zlib",
        "X11",
        "Python-2.0",
        "Ruby",
        "PHP-3.0",
        "PHP-3.01",
        "ECL-2.0",
        "EFL-2.0",
        "Vim",
        "W3C",
        "Unicode-DFS-2016",
        "NTP",
        "OpenSSL",
        "MS-PL",
    }
)

_BRONZE = frozenset(
    {
        "Artistic-2.0",
        "LGPL-2.1",
        "LGPL-2.1-only",
        "LGPL-2.1-or-later",
        "LGPL-3.0",
        "LGPL-3.0-only",
        "LGPL-3.0-or-later",
        "MPL-2.0",
        "MPL-1.1",
        "EPL-1.0",
        "EPL-2.0",
        "CDDL-1.0",
        "CDDL-1.1",
        "EUPL-1.1",
        "EUPL-1.2",
        "AFL-3.0",
        "OSL-3.0",
        "APSL-2.0",
        "CPL-1.0",
        "MS-RL",
    }
)

_LEAD = frozenset(
    {
        "JSON",
        "WTFPL",
        "Beerware",
        "CC-BY-3.0",
        "CC-BY-4.0",
        "BSL-1.0",
        "QPL-1.0",
        "Artistic-1.0",
        "Artistic-1.0-Perl",
        "Artistic-1.0-cl8",
        "BSD-4-Clause",
        "OFL-1.1",
        "OPL-1.0",
    }
)

RATED_LICENSES = _GOLD | _SILVER | _BRONZE | _LEAD


def get_blue_oak_rating(spdx_id: str) -> BlueOakRating:
    normalized = spdx_id.strip()
    if normalized in _GOLD:
        return "gold"
    if normalized in _SILVER:
        return "silver"
    if normalized in _BRONZE:
        return "bronze"
    if normalized in _LEAD:
        return "lead"
    return "unrated"


def is_legally_sound(rating: BlueOakRating) -> bool:
    return rating in ("gold", "silver")
