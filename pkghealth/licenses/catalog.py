"""Curated SPDX license catalog and the built-in license category tables."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SpdxLicense:
    id: str
    name: str
    osi: bool = False
    fsf: bool = False
    deprecated: bool = False


_l = SpdxLicense

LICENSES_WITH_PATENT_CLAUSE = frozenset(
    {
        "Apache-1.1",
        "Apache-2.0",
        "AFL-1.1",
        "AFL-1.2",
        "AFL-2.0",
        "AFL-2.1",
        "AFL-3.0",
        "APL-1.0",
        "APSL-1.0",
        "APSL-1.1",
        "APSL-1.2",
        "APSL-2.0",
        "CATOSL-1.1",
        "CDDL-1.0",
        "CDDL-1.1",
        "CPL-1.0",
        "EPL-1.0",
        "EPL-2.0",
        "EUPL-1.0",
        "EUPL-1.1",
        "EUPL-1.2",
        "GPL-3.0",
        "GPL-3.0-only",
        "GPL-3.0-or-later",
        "IPL-1.0",
        "LGPL-3.0-only",
        "LGPL-3.0-or-later",
        "AGPL-3.0-only",
        "AGPL-3.0-or-later",
        "MPL-2.0",
        "MPL-2.0-no-copyleft-exception",
        "MS-PL",
        "OSL-3.0",
        "PHP-3.01",
        "SPL-1.0",
    }
)

SPDX_EXCEPTIONS = frozenset(
    {
        "Classpath-exception-2.0",
        "LLVM-exception",
        "GCC-exception-3.1",
        "Qt-LGPL-exception-1.1",
        "Font-exception-2.0",
        "Autoconf-exception-3.0",
        "Bison-exception-2.2",
        "Bootloader-exception",
        "Linux-syscall-note",
    }
)

# fmt: off
SPDX_LICENSES: tuple[SpdxLicense, ...] = (
    _l("0BSD", "BSD Zero Clause License", osi=True, fsf=True),
    _l("AAL", "Attribution Assurance License", osi=True),
    _l("AFL-1.1", "Academic Free License v1.1", osi=True),
    _l("AFL-1.2", "Academic Free License v1.2", osi=True),
    _l("AFL-2.0", "Academic Free License v2.0", osi=True),
    _l("AFL-2.1", "Academic Free License v2.1", osi=True),
    _l("AFL-3.0", "Academic Free License v3.0", osi=True, fsf=True),
    _l("Apache-1.0", "Apache License 1.0", fsf=True),
    _l("Apache-1.1", "Apache License 1.1", osi=True, fsf=True),
    _l("Apache-2.0", "Apache License 2.0", osi=True, fsf=True),
    _l("APL-1.0", "Adaptive Public License v1.0", osi=True),
    _l("APSL-1.0", "Apple Public Source License v1.0", osi=True),
    _l("APSL-1.1", "Apple Public Source License v1.1"),
    _l("APSL-1.2", "Apple Public Source License v1.2"),
    _l("APSL-2.0", "Apple Public Source License v2.0", osi=True, fsf=True),
    _l("Artistic-1.0", "Artistic License 1.0", osi=True),
    _l("Artistic-1.0-Perl", "Artistic License 1.0 (Perl)", osi=True),
    _l("Artistic-1.0-cl8", "Artistic License 1.0 w/clause 8", osi=True),
    _l("Artistic-2.0", "Artistic License 2.0", osi=True, fsf=True),
    _l("BlueOak-1.0.0", "Blue Oak Model License 1.0.0"),
    _l("BSD-1-Clause", "BSD 1-Clause License", osi=True),
    _l("BSD-2-Clause", 'BSD 2-Clause "Simplified" License', osi=True, fsf=True),
    _l("BSD-2-Clause-Patent", "BSD 2-Clause Plus Patent License", osi=True),
    _l("BSD-3-Clause", 'BSD 3-Clause "New" or "Revised" License', osi=True, fsf=True),
    _l("BSD-3-Clause-Clear", "BSD 3-Clause Clear License", fsf=True),
    _l("BSD-4-Clause", 'BSD 4-Clause "Original" or "Old" License', fsf=True),
    _l("BSL-1.0", "Boost Software License 1.0", osi=True, fsf=True),
    _l("BUSL-1.1", "Business Source License 1.1"),
    _l("CC0-1.0", "Creative Commons Zero v1.0 Universal", fsf=True),
    _l("CC-BY-1.0", "Creative Commons Attribution 1.0 Generic"),
    _l("CC-BY-2.0", "Creative Commons Attribution 2.0 Generic"),
    _l("CC-BY-2.5", "Creative Commons Attribution 2.5 Generic"),
    _l("CC-BY-3.0", "Creative Commons Attribution 3.0 Unported"),
    _l("CC-BY-4.0", "Creative Commons Attribution 4.0 International"),
    _l("CC-BY-NC-1.0", "Creative Commons Attribution Non Commercial 1.0 Generic"),
    _l("CC-BY-NC-2.0", "Creative Commons Attribution Non Commercial 2.0 Generic"),
    _l("CC-BY-NC-2.5", "Creative Commons Attribution Non Commercial 2.5 Generic"),
    _l("CC-BY-NC-3.0", "Creative Commons Attribution Non Commercial 3.0 Unported"),
    _l("CC-BY-NC-4.0", "Creative Commons Attribution Non Commercial 4.0 International"),
    _l("CC-BY-NC-ND-1.0", "Creative Commons Attribution Non Commercial No Derivatives 1.0 Generic"),
    _l("CC-BY-NC-ND-2.0", "Creative Commons Attribution Non Commercial No Derivatives 2.0 Generic"),
    _l("CC-BY-NC-ND-2.5", "Creative Commons Attribution Non Commercial No Derivatives 2.5 Generic"),
    _l("CC-BY-NC-ND-3.0", "Creative Commons Attribution Non Commercial No Derivatives 3.0 Unported"),
    _l("CC-BY-NC-ND-4.0", "Creative Commons Attribution Non Commercial No Derivatives 4.0 International"),
    _l("CC-BY-NC-SA-1.0", "Creative Commons Attribution Non Commercial Share Alike 1.0 Generic"),
    _l("CC-BY-NC-SA-2.0", "Creative Commons Attribution Non Commercial Share Alike 2.0 Generic"),
    _l("CC-BY-NC-SA-2.5", "Creative Commons Attribution Non Commercial Share Alike 2.5 Generic"),
    _l("CC-BY-NC-SA-3.0", "Creative Commons Attribution Non Commercial Share Alike 3.0 Unported"),
    _l("CC-BY-NC-SA-4.0", "Creative Commons Attribution Non Commercial Share Alike 4.0 International"),
    _l("CC-BY-ND-1.0", "Creative Commons Attribution No Derivatives 1.0 Generic"),
    _l("CC-BY-ND-2.0", "Creative Commons Attribution No Derivatives 2.0 Generic"),
    _l("CC-BY-ND-2.5", "Creative Commons Attribution No Derivatives 2.5 Generic"),
    _l("CC-BY-ND-3.0", "Creative Commons Attribution No Derivatives 3.0 Unported"),
    _l("CC-BY-ND-4.0", "Creative Commons Attribution No Derivatives 4.0 International"),
    _l("CC-BY-SA-1.0", "Creative Commons Attribution Share Alike 1.0 Generic"),
    _l("CC-BY-SA-2.0", "Creative Commons Attribution Share Alike 2.0 Generic"),
    _l("CC-BY-SA-2.5", "Creative Commons Attribution Share Alike 2.5 Generic"),
    _l("CC-BY-SA-3.0", "Creative Commons Attribution Share Alike 3.0 Unported"),
    _l("CC-BY-SA-4.0", "Creative Commons Attribution Share Alike 4.0 International"),
    _l("CATOSL-1.1", "Computer Associates Trusted Open Source License 1.1", osi=True),
    _l("CDDL-1.0", "Common Development and Distribution License 1.0", osi=True, fsf=True),
    _l("CDDL-1.1", "Common Development and Distribution License 1.1"),
    _l("CECILL-2.0", "CeCILL Free Software License Agreement v2.0"),
    _l("CECILL-2.1", "CeCILL Free Software License Agreement v2.1", osi=True),
    _l("CECILL-B", "CeCILL-B Free Software License Agreement", fsf=True),
    _l("CECILL-C", "CeCILL-C Free Software License Agreement", fsf=True),
    _l("ClArtistic", "Clarified Artistic License", fsf=True),
    _l("CNRI-Python", "CNRI Python License", osi=True),
    _l("CPAL-1.0", "Common Public Attribution License 1.0", osi=True, fsf=True),
    _l("CPL-1.0", "Common Public License 1.0", osi=True, fsf=True),
    _l("curl", "curl License"),
    _l("ECL-1.0", "Educational Community License v1.0", osi=True),
    _l("ECL-2.0", "Educational Community License v2.0", osi=True, fsf=True),
    _l("EFL-1.0", "Eiffel Forum License v1.0", osi=True),
    _l("EFL-2.0", "Eiffel Forum License v2.0", osi=True, fsf=True),
    _l("Elastic-2.0", "Elastic License 2.0"),
    _l("Entessa", "Entessa Public License v1.0", osi=True),
    _l("EPL-1.0", "Eclipse Public License 1.0", osi=True, fsf=True),
    _l("EPL-2.0", "Eclipse Public License 2.0", osi=True, fsf=True),
    _l("ErlPL-1.1", "Erlang Public License v1.1"),
    _l("EUDatagrid", "EU DataGrid Software License", osi=True, fsf=True),
    _l("EUPL-1.0", "European Union Public License 1.0"),
    _l("EUPL-1.1", "European Union Public License 1.1", osi=True, fsf=True),
    _l("EUPL-1.2", "European Union Public License 1.2", osi=True, fsf=True),
    _l("Fair", "Fair License", osi=True),
    _l("Frameworx-1.0", "Frameworx Open License 1.0", osi=True),
    _l("FTL", "Freetype Project License", fsf=True),
    _l("GFDL-1.1", "GNU Free Documentation License v1.1", fsf=True, deprecated=True),
    _l("GFDL-1.2", "GNU Free Documentation License v1.2", fsf=True, deprecated=True),
    _l("GFDL-1.3", "GNU Free Documentation License v1.3", fsf=True, deprecated=True),
    _l("gnuplot", "gnuplot License", fsf=True),
    _l("HPND", "Historical Permission Notice and Disclaimer", osi=True, fsf=True),
    _l("ICU", "ICU License"),
    _l("IJG", "Independent JPEG Group License", fsf=True),
    _l("ImageMagick", "ImageMagick License"),
    _l("iMatix", "iMatix Standard Function Library Agreement", fsf=True),
    _l("Imlib2", "Imlib2 License", fsf=True),
    _l("Info-ZIP", "Info-ZIP License"),
    _l("Intel", "Intel Open Source License", osi=True, fsf=True),
    _l("IPA", "IPA Font License", osi=True, fsf=True),
    _l("IPL-1.0", "IBM Public License v1.0", osi=True, fsf=True),
    _l("ISC", "ISC License", osi=True, fsf=True),
    _l("LGPL-2.0", "GNU Lesser General Public License v2.0", osi=True, deprecated=True),
    _l("LGPL-2.0-only", "GNU Lesser General Public License v2.0 only", osi=True),
    _l("LGPL-2.0-or-later", "GNU Lesser General Public License v2.0 or later", osi=True),
    _l("LGPL-2.1", "GNU Lesser General Public License v2.1", osi=True, fsf=True, deprecated=True),
    _l("LGPL-2.1-only", "GNU Lesser General Public License v2.1 only", osi=True, fsf=True),
    _l("LGPL-2.1-or-later", "GNU Lesser General Public License v2.1 or later", osi=True, fsf=True),
    _l("LGPL-3.0", "GNU Lesser General Public License v3.0", osi=True, fsf=True, deprecated=True),
    _l("LGPL-3.0-only", "GNU Lesser General Public License v3.0 only", osi=True, fsf=True),
    _l("LGPL-3.0-or-later", "GNU Lesser General Public License v3.0 or later", osi=True, fsf=True),
    _l("LiLiQ-P-1.1", "Licence Libre du Québec – Permissive version 1.1", osi=True),
    _l("LiLiQ-R-1.1", "Licence Libre du Québec – Réciprocité version 1.1", osi=True),
    _l("LiLiQ-Rplus-1.1", "Licence Libre du Québec – Réciprocité forte version 1.1", osi=True),
    _l("LPL-1.0", "Lucent Public License v1.0", osi=True),
    _l("LPL-1.02", "Lucent Public License v1.02", osi=True, fsf=True),
    _l("LPPL-1.0", "LaTeX Project Public License v1.0"),
    _l("LPPL-1.1", "LaTeX Project Public License v1.1"),
    _l("LPPL-1.2", "LaTeX Project Public License v1.2", fsf=True),
    _l("LPPL-1.3a", "LaTeX Project Public License v1.3a", fsf=True),
    _l("LPPL-1.3c", "LaTeX Project Public License v1.3c", osi=True),
    _l("MirOS", "MirOS License", osi=True),
    _l("MIT", "MIT License", osi=True, fsf=True),
    _l("MIT-0", "MIT No Attribution", osi=True),
    _l("Motosoto", "Motosoto License", osi=True),
    _l("MPL-1.0", "Mozilla Public License 1.0", osi=True),
    _l("MPL-1.1", "Mozilla Public License 1.1", osi=True, fsf=True),
    _l("MPL-2.0", "Mozilla Public License 2.0", osi=True, fsf=True),
    _l("MPL-2.0-no-copyleft-exception", "Mozilla Public License 2.0 (no copyleft exception)", osi=True),
    _l("MS-PL", "Microsoft Public License", osi=True, fsf=True),
    _l("MS-RL", "Microsoft Reciprocal License", osi=True, fsf=True),
    _l("Multics", "Multics License", osi=True),
    _l("MulanPSL-2.0", "Mulan Permissive Software License, Version 2", osi=True),
    _l("NAIST-2003", "Nara Institute of Science and Technology License (2003)"),
    _l("NASA-1.3", "NASA Open Source Agreement 1.3", osi=True),
    _l("Naumen", "Naumen Public License", osi=True),
    _l("NBPL-1.0", "Net Boolean Public License v1"),
    _l("NCSA", "University of Illinois/NCSA Open Source License", osi=True, fsf=True),
    _l("NGPL", "Nethack General Public License", osi=True),
    _l("NLPL", "No Limit Public License"),
    _l("Nokia", "Nokia Open Source License", osi=True, fsf=True),
    _l("NOSL", "Netscape Open Source License v1.0"),
    _l("NPL-1.0", "Netscape Public License v1.0", fsf=True),
    _l("NPL-1.1", "Netscape Public License v1.1", fsf=True),
    _l("NPOSL-3.0", "Non-Profit Open Software License 3.0", osi=True),
    _l("NTP", "NTP License", osi=True),
    _l("ODbL-1.0", "Open Data Commons Open Database License v1.0", fsf=True),
    _l("OFL-1.0", "SIL Open Font License 1.0", fsf=True),
    _l("OFL-1.1", "SIL Open Font License 1.1", osi=True, fsf=True),
    _l("OGTSL", "Open Group Test Suite License", osi=True),
    _l("OLDAP-2.8", "Open LDAP Public License v2.8"),
    _l("OML", "Open Market License"),
    _l("OpenSSL", "OpenSSL License", fsf=True),
    _l("OPL-1.0", "Open Public License v1.0"),
    _l("OSL-1.0", "Open Software License 1.0", osi=True, fsf=True),
    _l("OSL-1.1", "Open Software License 1.1", fsf=True),
    _l("OSL-2.0", "Open Software License 2.0", osi=True, fsf=True),
    _l("OSL-2.1", "Open Software License 2.1", osi=True, fsf=True),
    _l("OSL-3.0", "Open Software License 3.0", osi=True, fsf=True),
    _l("PHP-3.0", "PHP License v3.0", osi=True),
    _l("PHP-3.01", "PHP License v3.01", osi=True, fsf=True),
    _l("Plexus", "Plexus Classworlds License"),
    _l("PolyForm-Noncommercial-1.0.0", "PolyForm Noncommercial License 1.0.0"),
    _l("PolyForm-Small-Business-1.0.0", "PolyForm Small Business License 1.0.0"),
    _l("PostgreSQL", "PostgreSQL License", osi=True),
    _l("PSF-2.0", "Python Software Foundation License 2.0"),
    _l("Python-2.0", "Python License 2.0", osi=True, fsf=True),
    _l("Qhull", "Qhull License"),
    _l("QPL-1.0", "Q Public License 1.0", osi=True, fsf=True),
    _l("RPL-1.1", "Reciprocal Public License 1.1", osi=True),
    _l("RPL-1.5", "Reciprocal Public License 1.5", osi=True),
    _l("RPSL-1.0", "RealNetworks Public Source License v1.0", osi=True, fsf=True),
    _l("Ruby", "Ruby License", fsf=True),
    _l("SGI-B-2.0", "SGI Free Software License B v2.0", fsf=True),
    _l("SimPL-2.0", "Simple Public License 2.0", osi=True),
    _l("SISSL", "Sun Industry Standards Source License v1.1", osi=True, fsf=True),
    _l("Sleepycat", "Sleepycat License", osi=True, fsf=True),
    _l("SMLNJ", "Standard ML of New Jersey License", fsf=True),
    _l("SPL-1.0", "Sun Public License v1.0", osi=True, fsf=True),
    _l("SSPL-1.0", "Server Side Public License v1"),
    _l("SugarCRM-1.1.3", "SugarCRM Public License v1.1.3"),
    _l("UPL-1.0", "Universal Permissive License v1.0", osi=True, fsf=True),
    _l("Unlicense", "The Unlicense", osi=True, fsf=True),
    _l("Vim", "Vim License", fsf=True),
    _l("VSL-1.0", "Vovida Software License v1.0", osi=True),
    _l("W3C", "W3C Software Notice and License (2002-12-31)", osi=True, fsf=True),
    _l("Watcom-1.0", "Sybase Open Watcom Public License 1.0", osi=True),
    _l("Wsuipa", "Wsuipa License"),
    _l("WTFPL", "Do What The F*ck You Want To Public License", fsf=True),
    _l("X11", "X11 License", fsf=True),
    _l("Xnet", "X.Net License", osi=True),
    _l("YPL-1.0", "Yahoo! Public License v1.0"),
    _l("YPL-1.1", "Yahoo! Public License v1.1", fsf=True),
    _l("Zed", "Zed License"),
    _l("Zend-2.0", "Zend License v2.0", fsf=True),
    _l("Zimbra-1.3", "Zimbra Public License v1.3", fsf=True),
    _l("Zlib", "zlib License", osi=True, fsf=True),
    _l("ZPL-2.0", "Zope Public License 2.0", osi=True, fsf=True),
    _l("ZPL-2.1", "Zope Public License 2.1", fsf=True),
    _l("GPL-1.0", "GNU General Public License v1.0", deprecated=True),
    _l("GPL-1.0-only", "GNU General Public License v1.0 only"),
    _l("GPL-1.0-or-later", "GNU General Public License v1.0 or later"),
    _l("GPL-2.0", "GNU General Public License v2.0", osi=True, fsf=True, deprecated=True),
    _l("GPL-2.0-only", "GNU General Public License v2.0 only", osi=True, fsf=True),
    _l("GPL-2.0-or-later", "GNU General Public License v2.0 or later", osi=True, fsf=True),
    _l("GPL-3.0", "GNU General Public License v3.0", osi=True, fsf=True, deprecated=True),
    _l("GPL-3.0-only", "GNU General Public License v3.0 only", osi=True, fsf=True),
    _l("GPL-3.0-or-later", "GNU General Public License v3.0 or later", osi=True, fsf=True),
    _l("AGPL-1.0", "Affero General Public License v1.0", deprecated=True),
    _l("AGPL-1.0-only", "Affero General Public License v1.0 only"),
    _l("AGPL-1.0-or-later", "Affero General Public License v1.0 or later"),
    _l("AGPL-3.0", "GNU Affero General Public License v3.0", osi=True, fsf=True, deprecated=True),
    _l("AGPL-3.0-only", "GNU Affero General Public License v3.0 only", osi=True, fsf=True),
    _l("AGPL-3.0-or-later", "GNU Affero General Public License v3.0 or later", osi=True, fsf=True),
)
# fmt: on

COMMERCIAL_RESTRICTIVE_LICENSES = (
    "GPL-1.0-only",
    "GPL-1.0-or-later",
    "GPL-2.0-only",
    "GPL-2.0-or-later",
    "GPL-3.0-only",
    "GPL-3.0-or-later",
    "AGPL-1.0-only",
    "AGPL-1.0-or-later",
    "AGPL-3.0-only",
    "AGPL-3.0-or-later",
    "SSPL-1.0",
    # share-alike
    "CC-BY-SA-1.0",
    "CC-BY-SA-2.0",
    "CC-BY-SA-2.5",
    "CC-BY-SA-3.0",
    "CC-BY-SA-4.0",
    # non-commercial
    "CC-BY-NC-1.0",
    "CC-BY-NC-2.0",
    "CC-BY-NC-2.5",
    "CC-BY-NC-3.0",
    "CC-BY-NC-4.0",
    "CC-BY-NC-SA-1.0",
    "CC-BY-NC-SA-2.0",
    "CC-BY-NC-SA-2.5",
    "CC-BY-NC-SA-3.0",
    "CC-BY-NC-SA-4.0",
    "CC-BY-NC-ND-1.0",
    "CC-BY-NC-ND-2.0",
    "CC-BY-NC-ND-2.5",
    "CC-BY-NC-ND-3.0",
    "CC-BY-NC-ND-4.0",
    # documentation
    "GFDL-1.1",
    "GFDL-1.1-only",
    "GFDL-1.1-or-later",
    "GFDL-1.2",
    "GFDL-1.2-only",
    "GFDL-1.2-or-later",
    "GFDL-1.3",
    "GFDL-1.3-only",
    "GFDL-1.3-or-later",
    "ODbL-1.0",
    "OPL-1.0",
    "SimPL-2.0",
)

PERMISSIVE_LICENSES = (
    "MIT",
    "ISC",
    "BSD-2-Clause",
    "BSD-3-Clause",
    "BSD-3-Clause-Clear",
    "BSD-4-Clause",
    "Apache-2.0",
    "Apache-1.1",
    "Unlicense",
    "CC0-1.0",
    "0BSD",
    "Zlib",
    "BSL-1.0",
    "PostgreSQL",
    "X11",
    "Artistic-2.0",
    "WTFPL",
    "FTL",
    "IJG",
    "Libpng",
    "libtiff",
    "NTP",
    "OpenSSL",
    "PHP-3.0",
    "PHP-3.01",
    "Python-2.0",
    "Ruby",
    "SGI-B-2.0",
    "Spencer-86",
    "Spencer-94",
    "Unicode-DFS-2016",
    "Vim",
    "W3C",
    "Xnet",
    "CC-BY-1.0",
    "CC-BY-2.0",
    "CC-BY-2.5",
    "CC-BY-3.0",
    "CC-BY-4.0",
    "AFL-3.0",
    "AFL-2.1",
    "AFL-2.0",
    "AFL-1.2",
    "AFL-1.1",
    "OSL-3.0",
    "OSL-2.1",
    "OSL-2.0",
    "OSL-1.1",
    "OSL-1.0",
    "UPL-1.0",
    "NCSA",
    "ECL-2.0",
    "ECL-1.0",
    "EFL-2.0",
    "EFL-1.0",
    "Fair",
    "MS-PL",
    "MIT-0",
    "MIT-Modern-Variant",
    "Abstyles",
    "AdaCore-doc",
    "Entessa",
    "HPND",
    "HPND-sell-variant",
    "Unicode-TOU",
)

WEAK_COPYLEFT_LICENSES = (
    "LGPL-2.0",
    "LGPL-2.0-only",
    "LGPL-2.0-or-later",
    "LGPL-2.1",
    "LGPL-2.1-only",
    "LGPL-2.1-or-later",
    "LGPL-3.0",
    "LGPL-3.0-only",
    "LGPL-3.0-or-later",
    "MPL-1.0",
    "MPL-1.1",
    "MPL-2.0",
    "MPL-2.0-no-copyleft-exception",
    "EPL-1.0",
    "EPL-2.0",
    "CDDL-1.0",
    "CDDL-1.1",
    "CPL-1.0",
    "EUPL-1.0",
    "EUPL-1.1",
    "EUPL-1.2",
    "MS-RL",
    "APSL-2.0",
    "APSL-1.0",
    "Nokia",
    "RPSL-1.0",
    "RSCPL",
    "SPL-1.0",
    "Watcom-1.0",
    "wxWindows",
    "LPL-1.02",
    "LPL-1.0",
    "QPL-1.0",
    "Sleepycat",
)

_BY_ID = {lic.id: lic for lic in SPDX_LICENSES}

# Every identifier a category table can name is treated as a known SPDX id.
KNOWN_LICENSE_IDS = frozenset(
    {*_BY_ID, *COMMERCIAL_RESTRICTIVE_LICENSES, *PERMISSIVE_LICENSES, *WEAK_COPYLEFT_LICENSES}
)


def get_license_info(spdx_id: str) -> SpdxLicense | None:
    return _BY_ID.get(spdx_id)


def has_patent_clause(spdx_id: str) -> bool:
    return spdx_id in LICENSES_WITH_PATENT_CLAUSE


def is_osi_approved(spdx_id: str) -> bool:
    info = _BY_ID.get(spdx_id)
    return info is not None and info.osi
