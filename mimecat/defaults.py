"""Built-in categories, installed when no categories have been configured yet."""
from __future__ import annotations

from mimecat.category import MimeCategory

EXECUTABLE = "executable"
SYMLINK = "symlink"

# (name, color, case-insensitive patterns, case-sensitive patterns)
MANDATORY_CATEGORIES: dict[str, tuple[str, str, str]] = {
    EXECUTABLE: ("magenta", "", "*.jsa, *.ucode, lft.db, traceproto.db, traceroute.db"),
    SYMLINK: ("blue", "", ""),
}

DEFAULT_CATEGORIES: tuple[tuple[str, str, str, str], ...] = (
    (
        "archive (compressed)",
        "green",
        "*.7z, *.arj, *.bz2, *.cab, *.cpio.gz, *.gz, *.jmod, *.jsonlz4, *.lz, *.lzo, *.rar,"
        " *.tar.bz2, *.tar.gz, *.tar.lz, *.tar.lzo, *.tar.xz, *.tar.zst, *.tbz2, *.tgz, *.txz,"
        " *.tz2, *.tzst, *.xz, *.zip, *.zpaq, *.zst",
        "pack-*.pack",
    ),
    ("archive (uncompressed)", "#aaffaa", "*.cpio, *.tar", ""),
    (
        "configuration file",
        "#77ddff",
        "",
        "*.alias, *.cfg, *.conf, *.conffiles, *.config, *.dep, *.desktop, *.ini, *.kmap, *.lang,"
        " *.my, *.page, *.properties, *.rc, *.service, *.shlibs, *.symbols, *.templates, *.theme,"
        " *.triggers, *.xcd, *.xsl, .config, .gitignore, Kconfig, control, gtkrc",
    ),
    (
        "database",
        "#2299ff",
        "",
        "*.alias.bin, *.builtin.bin, *.dat, *.db, *.dep.bin, *.enc, *.hwdb, *.idx, *.lm,"
        " *.md5sums, *.odb, *.order, *.sbstore, *.sqlite, *.sqlite-wal, *.symbols.bin, *.tablet,"
        " *.vlpset, magic.mgc",
    ),
    ("disk image", "#aaaaaa", "*.fsa, *.iso", "*.BIN, *.img"),
    (
        "document",
        "#33bbff",
        "*.csv, *.doc, *.docbook, *.docx, *.dotx, *.dvi, *.dvi.bz2, *.epub, *.htm, *.html, *.json,"
        " *.latex, *.log, *.ly, *.md, *.md5, *.pdf, *.pod, *.potx, *.ppsx, *.ppt, *.pptx, *.ps,"
        " *.readme, *.rst, *.sav, *.sdc, *.sdc.gz, *.sdd, *.sdp, *.sdw, *.sla, *.sla.gz, *.slaz,"
        " *.sxi, *.tex, *.txt, *.xls, *.xlsx, *.xlt, *.xml, copyright, readme*",
        "*.list, *.odc, *.odg, *.odp, *.ods, *.odt, *.otc, *.otp, *.ots, *.ott, *.yaml, *.log.?",
    ),
    (
        "font",
        "cyan",
        "",
        "*.afm, *.bdf, *.cache-7, *.cache-8, *.otf, *.pcf, *.pcf.gz, *.pf1, *.pf2, *.pfa, *.pfb,"
        " *.t1, *.ttf",
    ),
    ("game file", "#ff66bb", "", "*.MHK, *.bsp, *.mdl, *.pak, *.wad"),
    ("icon", "#aa99ff", "*.icns, *.ico, *.xbm, *.xpm", ""),
    (
        "image",
        "#dd88ff",
        "*.gif, *.jpeg, *.jpg, *.jxl, *.mng, *.png, *.tga, *.tif, *.tiff, *.webp, *.xcf.bz2,"
        " *.xcf.gz",
        "",
    ),
    ("image (uncompressed)", "#eeaaff", "*.bmp, *.pbm, *.pgm, *.pnm, *.ppm, *.spr, *.svg, *.xcf", ""),
    ("junk", "red", "*.bak, *.keep, *.old, *.orig", "core, *.~, *~"),
    (
        "music",
        "yellow",
        "*.aac, *.aif, *.ape, *.caf, *.dff, *.dsf, *.f4a, *.f4b, *.flac, *.m4a, *.m4b, *.mid,"
        " *.mka, *.mp3, *.oga, *.ogg, *.opus, *.ra, *.rax, *.w64, *.wav, *.wma, *.wv, *.wvc",
        "",
    ),
    (
        "object file",
        "#ff8811",
        "lib*.a",
        "*.Po, *.a.cmd, *.al, *.elc, *.go, *.gresource, *.ko, *.ko.cmd, *.ko.xz, *.ko.zst, *.la,"
        " *.lo, *.mo, *.moc, *.o, *.o.cmd, *.pyc, *.qrc, *.typelib, built-in.a, vmlinux.a",
    ),
    ("packaged program", "#88aa66", "*.rpm, *.xpi", "*.deb, *.ja, *.jar, *.sfi, *.tm"),
    (
        "script",
        "#cc6688",
        "",
        "*.BAT, *.bash, *.bashrc, *.cocci, *.csh, *.css, *.js, *.ksh, *.m4, *.patch, *.pl, *.pm,"
        " *.postinst, *.postrm, *.preinst, *.prerm, *.qml, *.sh, *.tcl, *.tmac, *.xba, *.zsh",
    ),
    ("shared object", "#ff6600", "*.dll, *.dylib, *.so", "*.so.*, *.so.0, *.so.1"),
    (
        "source file",
        "#ffb022",
        "",
        "*.S, *.S_shipped, *.asm, *.c, *.cc, *.cmake, *.cpp, *.cxx, *.dts, *.dtsi, *.el, *.f,"
        " *.fuc3, *.fuc3.h, *.fuc5, *.fuc5.h, *.gir, *.h, *.h_shipped, *.hpp, *.java, *.msg, *.ph,"
        " *.php, *.po, *.pot, *.pro, *.pxd, *.py, *.pyi, *.pyx, *.rb, *.scm, Kbuild, Makefile",
    ),
    ("source file (generated)", "#ffcc22", "", "*.f90, *.mod.c, *.ui, moc_*.cpp, qrc_*.cpp, ui_*.h"),
    (
        "video",
        "#aa00ff",
        "*.asf, *.avi, *.divx, *.dv, *.flc, *.fli, *.flv, *.m2ts, *.m4v, *.mk3d, *.mkv, *.mov,"
        " *.mp2, *.mp4, *.mpeg, *.mpg, *.mts, *.ogm, *.ogv, *.rm, *.vdr, *.vob, *.webm, *.wmp,"
        " *.wmv",
        "",
    ),
)


def make_category(name: str, color: str, case_insensitive: str, case_sensitive: str) -> MimeCategory:
    category = MimeCategory(name, color)
    category.add_patterns(case_insensitive, case_sensitive=False)
    category.add_patterns(case_sensitive, case_sensitive=True)
    return category


def default_categories() -> list[MimeCategory]:
    """Return a fresh copy of the built-in category set (mandatory categories not included)."""
    return [make_category(*entry) for entry in DEFAULT_CATEGORIES]


def mandatory_category(name: str) -> MimeCategory:
    color, case_insensitive, case_sensitive = MANDATORY_CATEGORIES[name]
    return make_category(name, color, case_insensitive, case_sensitive)
