"""
DirWatch Text File Extensions.

Extensions (without the leading dot) treated as text files.
Requires Python 3.11+.
"""

TEXT_FILE_EXTS: tuple[str, ...] = (
    # Web-related files
    "asp",
    "aspx",
    "css",
    "ctp",
    "hta",
    "htm",
    "html",
    "js",
    "less",
    "php",
    "sass",
    "scss",
    "shtml",
    "xhtml",
    # Android/Java/Kotlin
    "classpath",
    "java",
    "kt",
    "prefs",
    "project",
    "properties",
    # C/C++
    "c",
    "cc",
    "cpp",
    "cxx",
    "fd",
    "h",
    "hc",
    "hh",
    "hpp",
    "hxx",
    "odl",
    "plg",
    "workspace",
    # C#
    "cs",
    "user",
    "xsd",
    "xsx",
    # Git
    "gitignore",
    # Visual Basic
    "bas",
    "cls",
    "ctl",
    "dep",
    "frm",
    "pdm",
    # Visual Studio and other project files
    "cbp",
    "clw",
    "csproj",
    "def",
    "dsp",
    "dsw",
    "layout",
    "manifest",
    "rc",
    "rc2",
    "resx",
    "sln",
    "vbp",
    "vbw",
    "vcp",  # embedded Visual Tools project
    "vcproj",
    "vcw",  # embedded Visual Tools workspace
    "vcxproj",
    # Help source
    "hhc",
    "hhk",
    "hhp",
    # Markup
    "json",
    "jsonp",
    "rgon",
    "svg",
    "xaml",
    "xml",
    "yml",
    # Miscellaneous
    "asm",
    "asn",
    "bat",
    "cfg",
    "csv",
    "dpr",  # Delphi project
    "go",
    "hs",
    "clj",
    "cljs",
    "jcl",
    "log",
    "mak",
    "md",
    "meta",
    "pas",
    "ph",
    "pl",
    "pm",
    "py",
    "rb",
    "reg",
    "rs",
    "rules",
    "settings",
    "sh",
    "sql",
    "tlh",  # generated type library header
    "tli",  # generated type library wrappers
    "ts",
    "txt",
    "xs",  # Perl XS interface
)
