"""
Language classification for etymology connections.

Maps language names and codes to normalized codes, resolves a code to its
family lineage, and answers whether two languages may be related. Lookups are
driven by a static nested family table plus a flat display-name dictionary.
"""

from typing import Dict, List, Optional, Set, Tuple, Union

from loguru import logger

from etymograph.config import PIE_LANGUAGE_CODE

UNKNOWN_FAMILY = "unknown"
UNDETERMINED = "und"

FamilyTree = Union[Dict[str, "FamilyTree"], List[str]]

# Nested family table: family -> subfamily -> ... -> [codes]
LANGUAGE_FAMILIES: Dict[str, FamilyTree] = {
    "indo-european": {
        "germanic": {
            "west-germanic": ["en", "ang", "enm", "sco", "de", "goh", "gmh", "nl", "odt", "dum",
                              "af", "fy", "ofs", "lb", "li", "nds", "osx", "gml", "yi", "pdc", "gsw"],
            "north-germanic": ["sv", "da", "no", "nn", "nb", "is", "fo", "non"],
            "east-germanic": ["got"],
            "proto-germanic": ["gem-pro", "gmw-pro", "gem"],
        },
        "romance": {
            "western-romance": ["es", "pt", "gl", "ca", "fr", "fro", "frm", "xno", "oc", "pro", "co", "roa-opt"],
            "eastern-romance": ["ro", "rup", "ruq", "ruo"],
            "southern-romance": ["it", "roa-oit", "nap", "scn", "vec", "lmo", "pms", "lij", "rm"],
            "sardinian": ["sc", "sdc", "sdn", "src"],
            "latin": ["la"],
            "proto-italic": ["itc-pro"],
        },
        "slavic": {
            "west-slavic": ["pl", "cs", "sk", "hsb", "dsb", "csb"],
            "east-slavic": ["ru", "uk", "be", "rue", "orv"],
            "south-slavic": ["bg", "mk", "sr", "hr", "bs", "sl", "cu", "sh"],
            "proto-slavic": ["sla-pro"],
        },
        "celtic": {
            "goidelic": ["ga", "gd", "gv", "sga", "mga"],
            "brythonic": ["cy", "br", "kw", "wlm"],
            "proto-celtic": ["cel-pro", "cel"],
        },
        "hellenic": ["el", "grc", "gmy", "pnt", "tsd", "grk-pro"],
        "indo-iranian": {
            "indo-aryan": ["hi", "ur", "bn", "pa", "gu", "mr", "ne", "si", "as", "or", "bho",
                           "mai", "awa", "mag", "sa", "pi", "pra", "rom"],
            "iranian": ["fa", "peo", "pal", "ae", "ps", "ku", "ckb", "bal", "os", "tg"],
        },
        "armenian": ["hy", "xcl"],
        "albanian": ["sq", "aln", "als"],
        "anatolian": ["hit", "luw", "xlu", "xly", "xld"],
        "tocharian": ["txb", "xto"],
        "baltic": ["lt", "lv", "ltg", "sgs", "prg"],
        "proto-indo-european": [PIE_LANGUAGE_CODE, "ine"],
    },
    "sino-tibetan": {
        "sinitic": {
            "chinese": ["zh", "cmn", "yue", "wuu", "hsn", "nan", "hak", "gan", "cdo", "ltc", "och"],
        },
        "tibeto-burman": {
            "tibetic": ["bo", "dz", "xct"],
            "burmese": ["my"],
            "lolo-burmese": ["ii", "lhu"],
            "himalayish": ["new", "lep"],
            "karen": ["ksw", "pwo"],
        },
    },
    "niger-congo": {
        "atlantic-congo": {
            "volta-congo": {
                "benue-congo": {
                    "bantu": ["sw", "zu", "xh", "st", "tn", "ts", "ss", "ve", "nr", "nd",
                              "lg", "rw", "rn", "ny", "sn", "ki", "kg", "ln"],
                    "yoruboid": ["yo"],
                    "igboid": ["ig"],
                    "cross-river": ["efi"],
                },
                "gur": ["mos", "dag"],
                "kwa": ["tw", "ak", "ee"],
            },
            "senegambian": ["ff", "wo", "srr"],
        },
        "mande": ["bm", "nqo", "man", "sus", "kpe"],
    },
    "afroasiatic": {
        "semitic": {
            "arabic": ["ar", "arb", "arz", "apc", "acm", "ary", "mt"],
            "hebrew": ["he", "hbo"],
            "aramaic": ["arc", "syc", "syr"],
            "ethiopic": ["am", "ti", "tig", "gez"],
            "akkadian": ["akk"],
            "canaanite": ["phn"],
        },
        "berber": ["ber", "tzm", "kab", "rif", "shi", "zgh"],
        "cushitic": ["so", "om", "aa", "sid"],
        "chadic": ["ha"],
        "egyptian": ["egy", "cop"],
        "omotic": ["wal"],
    },
    "austronesian": {
        "malayo-polynesian": {
            "western": ["ms", "id", "jv", "su", "mad", "bug", "min", "ban", "fil", "tl", "ceb", "mg"],
            "central": ["tet"],
            "oceanic": {
                "polynesian": ["haw", "sm", "to", "ty", "mi", "tvl", "rap"],
                "melanesian": ["fj", "bi"],
                "micronesian": ["ch", "pon", "kos", "yap", "mh", "gil"],
            },
        },
        "formosan": ["ami", "tay", "pwn", "bnn", "tao"],
    },
    "austroasiatic": {
        "mon-khmer": ["km", "vi", "mnw", "kha"],
        "munda": ["sat"],
    },
    "dravidian": {
        "southern": ["ta", "te", "kn", "ml", "tcy"],
        "central": ["gon", "kui"],
        "northern": ["brh", "kru"],
    },
    "japonic": {
        "japanese": ["ja", "ojp"],
        "ryukyuan": ["ryu", "rys", "ams"],
    },
    "koreanic": ["ko", "okm"],
    "turkic": {
        "oghuz": ["tr", "ota", "az", "tk", "gag"],
        "kipchak": ["kk", "ky", "tt", "ba", "krc", "kum", "crh"],
        "karluk": ["uz", "ug", "chg"],
        "oghur": ["cv"],
        "siberian-turkic": ["sah", "tyv"],
    },
    "mongolic": ["mn", "xal", "bua", "bxr"],
    "tungusic": ["mnc", "evn"],
    "uralic": {
        "finno-ugric": {
            "finnic": ["fi", "et", "vot", "izh", "krl", "olo", "liv", "vep", "vro"],
            "ugric": ["hu", "mns"],
            "permic": ["kv", "udm"],
            "mari": ["chm", "mhr"],
            "mordvinic": ["myv", "mdf"],
            "samic": ["se", "sma", "smj", "smn", "sms"],
        },
        "samoyedic": ["yrk", "sel"],
    },
    "na-dene": {
        "athabaskan": ["nv", "apa", "hup", "chp", "den", "dgr"],
        "tlingit": ["tli"],
    },
    "algic": ["cr", "oj", "mic", "abe", "pot", "del", "chy"],
    "iroquoian": ["moh", "ono", "cay", "see", "chr"],
    "siouan": ["lkt", "dak", "hid", "osa"],
    "muskogean": ["mus", "cho", "cic"],
    "uto-aztecan": ["nah", "hop", "ute", "lui"],
    "mayan": ["yua", "mam", "kek", "cak", "quc"],
    "oto-manguean": ["zap", "mix", "oto", "maz"],
    "quechuan": ["qu", "quz"],
    "aymaran": ["ay", "ayr"],
    "tupian": ["gn", "tpn"],
    "eskimo-aleut": {
        "eskimo": ["ik", "iu", "kl", "esu"],
        "aleut": ["ale"],
    },
    "kartvelian": ["ka", "xmf", "lzz", "sva"],
    "northwest-caucasian": ["ab", "ady", "kbd", "ubx"],
    "northeast-caucasian": {
        "nakh": ["ce", "inh", "bbl"],
        "avar-andic": ["av"],
        "lezgic": ["lez", "tab"],
        "dargin": ["dar"],
    },
    "nilo-saharan": {
        "nilotic": ["luo", "mas", "din", "nus"],
        "saharan": ["kr", "zag"],
        "songhay": ["son", "ses", "dje"],
    },
    "khoe-kwadi": ["naq"],
    "isolates": ["eu", "ket", "niv", "bsk", "zun", "hai", "kut", "sux", "elx", "ain"],
    "constructed": {
        "international": ["eo", "ia", "ie", "io", "nov", "vo"],
        "artistic": ["tlh", "jbo"],
    },
    "creole": {
        "english-based": ["tpi", "pis", "jam", "srn", "pcm"],
        "french-based": ["ht", "gcf", "lou", "mfe", "crs"],
        "portuguese-based": ["pap", "kea"],
    },
}

# Display names by code
LANGUAGE_NAMES: Dict[str, str] = {
    "aa": "Afar", "ab": "Abkhazian", "ady": "Adyghe", "ae": "Avestan", "af": "Afrikaans",
    "ak": "Akan", "akk": "Akkadian", "am": "Amharic", "ang": "Old English", "ar": "Arabic",
    "arc": "Aramaic", "as": "Assamese", "av": "Avar", "ay": "Aymara", "az": "Azerbaijani",
    "ba": "Bashkir", "bal": "Baluchi", "be": "Belarusian", "bg": "Bulgarian", "bho": "Bhojpuri",
    "bi": "Bislama", "bm": "Bambara", "bn": "Bengali", "bo": "Tibetan", "br": "Breton",
    "bs": "Bosnian", "ca": "Catalan", "ce": "Chechen", "ceb": "Cebuano", "ch": "Chamorro",
    "chr": "Cherokee", "ckb": "Sorani Kurdish", "co": "Corsican", "cop": "Coptic", "cr": "Cree",
    "crh": "Crimean Tatar", "cs": "Czech", "csb": "Kashubian", "cu": "Old Church Slavonic",
    "cv": "Chuvash", "cy": "Welsh", "da": "Danish", "de": "German", "dsb": "Lower Sorbian",
    "dum": "Middle Dutch", "dz": "Dzongkha", "ee": "Ewe", "egy": "Ancient Egyptian",
    "el": "Greek", "elx": "Elamite", "en": "English", "enm": "Middle English", "eo": "Esperanto",
    "es": "Spanish", "et": "Estonian", "eu": "Basque", "fa": "Persian", "ff": "Fulah",
    "fi": "Finnish", "fil": "Filipino", "fj": "Fijian", "fo": "Faroese", "fr": "French",
    "frm": "Middle French", "fro": "Old French", "fy": "West Frisian", "ga": "Irish",
    "gd": "Scottish Gaelic", "gez": "Geez", "gl": "Galician", "gmh": "Middle High German",
    "gml": "Middle Low German", "gn": "Guarani", "goh": "Old High German", "got": "Gothic",
    "grc": "Ancient Greek", "gsw": "Swiss German", "gu": "Gujarati", "gv": "Manx",
    "ha": "Hausa", "haw": "Hawaiian", "he": "Hebrew", "hbo": "Biblical Hebrew", "hi": "Hindi",
    "hit": "Hittite", "hr": "Croatian", "hsb": "Upper Sorbian", "ht": "Haitian Creole",
    "hu": "Hungarian", "hy": "Armenian", "ia": "Interlingua", "id": "Indonesian", "ig": "Igbo",
    "ik": "Inupiaq", "is": "Icelandic", "it": "Italian", "iu": "Inuktitut", "ja": "Japanese",
    "jv": "Javanese", "ka": "Georgian", "kk": "Kazakh", "kl": "Kalaallisut", "km": "Khmer",
    "kn": "Kannada", "ko": "Korean", "ku": "Kurdish", "kv": "Komi", "kw": "Cornish",
    "ky": "Kyrgyz", "la": "Latin", "lb": "Luxembourgish", "lg": "Ganda", "li": "Limburgish",
    "ln": "Lingala", "lt": "Lithuanian", "lv": "Latvian", "mg": "Malagasy", "mga": "Middle Irish",
    "mi": "Maori", "mk": "Macedonian", "ml": "Malayalam", "mn": "Mongolian", "mr": "Marathi",
    "ms": "Malay", "mt": "Maltese", "my": "Burmese", "nah": "Nahuatl", "nb": "Norwegian Bokmål",
    "nds": "Low German", "ne": "Nepali", "nl": "Dutch", "nn": "Norwegian Nynorsk",
    "no": "Norwegian", "non": "Old Norse", "nv": "Navajo", "ny": "Nyanja", "oc": "Occitan",
    "odt": "Old Dutch", "ofs": "Old Frisian", "oj": "Ojibwa", "om": "Oromo", "or": "Odia",
    "os": "Ossetic", "osx": "Old Saxon", "ota": "Ottoman Turkish", "pa": "Punjabi",
    "pal": "Middle Persian", "peo": "Old Persian", "phn": "Phoenician", "pi": "Pali",
    "pl": "Polish", "pra": "Prakrit", "pro": "Old Occitan", "ps": "Pashto", "pt": "Portuguese",
    "qu": "Quechua", "rm": "Romansh", "ro": "Romanian", "rom": "Romani", "ru": "Russian",
    "rw": "Kinyarwanda", "sa": "Sanskrit", "sc": "Sardinian", "scn": "Sicilian", "sco": "Scots",
    "se": "Northern Sami", "sga": "Old Irish", "sh": "Serbo-Croatian", "si": "Sinhala",
    "sk": "Slovak", "sl": "Slovenian", "sm": "Samoan", "sn": "Shona", "so": "Somali",
    "sq": "Albanian", "sr": "Serbian", "st": "Southern Sotho", "su": "Sundanese",
    "sux": "Sumerian", "sv": "Swedish", "sw": "Swahili", "syc": "Classical Syriac",
    "ta": "Tamil", "te": "Telugu", "tg": "Tajik", "th": "Thai", "ti": "Tigrinya",
    "tk": "Turkmen", "tl": "Tagalog", "tlh": "Klingon", "tn": "Tswana", "to": "Tongan",
    "tpi": "Tok Pisin", "tr": "Turkish", "tt": "Tatar", "ty": "Tahitian", "ug": "Uyghur",
    "uk": "Ukrainian", "ur": "Urdu", "uz": "Uzbek", "vi": "Vietnamese", "wlm": "Middle Welsh",
    "wo": "Wolof", "xcl": "Classical Armenian", "xh": "Xhosa", "xno": "Anglo-Norman",
    "yi": "Yiddish", "yo": "Yoruba", "yue": "Cantonese", "zh": "Chinese", "zu": "Zulu",
    "ine": "Indo-European", "gem": "Germanic", "cel": "Celtic",
    PIE_LANGUAGE_CODE: "Proto-Indo-European", "gem-pro": "Proto-Germanic",
    "gmw-pro": "Proto-West Germanic", "itc-pro": "Proto-Italic", "cel-pro": "Proto-Celtic",
    "sla-pro": "Proto-Slavic", "grk-pro": "Proto-Hellenic",
    "roa-opt": "Old Portuguese", "roa-oit": "Old Italian",
    UNDETERMINED: "Undetermined",
}

# Non-canonical spellings of codes: ISO 639-2 variants, wiki shorthands, abbreviations
LANGUAGE_ALIASES: Dict[str, str] = {
    "eng": "en", "ger": "de", "deu": "de", "fre": "fr", "fra": "fr", "spa": "es",
    "ita": "it", "por": "pt", "dut": "nl", "nld": "nl", "lat": "la", "gr": "el",
    "gre": "el", "ell": "el", "rus": "ru", "pol": "pl", "cze": "cs", "ces": "cs",
    "swe": "sv", "nor": "no", "isl": "is", "ice": "is", "fin": "fi", "hun": "hu",
    "tur": "tr", "ara": "ar", "heb": "he", "hin": "hi", "san": "sa", "chi": "zh",
    "zho": "zh", "jpn": "ja", "kor": "ko", "cat": "ca", "rum": "ro", "ron": "ro",
    "glg": "gl", "gle": "ga", "gla": "gd", "wel": "cy", "cym": "cy", "bre": "br",
    "cor": "kw", "ukr": "uk", "bel": "be", "bul": "bg", "mac": "mk", "srp": "sr",
    "hrv": "hr", "bos": "bs", "slo": "sk", "slk": "sk", "slv": "sl", "baq": "eu",
    "eus": "eu", "mlt": "mt", "alb": "sq", "sqi": "sq", "lav": "lv", "lit": "lt",
    "est": "et", "dan": "da", "per": "fa", "fas": "fa",
    "vl": "la", "ll": "la", "la-vul": "la", "la-lat": "la", "la-med": "la", "la-new": "la",
    "pie": PIE_LANGUAGE_CODE, "ine-pie": PIE_LANGUAGE_CODE,
    "undetermined": UNDETERMINED, "unknown": UNDETERMINED,
}

# Prose language names that do not match a display name exactly
NAME_ALIASES: Dict[str, str] = {
    "greek": "grc",
    "old german": "goh",
    "germanic": "gem",
    "frisian": "fy",
    "saxon": "nds",
    "norse": "non",
    "slavonic": "cu",
    "church slavonic": "cu",
    "gaelic": "gd",
    "proto-west-germanic": "gmw-pro",
    "pie": PIE_LANGUAGE_CODE,
    "modern greek": "el",
    "medieval latin": "la",
    "late latin": "la",
    "vulgar latin": "la",
    "classical latin": "la",
    "modern latin": "la",
}


def _index_families(tree: FamilyTree, path: Tuple[str, ...], index: Dict[str, List[str]]) -> None:
    """Record the coarsest-first path for every code; the first occurrence wins."""
    if isinstance(tree, list):
        for code in tree:
            if code not in index:
                index[code] = list(path)
        return
    for name, subtree in tree.items():
        _index_families(subtree, path + (name,), index)


class LanguageClassifier:
    """
    Static language lookup service.

    Normalizes codes and names, resolves family lineages and decides whether
    two languages can share a relationship.
    """

    def __init__(self):
        self._paths: Dict[str, List[str]] = {}
        _index_families(LANGUAGE_FAMILIES, (), self._paths)

        self._codes: Set[str] = set(self._paths) | set(LANGUAGE_NAMES)
        self._names_to_codes: Dict[str, str] = {}
        for code, name in LANGUAGE_NAMES.items():
            self._names_to_codes.setdefault(name.lower(), code)
        self._names_to_codes.update(NAME_ALIASES)

        logger.debug(f"Language classifier indexed {len(self._codes)} languages")

    def normalize(self, name_or_code: Optional[str]) -> str:
        """
        Map a language name or code to a normalized code.

        Unknown inputs are returned lowercased and stripped, so the mapping is
        idempotent.
        """
        if not name_or_code or not name_or_code.strip():
            return UNDETERMINED

        cleaned = " ".join(name_or_code.strip().lower().split()).replace("_", "-")
        if cleaned in self._codes:
            return cleaned
        if cleaned in LANGUAGE_ALIASES:
            return LANGUAGE_ALIASES[cleaned]
        if cleaned in self._names_to_codes:
            return self._names_to_codes[cleaned]
        return cleaned

    def normalize_for_word(self, text: str, name_or_code: Optional[str]) -> str:
        """Normalize a language for a specific word; ``*``-forms are always PIE."""
        if text and text.strip().startswith("*"):
            return PIE_LANGUAGE_CODE
        return self.normalize(name_or_code)

    def code_from_name(self, language_name: str) -> str:
        """
        Map a prose language name (e.g. "Old Frisian") to a code.

        Falls back to the first two letters of the name when nothing matches.
        """
        if not language_name or not language_name.strip():
            return UNDETERMINED
        code = self.normalize(language_name)
        if code in self._codes:
            return code
        fallback = language_name.strip().lower()[:2]
        logger.debug(f"No language code for '{language_name}', falling back to '{fallback}'")
        return fallback

    def family_path(self, code: Optional[str]) -> List[str]:
        """Return family tags from finest to coarsest, or ["unknown"]."""
        path = self._paths.get(self.normalize(code))
        if not path:
            return [UNKNOWN_FAMILY]
        return list(reversed(path))

    def is_reconstructed(self, code: Optional[str]) -> bool:
        return "pro" in self.normalize(code)

    def related(self, code_a: str, code_b: str, strict: bool = False) -> bool:
        """
        True when the two family paths share any tag.

        Unknown lineages are treated permissively unless ``strict`` is set.
        """
        path_a = self.family_path(code_a)
        path_b = self.family_path(code_b)
        if UNKNOWN_FAMILY in path_a or UNKNOWN_FAMILY in path_b:
            return not strict
        return bool(set(path_a) & set(path_b))

    def compatible(self, code_a: str, code_b: str, relation_type: Optional[str] = None) -> bool:
        """Whether a relationship of ``relation_type`` may link the two languages."""
        if self.is_reconstructed(code_a) or self.is_reconstructed(code_b):
            return True
        if relation_type in ("borrowing", "loan"):
            return True
        return self.related(code_a, code_b)

    def shared_family(self, code_a: str, code_b: str) -> Optional[str]:
        """Deepest family tag shared by both languages, if any."""
        path_b = set(self.family_path(code_b))
        for tag in self.family_path(code_a):
            if tag != UNKNOWN_FAMILY and tag in path_b:
                return tag
        return None

    def in_family(self, code: str, family: str) -> bool:
        return family in self.family_path(code)

    def display_name(self, code: Optional[str]) -> str:
        normalized = self.normalize(code)
        return LANGUAGE_NAMES.get(normalized, normalized.upper())

    def is_known_language_name(self, name: str) -> bool:
        return name.strip().lower() in self._names_to_codes
