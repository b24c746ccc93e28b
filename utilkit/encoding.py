"""Character encoding detection."""

from __future__ import annotations

from enum import IntEnum

import chardet


class EncodingType(IntEnum):
    """Encodings that detection can report."""

    UNKNOWN = 0
    UTF8 = 1
    UTF16BE = 2
    UTF16LE = 3
    UTF32BE = 4
    UTF32LE = 5
    ISO88591 = 6
    ISO88592 = 7
    ISO88595 = 8
    ISO88596 = 9
    ISO88597 = 10
    ISO88598 = 11
    WINDOWS1251 = 12
    WINDOWS1256 = 13
    KOI8R = 14
    SHIFT_JIS = 15
    GB18030 = 16
    EUCJP = 17
    EUCKR = 18
    BIG5 = 19
    ISO2022JP = 20
    ISO2022KR = 21
    ISO2022CN = 22
    IBM424_RTL = 23
    IBM424_LTR = 24
    IBM420_RTL = 25
    IBM420_LTR = 26


_CHARSETS = {
    "utf-8": EncodingType.UTF8,
    "utf-8-sig": EncodingType.UTF8,
    "ascii": EncodingType.UTF8,
    "utf-16be": EncodingType.UTF16BE,
    "utf-16le": EncodingType.UTF16LE,
    "utf-32be": EncodingType.UTF32BE,
    "utf-32le": EncodingType.UTF32LE,
    "iso-8859-1": EncodingType.ISO88591,
    "iso-8859-2": EncodingType.ISO88592,
    "iso-8859-5": EncodingType.ISO88595,
    "iso-8859-6": EncodingType.ISO88596,
    "iso-8859-7": EncodingType.ISO88597,
    "iso-8859-8": EncodingType.ISO88598,
    "windows-1251": EncodingType.WINDOWS1251,
    "windows-1256": EncodingType.WINDOWS1256,
    "koi8-r": EncodingType.KOI8R,
    "shift_jis": EncodingType.SHIFT_JIS,
    "gb18030": EncodingType.GB18030,
    "gb2312": EncodingType.GB18030,
    "euc-jp": EncodingType.EUCJP,
    "euc-kr": EncodingType.EUCKR,
    "big5": EncodingType.BIG5,
    "iso-2022-jp": EncodingType.ISO2022JP,
    "iso-2022-kr": EncodingType.ISO2022KR,
    "iso-2022-cn": EncodingType.ISO2022CN,
    "ibm424_rtl": EncodingType.IBM424_RTL,
    "ibm424_ltr": EncodingType.IBM424_LTR,
    "ibm420_rtl": EncodingType.IBM420_RTL,
    "ibm420_ltr": EncodingType.IBM420_LTR,
}


def _from_bom(name: str, data: bytes) -> EncodingType:
    if name == "utf-16":
        return EncodingType.UTF16BE if data.startswith(b"\xfe\xff") else EncodingType.UTF16LE
    if data.startswith(b"\x00\x00\xfe\xff"):
        return EncodingType.UTF32BE
    return EncodingType.UTF32LE


def detect_encoding_type(data: str | bytes | bytearray) -> EncodingType:
    """Detect the most likely encoding of text or raw bytes.

    Strings are examined as their UTF-8 bytes. Raises TypeError for other types.
    """
    if isinstance(data, str):
        raw = data.encode("utf-8")
    elif isinstance(data, (bytes, bytearray)):
        raw = bytes(data)
    else:
        raise TypeError("unsupported type")

    charset = chardet.detect(raw).get("encoding")
    if not charset:
        return EncodingType.UNKNOWN
    name = charset.lower()
    if name in ("utf-16", "utf-32"):
        return _from_bom(name, raw)
    return _CHARSETS.get(name, EncodingType.UNKNOWN)