from typing import Optional
import re

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


def validate_barcode(barcode: Optional[str]) -> bool:
    """Code-barres EAN/UPC (chiffres, tirets) ou contenu QR imprimable"""
    if not barcode:
        return True

    return barcode.isprintable() and len(barcode) <= 512


def validate_hex_color(color: Optional[str]) -> bool:
    if not color:
        return True

    return bool(HEX_COLOR_RE.match(color))


def sanitize_search_query(query: str) -> str:
    return re.sub(r"[^\w\s\-]", "", query).strip()
