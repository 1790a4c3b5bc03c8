import math

import numpy as np
import pandas as pd
from unidecode import unidecode


def norm_header(s) -> str:
    s = "" if s is None else str(s)
    s = unidecode(s.strip()).lower()
    for ch in [" ", "-", "(", ")", "/", "\\", "[", "]", ".", ",", ";", ":"]:
        s = s.replace(ch, "_")
    while "__" in s:
        s = s.replace("__", "_")
    return s.strip("_")


def vazio(x) -> bool:
    if x is None:
        return True
    try:
        return bool(pd.isna(x))
    except (TypeError, ValueError):
        return False


def br_to_float(x):
    """Converte '9.9', '9,90', 'R$ 1.234,56' ou números em float (NaN se inválido)."""
    if vazio(x): return np.nan
    if isinstance(x, (bool, np.bool_)): return float(x)
    if isinstance(x, (int, float, np.integer, np.floating)): return float(x)
    s = str(x).strip()
    if s == "": return np.nan
    s = s.replace("\u00a0", " ").replace("R$", "").replace(" ", "")
    if "," in s:
        # formato brasileiro: ponto é milhar, vírgula é decimal
        s = s.replace(".", "").replace(",", ".")
    try:
        return float(s)
    except ValueError:
        return np.nan


def para_numero(x) -> float:
    v = br_to_float(x)
    return float(v) if math.isfinite(v) else 0.0


def para_inteiro(x) -> int:
    return int(para_numero(x))


def para_texto(x) -> str:
    """Texto aparado; 100.0 vira '100' (códigos lidos como número pelo Excel)."""
    if vazio(x): return ""
    if isinstance(x, (float, np.floating)) and math.isfinite(x) and float(x).is_integer():
        return str(int(x))
    return str(x).strip()


def somente_digitos(texto) -> str:
    return "".join(ch for ch in str(texto or "") if ch.isdigit())


# Formatadores para exibição
def format_br_float(x):
    if vazio(x): return '-'
    return f"{x:,.2f}".replace('.', 'TEMP').replace(',', '.').replace('TEMP', ',')


def format_br_currency(x):
    if vazio(x): return '-'
    return f"R$ {format_br_float(x)}"


def format_br_int(x):
    if vazio(x): return '-'
    return f"{x:,.0f}".replace('.', 'TEMP').replace(',', '.').replace('TEMP', ',')
