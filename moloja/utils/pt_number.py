"""
Utilidade: Normalização de números em PT (foco em milhares)

Regras:
- Valores de milhar com ponto/vírgula viram inteiros sem separadores
  (1.500 -> 1500, 23,500 -> 23500, 1.500,00 -> 1500)
- Números por extenso com "mil" viram dígitos
  ("dois mil e quinhentos" -> 2500, "vinte e três mil" -> 23000)
- Abaixo de 1000 os decimais continuam válidos (999.99 -> 999.99)
"""
import math
import re
import unicodedata

UNITS = {
    "zero": 0,
    "um": 1, "uma": 1,
    "dois": 2, "duas": 2,
    "tres": 3,
    "quatro": 4,
    "cinco": 5,
    "seis": 6,
    "sete": 7,
    "oito": 8,
    "nove": 9,
}

TEENS = {
    "dez": 10,
    "onze": 11,
    "doze": 12,
    "treze": 13,
    "catorze": 14, "quatorze": 14,
    "quinze": 15,
    "dezesseis": 16, "dezasseis": 16,
    "dezessete": 17, "dezassete": 17,
    "dezoito": 18,
    "dezenove": 19, "dezanove": 19,
}

TENS = {
    "vinte": 20,
    "trinta": 30,
    "quarenta": 40,
    "cinquenta": 50,
    "sessenta": 60,
    "setenta": 70,
    "oitenta": 80,
    "noventa": 90,
}

HUNDREDS = {
    "cem": 100,
    "cento": 100,  # cento e vinte
    "duzentos": 200, "duzentas": 200,
    "trezentos": 300, "trezentas": 300,
    "quatrocentos": 400, "quatrocentas": 400,
    "quinhentos": 500, "quinhentas": 500,
    "seiscentos": 600, "seiscentas": 600,
    "setecentos": 700, "setecentas": 700,
    "oitocentos": 800, "oitocentas": 800,
    "novecentos": 900, "novecentas": 900,
}

NUMBER_WORDS = {**UNITS, **TEENS, **TENS, **HUNDREDS}

CURRENCY_WORDS = {"kz", "kzs", "kwanza", "kwanzas", "aoa", "mt", "metical", "meticais", "r$", "real", "reais"}

THOUSANDS_GROUPING_RE = re.compile(r"^\d{1,3}([., ]\d{3})+$")
NUMERIC_TOKEN_RE = re.compile(r"\d[\d.,]*\d|\d")
TRAILING_PUNCTUATION = ",.;:!?"


def normalize_token(token: str) -> str:
    """Minúsculas, sem acentos e sem pontuação final"""
    token = unicodedata.normalize("NFD", token)
    token = "".join(ch for ch in token if unicodedata.category(ch) != "Mn")
    return token.lower().rstrip(TRAILING_PUNCTUATION)


def parse_under_thousand(tokens):
    """Soma palavras numéricas (< 1000); para no primeiro token desconhecido"""
    total = 0
    i = 0
    while i < len(tokens):
        tk = normalize_token(tokens[i])
        if tk == "e":
            i += 1
            continue
        if tk in HUNDREDS:
            total += HUNDREDS[tk]
        elif tk in TEENS:
            total += TEENS[tk]
        elif tk in TENS:
            total += TENS[tk]
            # "vinte e três"
            if i + 2 < len(tokens) and normalize_token(tokens[i + 1]) == "e":
                next_unit = normalize_token(tokens[i + 2])
                if next_unit in UNITS:
                    total += UNITS[next_unit]
                    i += 3
                    continue
        elif tk in UNITS:
            total += UNITS[tk]
        else:
            break
        i += 1
    return total


def _is_number_word(token: str) -> bool:
    return normalize_token(token) in NUMBER_WORDS


def _is_currency_word(token: str) -> bool:
    return normalize_token(token) in CURRENCY_WORDS


def find_words_thousands(text: str):
    """
    Procura expressões por extenso com "mil".

    Returns:
        (valor, início, fim) da melhor expressão no texto, ou None
    """
    matches = list(re.finditer(r"\S+", text))
    tokens = [m.group(0) for m in matches]
    best = None

    for i, token in enumerate(tokens):
        if normalize_token(token) != "mil":
            continue

        # Multiplicador: palavras numéricas imediatamente antes de "mil" (até 4);
        # "e" e "de" só contam entre palavras numéricas
        start = i
        while start > 0 and i - start < 4:
            previous = normalize_token(tokens[start - 1])
            if _is_number_word(tokens[start - 1]) or (
                previous in ("e", "de") and start - 1 > 0 and _is_number_word(tokens[start - 2])
            ):
                start -= 1
            else:
                break
        left_tokens = [t for t in tokens[start:i] if normalize_token(t) != "de"]
        if left_tokens:
            left_value = parse_under_thousand(left_tokens)
        elif i > 0 and re.fullmatch(r"\d{1,3}", tokens[i - 1]):
            # "15 mil"
            start = i - 1
            left_value = int(tokens[i - 1])
        else:
            left_value = 1  # "mil" sozinho = 1000

        # Parte direita: até 5 tokens numéricos, "e" ou moeda
        end = i
        while end + 1 < len(tokens) and end - i < 5:
            following = tokens[end + 1]
            if normalize_token(following) == "e" or _is_currency_word(following) or _is_number_word(following):
                end += 1
            else:
                break
        # "e" e moeda no fim ficam fora da expressão
        while end > i and (normalize_token(tokens[end]) == "e" or _is_currency_word(tokens[end])):
            end -= 1
        right_value = parse_under_thousand([t for t in tokens[i + 1:end + 1] if not _is_currency_word(t)])

        total = left_value * 1000 + right_value
        if total >= 1000 and (best is None or total > best[0]):
            last = tokens[end]
            span_end = matches[end].start() + len(last.rstrip(TRAILING_PUNCTUATION))
            best = (total, matches[start].start(), span_end)

    return best


def parse_words_thousands(text: str):
    """Valor da melhor expressão com "mil" no texto, ou None"""
    found = find_words_thousands(text)
    return found[0] if found else None


def _leading_int(value: str) -> float:
    """Equivalente a parseInt: dígitos iniciais ou NaN"""
    match = re.match(r"\d+", value)
    return int(match.group(0)) if match else math.nan


def parse_pt_number_flexible(token: str) -> float:
    """
    Converte um token numérico para número respeitando PT e milhares.

    Devolve NaN quando o token não é numérico; quem chama deve então
    manter o texto original.
    """
    raw = (token or "").strip()
    if not raw:
        return math.nan

    # Palavras ficam para normalize_thousands_in_text
    if re.search(r"[a-zA-Z]", raw):
        return math.nan

    no_spaces = re.sub(r"\s", "", raw)

    if THOUSANDS_GROUPING_RE.match(no_spaces):
        return int(re.sub(r"[., ]", "", no_spaces))

    has_comma = "," in no_spaces
    has_dot = "." in no_spaces

    # Padrão PT: 1.234,56
    if has_comma and has_dot:
        last_comma = no_spaces.rfind(",")
        int_part = no_spaces[:last_comma].replace(".", "")
        dec_digits = re.sub(r"\D", "", no_spaces[last_comma + 1:])
        int_value = _leading_int(int_part or "0")
        if math.isnan(int_value) or int_value >= 1000:
            return int_value
        if not dec_digits:
            return int_value
        return int_value + int(dec_digits) / (10 ** len(dec_digits))

    if has_comma:
        if re.search(r",\d{3}(?:,\d{3})*$", no_spaces):
            return _leading_int(no_spaces.replace(",", ""))
        if re.search(r",\d{1,2}$", no_spaces):
            int_part, dec_part = no_spaces.rsplit(",", 1)
            int_value = _leading_int(int_part.replace(",", ""))
            if math.isnan(int_value) or int_value >= 1000:
                return int_value
            return int_value + float("0." + dec_part)
        return _leading_int(no_spaces.replace(",", ""))

    if has_dot:
        if re.search(r"\.\d{3}(?:\.\d{3})*$", no_spaces):
            return _leading_int(no_spaces.replace(".", ""))
        if re.search(r"\.\d{1,2}$", no_spaces):
            int_part, dec_part = no_spaces.rsplit(".", 1)
            int_value = _leading_int(int_part.replace(".", ""))
            if math.isnan(int_value) or int_value >= 1000:
                return int_value
            return int_value + float("0." + dec_part)
        return _leading_int(no_spaces.replace(".", ""))

    if re.fullmatch(r"\d+", no_spaces):
        return int(no_spaces)

    return math.nan


def normalize_thousands_in_text(text: str) -> str:
    """
    Normaliza só os milhares dentro de um texto.

    1) substitui a expressão por extenso com "mil" pelo seu valor
    2) reescreve tokens numéricos >= 1000 sem separadores
    """
    if not text:
        return text

    out = text
    found = find_words_thousands(out)
    if found:
        value, start, end = found
        out = out[:start] + str(value) + out[end:]

    def _replace(match):
        number = parse_pt_number_flexible(match.group(0))
        if not math.isnan(number) and number >= 1000:
            return str(math.trunc(number))
        return match.group(0)

    return NUMERIC_TOKEN_RE.sub(_replace, out)
