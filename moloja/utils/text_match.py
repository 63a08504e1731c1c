"""
Utilidades para comparação de texto (pesquisa e voz)
"""
import re
import unicodedata


def strip_accents(s: str) -> str:
    s = unicodedata.normalize('NFD', s)
    return ''.join(ch for ch in s if unicodedata.category(ch) != 'Mn')


def normalize_text(s: str) -> str:
    """Minúsculas, sem acentos, só letras/dígitos e espaços únicos"""
    if not s:
        return ""
    s = strip_accents(s.strip().lower())
    s = re.sub(r'[^a-z0-9\s]', ' ', s)
    return ' '.join(s.split())


def levenshtein(a: str, b: str) -> int:
    """Distância de Levenshtein entre duas strings"""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        curr = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            curr.append(min(
                curr[-1] + 1,
                prev[j] + 1,
                prev[j - 1] + cost,
            ))
        prev = curr
    return prev[-1]


def similarity(a: str, b: str) -> float:
    """Similaridade 0..1 baseada em Levenshtein"""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1 - levenshtein(a, b) / max_len


def word_similarity(text1: str, text2: str) -> float:
    """
    Similaridade por palavras (útil para produtos com vários termos).
    70% melhor correspondência por palavra, 30% texto inteiro.
    """
    words1 = [w for w in text1.split() if len(w) > 1]
    words2 = [w for w in text2.split() if len(w) > 1]

    if not words1 or not words2:
        return similarity(text1, text2)

    total = 0.0
    matches = 0
    for w1 in words1:
        best = max(similarity(w1, w2) for w2 in words2)
        if best > 0.6:
            total += best
            matches += 1

    word_score = total / matches if matches else 0
    return 0.7 * word_score + 0.3 * similarity(text1, text2)


def containment_score(query: str, target: str) -> float:
    """
    Score 0..1 para pesquisa livre:
    1.0 igual, até 0.9 quando um contém o outro, até 0.8 por palavras
    """
    qa = normalize_text(query)
    ta = normalize_text(target)
    if not qa or not ta:
        return 0.0
    if qa == ta:
        return 1.0
    if qa in ta or ta in qa:
        return min(len(qa), len(ta)) / max(len(qa), len(ta)) * 0.9

    q_words = [w for w in qa.split() if len(w) > 1]
    t_words = [w for w in ta.split() if len(w) > 1]
    if not q_words or not t_words:
        return 0.0

    matched = 0
    for qw in q_words:
        if any(qw == tw or qw in tw or tw in qw for tw in t_words):
            matched += 1
    return matched / max(len(q_words), len(t_words)) * 0.8
