"""
Language Pattern Table

Static per-language lexicon used to turn spoken arithmetic into symbols:
number words, operator phrases, phrase templates, filler words, fraction
words and large-number magnitudes.

Only the languages listed in SUPPORTED_LANGUAGES are known; every lookup
resolves to one of them, falling back to DEFAULT_LANGUAGE.

Usage:
    from services.math.languages import lookup

    patterns = lookup("es-MX")
    patterns.numbers["veinte"]   # "20"
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple


DEFAULT_LANGUAGE = "en"

# Number capture used by the phrase templates
NUM = r"(\d+(?:[.,]\d+)?)"


# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class ParenthesesPhrases:
    """Spoken forms of the two parentheses."""
    open: Tuple[str, ...] = ()
    close: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OperationPhrases:
    """Surface phrases for each operator, one tuple per operator."""
    addition: Tuple[str, ...] = ()
    subtraction: Tuple[str, ...] = ()
    multiplication: Tuple[str, ...] = ()
    division: Tuple[str, ...] = ()
    percentage: Tuple[str, ...] = ()
    percent_of: Tuple[str, ...] = ()
    power: Tuple[str, ...] = ()
    sqrt: Tuple[str, ...] = ()
    parentheses: ParenthesesPhrases = field(default_factory=ParenthesesPhrases)
    decimal: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SpecificPhrases:
    """
    Regex templates for whole-phrase operations.

    add_to and subtract_from capture (A, B); multiply_by and divide_by
    capture (verb, A, B).
    """
    add_to: Optional[str] = None
    subtract_from: Optional[str] = None
    multiply_by: Optional[str] = None
    divide_by: Optional[str] = None


@dataclass(frozen=True)
class LanguagePatterns:
    """Complete lexicon for one language."""
    code: str
    name: str
    numbers: Mapping[str, str]
    operations: OperationPhrases
    specific_phrases: SpecificPhrases
    filler_words: Tuple[str, ...] = ()
    fraction_words: Mapping[str, int] = field(default_factory=dict)
    large_numbers: Mapping[str, int] = field(default_factory=dict)
    percent_of_that: Tuple[str, ...] = ()


# =============================================================================
# Number Word Builders
# =============================================================================

def _frozen(mapping: Dict) -> Mapping:
    return MappingProxyType(dict(mapping))


def _tens_combos(
    tens: Mapping[str, int],
    units: Mapping[str, int],
    joiners: Iterable[str],
) -> Dict[str, str]:
    """Build "<tens><joiner><unit>" words, e.g. "twenty five" -> "25"."""
    words = {}
    for ten_word, ten_value in tens.items():
        for unit_word, unit_value in units.items():
            for joiner in joiners:
                words[f"{ten_word}{joiner}{unit_word}"] = str(ten_value + unit_value)
    return words


def _english_numbers() -> Dict[str, str]:
    units = {
        "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
        "six": 6, "seven": 7, "eight": 8, "nine": 9,
    }
    teens = {
        "zero": 0, "ten": 10, "eleven": 11, "twelve": 12, "thirteen": 13,
        "fourteen": 14, "fifteen": 15, "sixteen": 16, "seventeen": 17,
        "eighteen": 18, "nineteen": 19,
    }
    tens = {
        "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
        "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
    }
    words = {w: str(v) for w, v in {**units, **teens, **tens}.items()}
    # "twenty-five" arrives here de-hyphenated as "twentyfive"
    words.update(_tens_combos(tens, units, (" ", "")))
    words.update({
        "a hundred": "100", "one hundred": "100",
        "a thousand": "1000", "one thousand": "1000",
        "a dozen": "12",
    })
    return words


def _spanish_numbers() -> Dict[str, str]:
    units = {
        "uno": 1, "dos": 2, "tres": 3, "cuatro": 4, "cinco": 5,
        "seis": 6, "siete": 7, "ocho": 8, "nueve": 9,
    }
    words = {w: str(v) for w, v in units.items()}
    words.update({
        "cero": "0", "un": "1", "una": "1", "diez": "10", "once": "11",
        "doce": "12", "trece": "13", "catorce": "14", "quince": "15",
        "dieciséis": "16", "dieciseis": "16", "diecisiete": "17",
        "dieciocho": "18", "diecinueve": "19", "veinte": "20",
        "veintiuno": "21", "veintiún": "21", "veintidós": "22", "veintidos": "22",
        "veintitrés": "23", "veintitres": "23", "veinticuatro": "24",
        "veinticinco": "25", "veintiséis": "26", "veintiseis": "26",
        "veintisiete": "27", "veintiocho": "28", "veintinueve": "29",
        "cien": "100", "ciento": "100",
    })
    tens = {
        "treinta": 30, "cuarenta": 40, "cincuenta": 50, "sesenta": 60,
        "setenta": 70, "ochenta": 80, "noventa": 90,
    }
    words.update({w: str(v) for w, v in tens.items()})
    words.update(_tens_combos(tens, units, (" y ",)))
    return words


def _french_numbers() -> Dict[str, str]:
    units = {
        "deux": 2, "trois": 3, "quatre": 4, "cinq": 5,
        "six": 6, "sept": 7, "huit": 8, "neuf": 9,
    }
    words = {w: str(v) for w, v in units.items()}
    words.update({
        "zéro": "0", "zero": "0", "un": "1", "une": "1", "dix": "10",
        "onze": "11", "douze": "12", "treize": "13", "quatorze": "14",
        "quinze": "15", "seize": "16",
        "dix sept": "17", "dixsept": "17", "dix huit": "18", "dixhuit": "18",
        "dix neuf": "19", "dixneuf": "19",
        "soixante dix": "70", "soixantedix": "70",
        "quatre vingt": "80", "quatrevingt": "80",
        "quatre vingts": "80", "quatrevingts": "80",
        "quatre vingt dix": "90", "quatrevingtdix": "90",
        "cent": "100", "mille": "1000",
    })
    tens = {
        "vingt": 20, "trente": 30, "quarante": 40,
        "cinquante": 50, "soixante": 60,
    }
    words.update({w: str(v) for w, v in tens.items()})
    words.update(_tens_combos(tens, units, (" ", "")))
    words.update(_tens_combos(tens, {"un": 1}, (" et ",)))
    return words


def _german_numbers() -> Dict[str, str]:
    units = {
        "ein": 1, "zwei": 2, "drei": 3, "vier": 4, "fünf": 5,
        "sechs": 6, "sieben": 7, "acht": 8, "neun": 9,
    }
    tens = {
        "zwanzig": 20, "dreißig": 30, "dreissig": 30, "vierzig": 40,
        "fünfzig": 50, "sechzig": 60, "siebzig": 70, "achtzig": 80,
        "neunzig": 90,
    }
    words = {w: str(v) for w, v in units.items()}
    words.update({w: str(v) for w, v in tens.items()})
    words.update({
        "null": "0", "eins": "1", "eine": "1", "fuenf": "5", "zehn": "10",
        "elf": "11", "zwölf": "12", "zwoelf": "12", "dreizehn": "13",
        "vierzehn": "14", "fünfzehn": "15", "sechzehn": "16",
        "siebzehn": "17", "achtzehn": "18", "neunzehn": "19",
        "hundert": "100", "einhundert": "100", "tausend": "1000",
        "eintausend": "1000",
    })
    # "einundzwanzig", "zweiunddreißig", ...
    for unit_word, unit_value in units.items():
        for ten_word, ten_value in tens.items():
            words[f"{unit_word}und{ten_word}"] = str(unit_value + ten_value)
    return words


def _portuguese_numbers() -> Dict[str, str]:
    units = {
        "um": 1, "dois": 2, "três": 3, "tres": 3, "quatro": 4, "cinco": 5,
        "seis": 6, "sete": 7, "oito": 8, "nove": 9,
    }
    words = {w: str(v) for w, v in units.items()}
    words.update({
        "zero": "0", "uma": "1", "duas": "2", "dez": "10", "onze": "11",
        "doze": "12", "treze": "13", "catorze": "14", "quatorze": "14",
        "quinze": "15", "dezesseis": "16", "dezessete": "17",
        "dezoito": "18", "dezenove": "19", "cem": "100", "mil": "1000",
    })
    tens = {
        "vinte": 20, "trinta": 30, "quarenta": 40, "cinquenta": 50,
        "sessenta": 60, "setenta": 70, "oitenta": 80, "noventa": 90,
    }
    words.update({w: str(v) for w, v in tens.items()})
    words.update(_tens_combos(tens, units, (" e ",)))
    return words


def _italian_numbers() -> Dict[str, str]:
    units = {
        "uno": 1, "due": 2, "tre": 3, "quattro": 4, "cinque": 5,
        "sei": 6, "sette": 7, "otto": 8, "nove": 9,
    }
    words = {w: str(v) for w, v in units.items()}
    words.update({
        "zero": "0", "un": "1", "una": "1", "dieci": "10", "undici": "11",
        "dodici": "12", "tredici": "13", "quattordici": "14",
        "quindici": "15", "sedici": "16", "diciassette": "17",
        "diciotto": "18", "diciannove": "19", "cento": "100", "mille": "1000",
    })
    tens = {
        "venti": 20, "trenta": 30, "quaranta": 40, "cinquanta": 50,
        "sessanta": 60, "settanta": 70, "ottanta": 80, "novanta": 90,
    }
    words.update({w: str(v) for w, v in tens.items()})
    for ten_word, ten_value in tens.items():
        for unit_word, unit_value in units.items():
            # venti + uno -> ventuno, venti + otto -> ventotto
            stem = ten_word[:-1] if unit_word[0] in "uo" else ten_word
            words[f"{stem}{unit_word}"] = str(ten_value + unit_value)
        words[f"{ten_word}tré"] = str(ten_value + 3)
    return words


# =============================================================================
# Fraction Words
# =============================================================================

ENGLISH_FRACTIONS = {
    "half": 2, "halves": 2, "halfs": 2,
    "third": 3, "thirds": 3, "thir": 3, "thirdith": 3, "thirdth": 3,
    "fourth": 4, "fourths": 4, "quarter": 4, "quarters": 4,
    "forth": 4, "forths": 4,
    "fifth": 5, "fifths": 5, "fith": 5, "fiths": 5,
    "sixth": 6, "sixths": 6, "sikth": 6, "sikths": 6,
    "seventh": 7, "sevenths": 7, "sevnth": 7, "sevnths": 7,
    "eighth": 8, "eighths": 8, "aith": 8, "aiths": 8, "eith": 8, "eiths": 8,
    "ninth": 9, "ninths": 9, "nith": 9, "niths": 9,
    "tenth": 10, "tenths": 10, "tinth": 10, "tinths": 10,
}

FRENCH_FRACTIONS = {
    "demi": 2, "demis": 2, "tiers": 3, "quart": 4, "quarts": 4,
    "cinquième": 5, "cinquièmes": 5, "sixième": 6, "sixièmes": 6,
    "septième": 7, "septièmes": 7, "huitième": 8, "huitièmes": 8,
    "neuvième": 9, "neuvièmes": 9, "dixième": 10, "dixièmes": 10,
}

SPANISH_FRACTIONS = {
    "medio": 2, "medios": 2, "tercio": 3, "tercios": 3,
    "cuarto": 4, "cuartos": 4, "quinto": 5, "quintos": 5,
    "sexto": 6, "sextos": 6, "séptimo": 7, "séptimos": 7,
    "octavo": 8, "octavos": 8, "noveno": 9, "novenos": 9,
    "décimo": 10, "décimos": 10,
}

PORTUGUESE_FRACTIONS = {
    "meio": 2, "meios": 2, "terço": 3, "terços": 3,
    "quarto": 4, "quartos": 4, "quinto": 5, "quintos": 5,
    "sexto": 6, "sextos": 6, "sétimo": 7, "sétimos": 7,
    "oitavo": 8, "oitavos": 8, "nono": 9, "nonos": 9,
    "décimo": 10, "décimos": 10,
}

ITALIAN_FRACTIONS = {
    "mezzo": 2, "mezzi": 2, "terzo": 3, "terzi": 3,
    "quarto": 4, "quarti": 4, "quinto": 5, "quinti": 5,
    "sesto": 6, "sesti": 6, "settimo": 7, "settimi": 7,
    "ottavo": 8, "ottavi": 8, "nono": 9, "noni": 9,
    "decimo": 10, "decimi": 10,
}

GERMAN_FRACTIONS = {
    "halbe": 2, "halben": 2, "drittel": 3, "viertel": 4, "fünftel": 5,
    "sechstel": 6, "siebtel": 7, "achtel": 8, "neuntel": 9, "zehntel": 10,
}


# =============================================================================
# Language Table
# =============================================================================

ENGLISH = LanguagePatterns(
    code="en",
    name="English",
    numbers=_frozen(_english_numbers()),
    operations=OperationPhrases(
        addition=("plus", "add", "added to"),
        subtraction=("minus", "subtract", "take away", "less"),
        multiplication=("times", "multiplied by", "multiply by", "multiply", "x"),
        division=("divided by", "divide by", "divide", "over"),
        percentage=("percent", "per cent", "percentage"),
        percent_of=("percent of", "per cent of"),
        power=("to the power of", "raised to the power of", "raised to", "power"),
        sqrt=("square root of", "square root", "root of"),
        parentheses=ParenthesesPhrases(
            open=("open parenthesis", "open parentheses", "open bracket", "left parenthesis"),
            close=("close parenthesis", "close parentheses", "close bracket", "right parenthesis"),
        ),
        decimal=("point", "dot"),
    ),
    specific_phrases=SpecificPhrases(
        add_to=rf"(?<!\w)add\s+{NUM}\s+to\s+{NUM}",
        subtract_from=rf"(?<!\w)(?:subtract|take)\s+{NUM}\s+(?:away\s+)?from\s+{NUM}",
        multiply_by=rf"(?<!\w)(multiply)\s+{NUM}\s+by\s+{NUM}",
        divide_by=rf"(?<!\w)(divide)\s+{NUM}\s+by\s+{NUM}",
    ),
    filler_words=(
        "what is", "what's", "whats", "how much is", "calculate", "compute",
        "equals", "equal to", "is equal to", "please", "the",
    ),
    fraction_words=_frozen(ENGLISH_FRACTIONS),
    large_numbers=_frozen({
        "million": 10 ** 6, "millions": 10 ** 6,
        "billion": 10 ** 9, "billions": 10 ** 9,
        "trillion": 10 ** 12, "trillions": 10 ** 12,
    }),
    percent_of_that=("of that", "of it", "of this", "of the result", "of the last result"),
)

SPANISH = LanguagePatterns(
    code="es",
    name="Español",
    numbers=_frozen(_spanish_numbers()),
    operations=OperationPhrases(
        addition=("más", "mas", "sumar", "suma", "sumado a"),
        subtraction=("menos", "restar", "resta", "quitar"),
        multiplication=("por", "multiplicado por", "veces", "multiplicar", "x"),
        division=("dividido por", "dividido entre", "entre", "dividir", "sobre"),
        percentage=("por ciento", "porciento"),
        percent_of=("por ciento de",),
        power=("elevado a la", "elevado a", "a la potencia de", "potencia"),
        sqrt=("raíz cuadrada de", "raiz cuadrada de", "raíz cuadrada", "raiz cuadrada",
              "raíz de", "raiz de"),
        parentheses=ParenthesesPhrases(
            open=("abrir paréntesis", "abre paréntesis", "abrir parentesis", "abre parentesis"),
            close=("cerrar paréntesis", "cierra paréntesis", "cerrar parentesis", "cierra parentesis"),
        ),
        decimal=("coma", "punto"),
    ),
    specific_phrases=SpecificPhrases(
        add_to=rf"(?<!\w)(?:sumar|suma|añadir|añade|agregar|agrega)\s+{NUM}\s+(?:a|con|más|mas)\s+{NUM}",
        subtract_from=rf"(?<!\w)(?:restar|resta|quitar|quita)\s+{NUM}\s+(?:de|a)\s+{NUM}",
        multiply_by=rf"(?<!\w)(multiplicar|multiplica)\s+{NUM}\s+por\s+{NUM}",
        divide_by=rf"(?<!\w)(dividir|divide)\s+{NUM}\s+(?:por|entre)\s+{NUM}",
    ),
    filler_words=("cuánto es", "cuanto es", "cuánto son", "calcula", "calcular", "igual a", "por favor"),
    fraction_words=_frozen(SPANISH_FRACTIONS),
    large_numbers=_frozen({
        "millón": 10 ** 6, "millon": 10 ** 6, "millones": 10 ** 6,
        "mil millones": 10 ** 9,
        "billón": 10 ** 12, "billon": 10 ** 12, "billones": 10 ** 12,
    }),
    percent_of_that=("de eso", "de esto", "del resultado"),
)

FRENCH = LanguagePatterns(
    code="fr",
    name="Français",
    numbers=_frozen(_french_numbers()),
    operations=OperationPhrases(
        addition=("plus", "ajouter", "additionner"),
        subtraction=("moins", "soustraire", "retirer"),
        multiplication=("fois", "multiplié par", "multiplie par", "x"),
        division=("divisé par", "divise par", "sur"),
        percentage=("pour cent", "pourcent", "pourcents"),
        percent_of=("pour cent de",),
        power=("à la puissance", "puissance", "exposant"),
        sqrt=("racine carrée de", "racine carree de", "racine carrée", "racine de"),
        parentheses=ParenthesesPhrases(
            open=("ouvrir la parenthèse", "ouvre la parenthèse", "ouvrir parenthèse", "ouvre parenthèse"),
            close=("fermer la parenthèse", "ferme la parenthèse", "fermer parenthèse", "ferme parenthèse"),
        ),
        decimal=("virgule", "point"),
    ),
    specific_phrases=SpecificPhrases(
        add_to=rf"(?<!\w)(?:ajouter|ajoute|additionner|additionne)\s+{NUM}\s+(?:à|a|et)\s+{NUM}",
        subtract_from=rf"(?<!\w)(?:soustraire|soustrais|retirer|retire|enlever|enlève)\s+{NUM}\s+(?:de|à)\s+{NUM}",
        multiply_by=rf"(?<!\w)(multiplier|multiplie)\s+{NUM}\s+par\s+{NUM}",
        divide_by=rf"(?<!\w)(diviser|divise)\s+{NUM}\s+par\s+{NUM}",
    ),
    filler_words=("combien font", "combien fait", "combien", "calcule", "calculer", "égal", "égale", "s'il te plaît"),
    fraction_words=_frozen(FRENCH_FRACTIONS),
    large_numbers=_frozen({
        "million": 10 ** 6, "millions": 10 ** 6,
        "milliard": 10 ** 9, "milliards": 10 ** 9,
        "billion": 10 ** 12, "billions": 10 ** 12,
    }),
    percent_of_that=("de ça", "de ca", "de cela", "du résultat", "du resultat"),
)

GERMAN = LanguagePatterns(
    code="de",
    name="Deutsch",
    numbers=_frozen(_german_numbers()),
    operations=OperationPhrases(
        addition=("plus", "addiere", "addieren"),
        subtraction=("minus", "weniger", "subtrahiere", "subtrahieren"),
        multiplication=("mal", "multipliziert mit", "x"),
        division=("geteilt durch", "dividiert durch", "durch"),
        percentage=("prozent",),
        percent_of=("prozent von",),
        power=("hoch", "zur potenz"),
        sqrt=("quadratwurzel aus", "quadratwurzel von", "quadratwurzel", "wurzel aus",
              "wurzel von", "wurzel"),
        parentheses=ParenthesesPhrases(
            open=("klammer auf", "klammer öffnen"),
            close=("klammer zu", "klammer schließen"),
        ),
        decimal=("komma", "punkt"),
    ),
    specific_phrases=SpecificPhrases(
        add_to=rf"(?<!\w)(?:addiere|addieren)\s+{NUM}\s+(?:zu|und)\s+{NUM}",
        subtract_from=rf"(?<!\w)(?:subtrahiere|ziehe)\s+{NUM}\s+von\s+{NUM}(?:\s+ab)?",
        multiply_by=rf"(?<!\w)(multipliziere)\s+{NUM}\s+mit\s+{NUM}",
        divide_by=rf"(?<!\w)(dividiere|teile)\s+{NUM}\s+durch\s+{NUM}",
    ),
    filler_words=("wie viel ist", "wieviel ist", "was ist", "berechne", "ergibt", "gleich", "bitte"),
    fraction_words=_frozen(GERMAN_FRACTIONS),
    large_numbers=_frozen({
        "million": 10 ** 6, "millionen": 10 ** 6,
        "milliarde": 10 ** 9, "milliarden": 10 ** 9,
        "billion": 10 ** 12, "billionen": 10 ** 12,
    }),
    percent_of_that=("davon", "vom ergebnis", "von dem ergebnis"),
)

PORTUGUESE = LanguagePatterns(
    code="pt",
    name="Português",
    numbers=_frozen(_portuguese_numbers()),
    operations=OperationPhrases(
        addition=("mais", "somar", "soma", "adicionar"),
        subtraction=("menos", "subtrair", "tirar"),
        multiplication=("vezes", "multiplicado por", "multiplicar", "x"),
        division=("dividido por", "divide por", "dividir", "sobre"),
        percentage=("por cento", "porcento"),
        percent_of=("por cento de",),
        power=("elevado a", "elevado à", "à potência de", "potência"),
        sqrt=("raiz quadrada de", "raiz quadrada", "raiz de"),
        parentheses=ParenthesesPhrases(
            open=("abre parênteses", "abrir parênteses", "abre parenteses"),
            close=("fecha parênteses", "fechar parênteses", "fecha parenteses"),
        ),
        decimal=("vírgula", "virgula", "ponto"),
    ),
    specific_phrases=SpecificPhrases(
        add_to=rf"(?<!\w)(?:somar|some|adicionar|adicione)\s+{NUM}\s+(?:a|com|e)\s+{NUM}",
        subtract_from=rf"(?<!\w)(?:subtrair|subtraia|tirar|tire)\s+{NUM}\s+de\s+{NUM}",
        multiply_by=rf"(?<!\w)(multiplicar|multiplique)\s+{NUM}\s+por\s+{NUM}",
        divide_by=rf"(?<!\w)(dividir|divida)\s+{NUM}\s+por\s+{NUM}",
    ),
    filler_words=("quanto é", "quanto e", "quanto dá", "calcule", "calcular", "igual a", "por favor"),
    fraction_words=_frozen(PORTUGUESE_FRACTIONS),
    large_numbers=_frozen({
        "milhão": 10 ** 6, "milhao": 10 ** 6, "milhões": 10 ** 6, "milhoes": 10 ** 6,
        "bilhão": 10 ** 9, "bilhao": 10 ** 9, "bilhões": 10 ** 9, "bilhoes": 10 ** 9,
        "trilhão": 10 ** 12, "trilhao": 10 ** 12, "trilhões": 10 ** 12, "trilhoes": 10 ** 12,
    }),
    percent_of_that=("disso", "disto", "desse", "do resultado"),
)

ITALIAN = LanguagePatterns(
    code="it",
    name="Italiano",
    numbers=_frozen(_italian_numbers()),
    operations=OperationPhrases(
        addition=("più", "piu", "sommare", "somma", "aggiungere"),
        subtraction=("meno", "sottrarre", "togliere"),
        multiplication=("per", "moltiplicato per", "volte", "x"),
        division=("diviso per", "diviso", "fratto"),
        percentage=("per cento", "percento"),
        percent_of=("per cento di",),
        power=("elevato alla", "elevato a", "alla potenza di"),
        sqrt=("radice quadrata di", "radice quadrata", "radice di"),
        parentheses=ParenthesesPhrases(
            open=("apri parentesi", "aperta parentesi"),
            close=("chiudi parentesi", "chiusa parentesi"),
        ),
        decimal=("virgola", "punto"),
    ),
    specific_phrases=SpecificPhrases(
        add_to=rf"(?<!\w)(?:aggiungi|aggiungere|somma|sommare)\s+{NUM}\s+a\s+{NUM}",
        subtract_from=rf"(?<!\w)(?:sottrai|sottrarre|togli|togliere)\s+{NUM}\s+da\s+{NUM}",
        multiply_by=rf"(?<!\w)(moltiplica|moltiplicare)\s+{NUM}\s+per\s+{NUM}",
        divide_by=rf"(?<!\w)(dividi|dividere)\s+{NUM}\s+per\s+{NUM}",
    ),
    filler_words=("quanto fa", "quanto è", "calcola", "calcolare", "uguale a", "per favore"),
    fraction_words=_frozen(ITALIAN_FRACTIONS),
    large_numbers=_frozen({
        "milione": 10 ** 6, "milioni": 10 ** 6,
        "miliardo": 10 ** 9, "miliardi": 10 ** 9,
        "trilione": 10 ** 12, "trilioni": 10 ** 12, "trillione": 10 ** 12,
    }),
    percent_of_that=("di quello", "di questo", "del risultato"),
)

LANGUAGE_PATTERNS: Mapping[str, LanguagePatterns] = MappingProxyType({
    patterns.code: patterns
    for patterns in (ENGLISH, SPANISH, FRENCH, GERMAN, PORTUGUESE, ITALIAN)
})

SUPPORTED_LANGUAGES = tuple(LANGUAGE_PATTERNS)


# =============================================================================
# Lookup
# =============================================================================

def resolve_language(
    language_code: Optional[str],
    default: str = DEFAULT_LANGUAGE,
) -> str:
    """
    Map any language code onto a supported one.

    Accepts "es", "ES", "es-MX" or "pt_BR". Unknown codes resolve to
    ``default`` (or DEFAULT_LANGUAGE when ``default`` is unknown too).

    Args:
        language_code: Code from the language selector
        default: Preferred fallback language

    Returns:
        A key of LANGUAGE_PATTERNS
    """
    fallback = default if default in LANGUAGE_PATTERNS else DEFAULT_LANGUAGE
    if not language_code or not isinstance(language_code, str):
        return fallback

    code = language_code.strip().lower().replace("_", "-")
    if code in LANGUAGE_PATTERNS:
        return code

    base = code.split("-", 1)[0]
    if base in LANGUAGE_PATTERNS:
        return base

    return fallback


def lookup(language_code: Optional[str], default: str = DEFAULT_LANGUAGE) -> LanguagePatterns:
    """Get the lexicon for a language; never fails."""
    return LANGUAGE_PATTERNS[resolve_language(language_code, default)]
