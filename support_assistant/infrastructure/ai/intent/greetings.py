"""
Greeting detection used by the classifier's low-confidence override.

Greetings rarely appear in a support catalog, so the statistical model scores
them poorly and they would otherwise be routed into disambiguation.
"""

import re

GREETING_INTENT = "greeting"
GREETING_ANSWER = "¡Hola! ¿En qué puedo ayudarte hoy?"

# Score reported for an overridden greeting
GREETING_SCORE = 0.5

# The override only applies when the model's own answer scores below this
GREETING_OVERRIDE_THRESHOLD = 0.3

GREETING_PATTERN = re.compile(
    r"^(?:"
    r"(?:[hw][o0]+l+[aá]+s?)"                                       # hola, holaa, wola
    r"|(?:h[eé]l+o+)"                                               # hello
    r"|(?:b[uú]e[nm](?:o?s|as)?(?:\s*(?:d[ií]as?|tardes?|noches?))?)"  # buenos días, buenas tardes
    r"|(?:q(?:u[eé])?\s*tal)"                                       # qué tal
    r"|(?:klk|qloq|qlok|(?:[qk](?:u[eé])?\s*lo\s*[qk](?:u[eé])?))"  # klk, que lo que
    r"|(?:q(?:u[eé])?\s*hubo)"
    r"|(?:q(?:u[eé])?\s*hay)"
    r"|(?:q(?:u[eé])?\s*(?:onda|v[oó]l[aá]))"
    r"|(?:saludos?)"
    r"|(?:ey|hey)"
    r"|(?:ayudame)"
    r")(?:\s+bot)?$",
    re.IGNORECASE
)

_EDGE_PUNCTUATION = "¡!¿?.,;: "


def is_greeting(text: str) -> bool:
    """
    Check whether a message is one of the recognised greetings.

    Args:
        text: Raw or normalized user message

    Returns:
        True if the whole message is a greeting, optionally addressed to "bot"
    """
    if not text:
        return False
    candidate = text.strip().strip(_EDGE_PUNCTUATION).lower()
    return bool(GREETING_PATTERN.match(candidate))
