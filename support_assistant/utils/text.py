import re
import unicodedata


def normalize_utterance(text: str) -> str:
    """Lowercase and trim an utterance the way training examples are stored."""
    return text.lower().strip()


def fold_text(text: str) -> str:
    """
    Reduce text to a case, accent, punctuation and whitespace insensitive form.

    Args:
        text: Any user or catalog text

    Returns:
        Lowercase ASCII-folded text with single spaces between words
    """
    decomposed = unicodedata.normalize("NFKD", text.lower())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    stripped = re.sub(r"[^\w\s]", " ", stripped)
    return re.sub(r"\s+", " ", stripped).strip()
