from typing import List, Tuple

# (template, lowercase the utterance before substitution)
VARIATION_TEMPLATES: Tuple[Tuple[str, bool], ...] = (
    ("{}", False),
    ("¿{}?", False),
    ("Necesito ayuda con {}", True),
    ("Problema al {}", True),
    ("Error en {}", True),
    ("Cómo solucionar {}", True),
    ("Pasos para {}", True),
)


class VariationExpander:
    """
    Expands one confirmed utterance into a fixed family of paraphrases.

    Pure text templating: the output depends only on the input and always
    has ``len(VARIATION_TEMPLATES)`` entries.
    """

    def __init__(self, templates: Tuple[Tuple[str, bool], ...] = VARIATION_TEMPLATES):
        self.templates = tuple(templates)

    @property
    def size(self) -> int:
        return len(self.templates)

    def expand(self, utterance: str) -> List[str]:
        """
        Generate the paraphrase variants of an utterance.

        Args:
            utterance: Confirmed user utterance

        Returns:
            Variants in template order, the literal utterance first
        """
        text = utterance.strip()
        return [
            template.format(text.lower() if lowercase else text)
            for template, lowercase in self.templates
        ]
