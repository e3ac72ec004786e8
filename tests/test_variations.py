from support_assistant.infrastructure.ai.intent.variations import VARIATION_TEMPLATES, VariationExpander


def test_expand_produces_one_variant_per_template():
    expander = VariationExpander()
    variants = expander.expand("No puedo pagar mi factura")

    assert len(variants) == len(VARIATION_TEMPLATES) == expander.size == 7
    assert variants == [
        "No puedo pagar mi factura",
        "¿No puedo pagar mi factura?",
        "Necesito ayuda con no puedo pagar mi factura",
        "Problema al no puedo pagar mi factura",
        "Error en no puedo pagar mi factura",
        "Cómo solucionar no puedo pagar mi factura",
        "Pasos para no puedo pagar mi factura",
    ]


def test_expand_is_deterministic():
    expander = VariationExpander()
    assert expander.expand("activar servicio") == expander.expand("activar servicio")


def test_expand_strips_surrounding_whitespace():
    variants = VariationExpander().expand("   activar servicio  ")

    assert variants[0] == "activar servicio"
    assert variants[1] == "¿activar servicio?"


def test_custom_templates():
    expander = VariationExpander(templates=(("{}", False), ("Ayuda: {}", True)))

    assert expander.size == 2
    assert expander.expand("Mi MÓDEM") == ["Mi MÓDEM", "Ayuda: mi módem"]
