import pytest

from sedetok_live.core.errors import QuestionImportError
from sedetok_live.core.question_importer import load_questions_from_file, parse_questions

SAMPLE = """\
Q: ¿Cuál es la capital
de Colombia?
A: Medellín
B: Bogotá
C: Cali
D: Cartagena
CORRECT: B
TIMELIMIT: 15
POINTS: 500
FEEDBACK: Bogotá es la capital
desde 1819.

---
Q: ¿2 + 2?
A: 3
B: 4
CORRECT: b
IMAGE: https://example.org/suma.png
"""


def test_parse_questions_reads_all_fields():
    first, second = parse_questions(SAMPLE)

    assert first.question_text == "¿Cuál es la capital\nde Colombia?"
    assert first.options == ["Medellín", "Bogotá", "Cali", "Cartagena"]
    assert first.correct_option_index == 1
    assert first.time_limit_seconds == 15
    assert first.points == 500
    assert first.feedback == "Bogotá es la capital\ndesde 1819."

    assert second.options == ["3", "4"]
    assert second.correct_option_index == 1
    assert second.time_limit_seconds == 20
    assert second.points == 1000
    assert second.image_url == "https://example.org/suma.png"
    assert second.feedback is None


@pytest.mark.parametrize(
    "block",
    [
        "A: Solo opciones\nB: Sin pregunta\nCORRECT: A",
        "Q: ¿Una?\nA: Sí\nCORRECT: A",
        "Q: ¿Hueco?\nA: Sí\nC: No\nCORRECT: A",
        "Q: ¿Sin correcta?\nA: Sí\nB: No",
        "Q: ¿Fuera?\nA: Sí\nB: No\nCORRECT: C",
        "Q: ¿Tiempo?\nA: Sí\nB: No\nCORRECT: A\nTIMELIMIT: cero",
        "Q: ¿Puntos?\nA: Sí\nB: No\nCORRECT: A\nPOINTS: -5",
        "texto suelto\nQ: ¿?\nA: Sí\nB: No\nCORRECT: A",
    ],
)
def test_invalid_blocks_are_rejected(block):
    with pytest.raises(QuestionImportError):
        parse_questions(block)


def test_load_questions_from_file_uses_file_name_as_title(tmp_path):
    path = tmp_path / "capitales_de_america.txt"
    path.write_text(SAMPLE, encoding="utf-8")

    imported = load_questions_from_file(path)

    assert imported.title == "capitales de america"
    assert imported.source_path == path
    assert len(imported.questions) == 2


def test_empty_file_is_rejected(tmp_path):
    path = tmp_path / "vacio.txt"
    path.write_text("\n\n---\n", encoding="utf-8")
    with pytest.raises(QuestionImportError):
        load_questions_from_file(path)
