from sedetok_live.core.codes import (
    generate_access_code,
    generate_pin,
    is_valid_pin,
    normalize_access_code,
    normalize_pin,
)


def test_normalize_pin_keeps_six_digits():
    assert normalize_pin(" 12a34-56789 ") == "123456"
    assert normalize_pin("") == ""
    assert normalize_pin(None) == ""


def test_is_valid_pin():
    assert is_valid_pin("004217")
    assert not is_valid_pin("12345")
    assert not is_valid_pin("12345a")


def test_generate_pin_avoids_taken_values():
    taken = {generate_pin() for _ in range(20)}
    pin = generate_pin(taken)
    assert is_valid_pin(pin)
    assert pin not in taken


def test_access_code_normalization_and_generation():
    assert normalize_access_code(" ab-cd 1234xyz ") == "ABCD1234"
    code = generate_access_code()
    assert len(code) == 8
    assert code == normalize_access_code(code)
