"""Unit tests for short-code generation utilities."""

import pytest

from shortlinks.codes import ALPHABET, CUSTOM_CODE_PATTERN, generate_short_code, make_code_generator


def test_alphabet_is_base62() -> None:
    assert len(ALPHABET) == 62
    assert len(set(ALPHABET)) == 62


def test_generate_short_code_default_length() -> None:
    assert len(generate_short_code()) == 6


def test_generate_short_code_custom_length() -> None:
    assert len(generate_short_code(length=10)) == 10


def test_generate_short_code_only_alphanumeric() -> None:
    for _ in range(100):
        code = generate_short_code()
        assert all(c in ALPHABET for c in code)


def test_generate_short_code_uniqueness() -> None:
    codes = {generate_short_code() for _ in range(1000)}
    # With 62^6 possibilities, 1000 codes should all be unique
    assert len(codes) == 1000


def test_make_code_generator_binds_length() -> None:
    generator = make_code_generator(8)
    assert len(generator()) == 8


@pytest.mark.parametrize("code", ["abc", "my-code", "my_code", "A1"])
def test_custom_code_pattern_accepts(code: str) -> None:
    assert CUSTOM_CODE_PATTERN.match(code)


@pytest.mark.parametrize("code", ["", "my code", "code!", "path/seg", "café"])
def test_custom_code_pattern_rejects(code: str) -> None:
    assert not CUSTOM_CODE_PATTERN.match(code)
