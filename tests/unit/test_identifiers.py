"""Tests for conversation identifier <-> file name mapping."""

from __future__ import annotations

import uuid

import pytest

from chatframe.identifiers import FormatError, decode, encode, new_identifier


class TestEncode:
    def test_file_name_format(self) -> None:
        ident = uuid.UUID("11111111-1111-1111-1111-111111111111")
        assert encode(ident) == "convo-11111111-1111-1111-1111-111111111111.txt"

    def test_new_identifiers_are_unique(self) -> None:
        assert new_identifier() != new_identifier()


class TestDecode:
    def test_round_trip(self) -> None:
        for _ in range(20):
            ident = new_identifier()
            assert decode(encode(ident)) == ident

    def test_parses_known_name(self) -> None:
        name = "convo-11111111-1111-1111-1111-111111111111.txt"
        assert decode(name) == uuid.UUID("11111111-1111-1111-1111-111111111111")

    @pytest.mark.parametrize(
        "name",
        [
            "11111111-1111-1111-1111-111111111111.txt",
            "chat-11111111-1111-1111-1111-111111111111.txt",
            "Convo-11111111-1111-1111-1111-111111111111.txt",
        ],
    )
    def test_missing_prefix(self, name: str) -> None:
        with pytest.raises(FormatError, match="prefix"):
            decode(name)

    @pytest.mark.parametrize(
        "name",
        [
            "convo-11111111-1111-1111-1111-111111111111",
            "convo-11111111-1111-1111-1111-111111111111.json",
            "convo-11111111-1111-1111-1111-111111111111.txt.bak",
        ],
    )
    def test_missing_suffix(self, name: str) -> None:
        with pytest.raises(FormatError, match="suffix"):
            decode(name)

    @pytest.mark.parametrize("middle", ["", "not-a-uuid", "1111", "11111111-1111-1111-1111-11111111111z"])
    def test_invalid_uuid(self, middle: str) -> None:
        with pytest.raises(FormatError, match="not a valid UUID"):
            decode(f"convo-{middle}.txt")

    @pytest.mark.parametrize(
        "middle",
        [
            "11111111111111111111111111111111",
            "{11111111-1111-1111-1111-111111111111}",
            "urn:uuid:11111111-1111-1111-1111-111111111111",
            "ABCDEFAB-1111-1111-1111-111111111111",
        ],
    )
    def test_non_canonical_uuid(self, middle: str) -> None:
        with pytest.raises(FormatError, match="not a canonical UUID"):
            decode(f"convo-{middle}.txt")

    def test_decoded_name_re_encodes_identically(self) -> None:
        name = "convo-abcdefab-1111-1111-1111-111111111111.txt"
        assert encode(decode(name)) == name

    def test_format_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode("notes.txt")

    def test_error_keeps_offending_name(self) -> None:
        with pytest.raises(FormatError) as exc_info:
            decode("convo-bogus.txt")
        assert exc_info.value.name == "convo-bogus.txt"
        assert isinstance(exc_info.value.__cause__, ValueError)
