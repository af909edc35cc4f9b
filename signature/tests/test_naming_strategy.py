from __future__ import annotations

import pytest

from signature.logic.naming_strategy import DefaultSuffixStrategy, NamingContext


@pytest.mark.parametrize("name,expected", [
    ("contract.PDF", "contract-signed.pdf"),
    ("report", "report-signed.pdf"),
    ("scan.pdf", "scan-signed.pdf"),
    ("archive.pdf.zip", "archive.pdf.zip-signed.pdf"),
    ("letter.Pdf", "letter-signed.pdf"),
])
def test_default_suffix(name: str, expected: str) -> None:
    assert DefaultSuffixStrategy().propose_output_name(NamingContext(input_name=name)) == expected


def test_only_trailing_extension_is_stripped() -> None:
    ctx = NamingContext(input_name="a.pdf.pdf")
    assert DefaultSuffixStrategy().propose_output_name(ctx) == "a.pdf-signed.pdf"


def test_custom_suffix() -> None:
    ctx = NamingContext(input_name="offer.pdf")
    assert DefaultSuffixStrategy("_final").propose_output_name(ctx) == "offer_final.pdf"
