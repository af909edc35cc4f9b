from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Protocol

_PDF_EXT = re.compile(r"\.pdf$", re.IGNORECASE)


@dataclass(frozen=True)
class NamingContext:
    input_name: str


class NamingStrategy(Protocol):
    def strategy_id(self) -> str: ...
    def propose_output_name(self, ctx: NamingContext) -> str: ...


class DefaultSuffixStrategy:
    """Default: contract.PDF -> contract-signed.pdf, report -> report-signed.pdf"""

    def __init__(self, suffix: str = "-signed") -> None:
        self._suffix = suffix

    def strategy_id(self) -> str:
        return "default_suffix"

    def propose_output_name(self, ctx: NamingContext) -> str:
        stem = _PDF_EXT.sub("", ctx.input_name or "")
        return f"{stem}{self._suffix}.pdf"
