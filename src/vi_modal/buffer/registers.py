"""Clipboard register storage."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

UNNAMED = '"'


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str
    linewise: bool = False


class RegisterBank:
    """Named registers; every write also lands in the unnamed register."""

    def __init__(self) -> None:
        self._registers: Dict[str, RegisterValue] = {UNNAMED: RegisterValue(text="")}

    def get(self, name: str = UNNAMED) -> RegisterValue:
        return self._registers.get(name, RegisterValue(text=""))

    def yank_to(self, name: str, text: str, *, linewise: bool = False) -> None:
        value = RegisterValue(text=text, linewise=linewise)
        self._registers[name] = value
        if name != UNNAMED:
            self._registers[UNNAMED] = value
