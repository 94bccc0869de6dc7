"""Bundle of the editing components the key handlers delegate to."""

from __future__ import annotations

from dataclasses import dataclass

from vi_modal.ex import ExInterpreter
from vi_modal.host import HostEditor
from vi_modal.motions import FindCharTracker
from vi_modal.operators import OperatorComposer, RepeatReplayer, TextObjectResolver
from vi_modal.runtime.settings import EngineSettings
from vi_modal.visual import VisualController

from .count import CountAccumulator
from .state import EngineState


@dataclass(slots=True)
class EngineComponents:
    composer: OperatorComposer
    text_objects: TextObjectResolver
    find_char: FindCharTracker
    repeat: RepeatReplayer
    visual: VisualController
    ex: ExInterpreter

    @classmethod
    def build(
        cls,
        host: HostEditor,
        state: EngineState,
        counter: CountAccumulator,
        settings: EngineSettings,
    ) -> "EngineComponents":
        composer = OperatorComposer(host, state)
        text_objects = TextObjectResolver(host, state, settings)
        return cls(
            composer=composer,
            text_objects=text_objects,
            find_char=FindCharTracker(host, state, settings),
            repeat=RepeatReplayer(host, state, counter, composer, text_objects),
            visual=VisualController(host, state),
            ex=ExInterpreter(host),
        )


__all__ = ["EngineComponents"]
