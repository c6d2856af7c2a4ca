"""Host-side runtime for compiled sequencer images."""

from tenten_compiler.runtime.host import SequencerHost, VoiceCallbacks

__all__ = ["SequencerHost", "VoiceCallbacks"]
