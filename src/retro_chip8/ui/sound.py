# src/retro_chip8/ui/sound.py
"""
サウンドタイマ用のトーン出力。

スケジューラスレッドから呼ばれるコールバックで、デバイスの有無だけを同期的に確認し、
実際の再生はシグナル経由でGUIスレッド側のQAudioSinkに任せます。
"""
import math
from array import array
from typing import Optional

from PySide6.QtCore import QObject, QBuffer, QByteArray, QIODevice, Signal, Slot
from PySide6.QtMultimedia import QAudio, QAudioFormat, QAudioSink, QMediaDevices

SAMPLE_RATE = 44100
AMPLITUDE = 0.25

# @intent:utility_function 16bit符号付きモノラルの正弦波PCMデータを生成します。
def generate_sine_pcm(frequency_hz: int, duration_ms: int, sample_rate: int = SAMPLE_RATE) -> bytes:
    count = sample_rate * duration_ms // 1000
    peak = int(32767 * AMPLITUDE)
    samples = array('h', (
        int(peak * math.sin(2 * math.pi * frequency_hz * n / sample_rate)) for n in range(count)
    ))
    return samples.tobytes()

# @intent:responsibility ToneCallbackとして呼び出され、指定周波数・長さのトーンを再生します。
class ToneGenerator(QObject):
    tone_requested = Signal(int, int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._sink: Optional[QAudioSink] = None
        self._buffer: Optional[QBuffer] = None
        # 別スレッドからのemitはキュー接続となり、GUIスレッドで再生される
        self.tone_requested.connect(self._play)

    # @intent:pre-condition 出力デバイスが存在すること。無ければRuntimeErrorを送出します。
    def __call__(self, frequency_hz: int, duration_ms: int) -> None:
        if not QMediaDevices.audioOutputs():
            raise RuntimeError("No audio output device available.")
        self.tone_requested.emit(frequency_hz, duration_ms)

    @Slot(int, int)
    def _play(self, frequency_hz: int, duration_ms: int):
        audio_format = QAudioFormat()
        audio_format.setSampleRate(SAMPLE_RATE)
        audio_format.setChannelCount(1)
        audio_format.setSampleFormat(QAudioFormat.Int16)

        device = QMediaDevices.defaultAudioOutput()
        if device.isNull():
            print("Warning: tone skipped: default audio output disappeared.")
            return

        self.stop()
        self._buffer = QBuffer(self)
        self._buffer.setData(QByteArray(generate_sine_pcm(frequency_hz, duration_ms)))
        self._buffer.open(QIODevice.ReadOnly)
        self._sink = QAudioSink(device, audio_format, self)
        self._sink.stateChanged.connect(self._on_state_changed)
        self._sink.start(self._buffer)

    def _on_state_changed(self, state):
        if state == QAudio.State.IdleState:
            self.stop()

    def stop(self) -> None:
        if self._sink is not None:
            self._sink.stop()
            self._sink.deleteLater()
            self._sink = None
        if self._buffer is not None:
            self._buffer.close()
            self._buffer.deleteLater()
            self._buffer = None
