# voice/voice_listener.py
import json
import os
import queue

import sounddevice as sd
from dotenv import load_dotenv
from loguru import logger
from PySide6.QtCore import QThread, Signal
from vosk import KaldiRecognizer, Model

load_dotenv()

MODEL_PATH = os.getenv("VOSK_MODEL_PATH", "models/vosk-es")
SAMPLE_RATE = 16000


class VoiceListener(QThread):
    """
    Emite una frase completa cada vez que el reconocedor la da por
    terminada. Los parciales solo se usan para mostrar lo que se oye.
    """

    result_ready = Signal(str)
    partial_ready = Signal(str)
    error = Signal(str)

    def __init__(self, grammar=None, model_path=None):
        super().__init__()
        self.running = False
        self.grammar = grammar
        self.model_path = model_path or MODEL_PATH
        self.last_partial = ""

    def _recognizer(self):
        model = Model(self.model_path)
        if self.grammar:
            return KaldiRecognizer(model, SAMPLE_RATE, json.dumps(self.grammar))
        return KaldiRecognizer(model, SAMPLE_RATE)

    def run(self):
        self.running = True
        q = queue.Queue()

        def callback(indata, frames, time, status):
            if status:
                logger.debug("Audio: {}", status)
            q.put(bytes(indata))

        try:
            recognizer = self._recognizer()
        except Exception as e:
            logger.error("No se pudo cargar el modelo de voz {}: {}", self.model_path, e)
            self.error.emit(f"No se pudo cargar el modelo de voz: {e}")
            self.running = False
            return

        with sd.RawInputStream(
            samplerate=SAMPLE_RATE,
            blocksize=8000,
            dtype="int16",
            channels=1,
            callback=callback
        ):
            while self.running:
                try:
                    data = q.get(timeout=0.5)
                except queue.Empty:
                    continue

                if recognizer.AcceptWaveform(data):
                    text = json.loads(recognizer.Result()).get("text", "").strip()
                    self.last_partial = ""
                    if text:
                        logger.info("Reconocido: {}", text)
                        self.result_ready.emit(text)
                    continue

                partial = json.loads(recognizer.PartialResult()).get("partial", "")
                if partial and partial != self.last_partial:
                    self.last_partial = partial
                    self.partial_ready.emit(partial)

            # Lo que quede en el búfer al parar también cuenta
            text = json.loads(recognizer.FinalResult()).get("text", "").strip()
            if text:
                self.result_ready.emit(text)

    def stop(self):
        self.running = False
        self.wait()
