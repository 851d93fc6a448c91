"""Adapters for the external speech detector."""

from vadclips.detector.detector_api import SpeechDetector, BurstCallback
from vadclips.detector.file_detector import FileBurstDetector

__all__ = ["SpeechDetector", "BurstCallback", "FileBurstDetector"]
