from __future__ import annotations

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

SAMPLE_TRANSCRIPT = """
Hey guys! Today I'm making my favorite pasta carbonara.
You'll need 400 grams of spaghetti, 200 grams of pancetta,
4 eggs, and 100 grams of Pecorino Romano cheese.
Also black pepper and salt.

First, boil salted water and cook the spaghetti.
While that's cooking, cut the pancetta into small cubes and fry until crispy.
In a bowl, whisk the eggs with grated cheese.
Save a cup of pasta water before draining.
Take the pan off the heat, add the pasta to the pancetta,
then quickly mix in the egg mixture with some pasta water to make it creamy.
Add pepper and serve! This takes about 20 minutes total.
"""


class TranscriptProvider(ABC):
    """
    Produces the spoken text of a cooking video.

    Implementations:
    - StaticTranscriptProvider: fixed transcript, no download or ASR
    - Future: a downloader + speech-to-text adapter
    """

    @abstractmethod
    def get_transcript(self, video_url: str) -> str:
        """
        Return the transcript for a video.

        Raises:
            TranscriptUnavailableError: If no transcript can be produced
        """
        pass


class StaticTranscriptProvider(TranscriptProvider):
    def __init__(self, transcript: str = SAMPLE_TRANSCRIPT) -> None:
        self._transcript = transcript

    def get_transcript(self, video_url: str) -> str:
        logger.debug("Serving static transcript for %s", video_url)
        return self._transcript
