"""Shared fixtures for twee-bridge tests."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from twee_bridge.errors import DocumentStoreError


STORY = """:: StoryTitle
The Cave

:: Start [intro] {"position":"100,100"}
You wake in a cave.

[[Look around->Cave Mouth]]
[[Sleep]]

:: Cave Mouth {"position":"250,100","size":"200,100"}
Light spills in. [[Back<-Go back]] or [[Start|Return]].

:: Sleep
The end.
"""


class MemoryStore:
    """DocumentStore keeping documents in a dict, recording every call."""

    def __init__(self, documents=None):
        self.documents = dict(documents or {})
        self.calls = []

    def open(self, doc_id):
        self.calls.append(('open', doc_id))
        if doc_id not in self.documents:
            raise DocumentStoreError(f"Document not found: {doc_id}")
        return self.documents[doc_id]

    def save(self, doc_id):
        self.calls.append(('save', doc_id))

    def write_all(self, doc_id, data):
        self.calls.append(('write_all', doc_id))
        self.documents[doc_id] = data.decode('utf-8')


class RecordingChannel:
    def __init__(self):
        self.events = []

    def emit(self, event, payload):
        self.events.append((event, payload))


@pytest.fixture
def story():
    return STORY


@pytest.fixture
def memory_store():
    return MemoryStore({'story.twee': STORY})


@pytest.fixture
def channel():
    return RecordingChannel()


@pytest.fixture
def story_dir(tmp_path):
    """A story folder with two Twee files and one unrelated file."""
    (tmp_path / 'story.twee').write_text(STORY, encoding='utf-8')
    chapter = tmp_path / 'chapter2'
    chapter.mkdir()
    (chapter / 'ending.twee').write_text(
        ':: Ending {"position":"400,100"}\nGo [[Start]] again.\n',
        encoding='utf-8',
    )
    (tmp_path / 'notes.txt').write_text(':: NotAPassage\n', encoding='utf-8')
    return tmp_path
