#!/usr/bin/env python3
"""
Tests for twee_bridge/sync.py

Tests the passages broadcast and batch header updates against in-memory
collaborators.
"""

import jsonschema
import pytest

from twee_bridge.errors import DocumentStoreError, PassageNotFoundError
from twee_bridge.models import PassageDescriptor, PositionUpdate, Vector
from twee_bridge.registry import TweeRegistry
from twee_bridge.service import PASSAGES_PAYLOAD_SCHEMA
from twee_bridge.sync import (
    PASSAGES_EVENT,
    collect_passages,
    linked_passage_names,
    send_passages_to_client,
    update_passages,
)


def test_send_passages_emits_payload(memory_store, channel):
    registry = TweeRegistry(memory_store, ['story.twee'])
    payload = send_passages_to_client(registry, memory_store, channel)

    assert len(channel.events) == 1
    event, emitted = channel.events[0]
    assert event == PASSAGES_EVENT == 'passages'
    assert emitted == payload
    jsonschema.validate(instance=payload, schema=PASSAGES_PAYLOAD_SCHEMA)

    by_name = {record['name']: record for record in payload}
    assert by_name['Start'] == {
        'origin': 'story.twee',
        'name': 'Start',
        'tags': ['intro'],
        'meta': {'position': '100,100'},
        'linksToNames': ['Cave Mouth', 'Sleep'],
    }
    assert by_name['Cave Mouth']['linksToNames'] == ['Back', 'Return']
    assert by_name['Sleep']['linksToNames'] == []


def test_collect_passages_reads_each_document_once(memory_store):
    passages = TweeRegistry(memory_store, ['story.twee']).list_passages()
    memory_store.calls.clear()
    records = collect_passages(passages, memory_store)
    assert len(records) == 4
    assert memory_store.calls == [('open', 'story.twee')]


def test_collect_passages_missing_header_raises(memory_store):
    passages = [PassageDescriptor(name='Gone', origin='story.twee')]
    with pytest.raises(PassageNotFoundError):
        collect_passages(passages, memory_store)


def test_collect_passages_skip_missing(memory_store):
    passages = [
        PassageDescriptor(name='Gone', origin='story.twee'),
        PassageDescriptor(name='Sleep', origin='story.twee'),
    ]
    records = collect_passages(passages, memory_store, skip_missing=True)
    assert [record.name for record in records] == ['Sleep']


def test_linked_passage_names(memory_store):
    passage = PassageDescriptor(name='Start', origin='story.twee')
    assert linked_passage_names(memory_store, passage) == ['Cave Mouth', 'Sleep']


def test_update_passages_reads_every_document_before_writing(memory_store):
    memory_store.documents['other.twee'] = ':: Other\nText\n'
    updates = [
        PositionUpdate('Start', 'story.twee', Vector(1, 2), Vector(100, 100), ['intro']),
        PositionUpdate('Other', 'other.twee', Vector(3, 4), Vector(200, 100)),
        PositionUpdate('Sleep', 'story.twee', Vector(5, 6), Vector(100, 100)),
    ]

    origins = update_passages(updates, memory_store)

    assert origins == ['story.twee', 'other.twee']
    assert memory_store.calls == [
        ('save', 'story.twee'), ('open', 'story.twee'),
        ('save', 'other.twee'), ('open', 'other.twee'),
        ('write_all', 'story.twee'), ('write_all', 'other.twee'),
    ]
    story = memory_store.documents['story.twee']
    assert ':: Start [intro] {"position":"1,2"}\n' in story
    assert ':: Sleep {"position":"5,6"}\n' in story
    assert memory_store.documents['other.twee'] == ':: Other {"position":"3,4","size":"200,100"}\nText\n'


def test_update_passages_missing_passage_leaves_text(memory_store, story):
    update_passages([PositionUpdate('Gone', 'story.twee', Vector(1, 2))], memory_store)
    assert memory_store.documents['story.twee'] == story


def test_update_passages_empty_batch(memory_store):
    assert update_passages([], memory_store) == []
    assert memory_store.calls == []


def test_update_passages_unknown_document_writes_nothing(memory_store, story):
    updates = [
        PositionUpdate('Start', 'story.twee', Vector(1, 2)),
        PositionUpdate('Other', 'missing.twee', Vector(3, 4)),
    ]
    with pytest.raises(DocumentStoreError):
        update_passages(updates, memory_store)
    assert memory_store.documents['story.twee'] == story
    assert not [call for call in memory_store.calls if call[0] == 'write_all']
