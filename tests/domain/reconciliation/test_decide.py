from __future__ import annotations

from mediafixer.domain.mapping import build_mapping, empty_mapping
from mediafixer.domain.model import AltSource, MappingEntry, RecordOutcome
from mediafixer.domain.ports import MappingRow
from mediafixer.domain.reconciliation import FixSettings, decide_alt, decide_record
from tests.helpers.media import FakeContent, FakeMediaStore, make_attachment


def test_unmapped_record_is_left_alone_under_a_mapping() -> None:
    record = make_attachment(1, "IMG_1", parent_id=10)
    store = FakeMediaStore.with_records([record], [FakeContent(id=10, title="Post")])
    mapping = build_mapping([MappingRow(attachment_id=2, proposed_title="Other")])

    decision = decide_record(
        record,
        settings=FixSettings.build(update_alt=True),
        mapping=mapping,
        store=store,
    )

    assert decision.outcome is RecordOutcome.NOT_MAPPED
    assert not decision.has_writes


def test_deciding_does_not_write() -> None:
    record = make_attachment(1, "IMG_1", parent_id=10)
    store = FakeMediaStore.with_records([record], [FakeContent(id=10, title="Post")])

    decision = decide_record(
        record,
        settings=FixSettings.build(execute=True, update_alt=True),
        mapping=empty_mapping(),
        store=store,
    )

    assert decision.outcome is RecordOutcome.TITLE_FIX
    assert decision.title_action is not None
    assert decision.title_action.new_title == "Post"
    assert decision.title_action.keep_slug == "attachment-1"
    assert decision.alt_action is not None
    assert decision.alt_action.new_alt == "Post"
    assert store.title_writes == []
    assert store.alt_writes == []


def test_good_title_and_alt_need_nothing() -> None:
    record = make_attachment(1, "Harbour at dawn", alt="Boats in the harbour")
    store = FakeMediaStore.with_records([record])

    decision = decide_record(
        record,
        settings=FixSettings.build(update_alt=True),
        mapping=empty_mapping(),
        store=store,
    )

    assert decision.outcome is RecordOutcome.TITLE_OK
    assert not decision.has_writes


def test_alt_is_ignored_without_update_alt() -> None:
    record = make_attachment(1, "Harbour at dawn", alt="")
    store = FakeMediaStore.with_records([record])

    decision = decide_record(
        record,
        settings=FixSettings.build(),
        mapping=empty_mapping(),
        store=store,
    )

    assert decision.alt_action is None


def test_mapping_alt_equal_to_current_alt_is_skipped() -> None:
    record = make_attachment(1, "Harbour", alt=" Boats ")

    action = decide_alt(
        record,
        entry=MappingEntry(record_id=1, proposed_alt="Boats"),
        target_title=None,
        filename="",
        min_length=3,
    )

    assert action is None


def test_mapping_alt_is_marked_as_mapped() -> None:
    record = make_attachment(1, "Harbour", alt="")

    action = decide_alt(
        record,
        entry=MappingEntry(record_id=1, proposed_alt="Boats"),
        target_title=None,
        filename="",
        min_length=3,
    )

    assert action is not None
    assert action.source is AltSource.MAPPING


def test_weird_alt_with_weird_title_falls_back_to_file_name() -> None:
    record = make_attachment(1, "", alt="IMG_1")

    action = decide_alt(
        record,
        entry=None,
        target_title=None,
        filename="harbour at dawn",
        min_length=3,
    )

    assert action is not None
    assert action.new_alt == "harbour at dawn"
    assert action.source is AltSource.HEURISTIC
