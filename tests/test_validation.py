import pytest

from inspection_core.src.errors import DuplicateFleetNumber, MalformedRecord
from inspection_core.src.fleet import build_roster, with_last_inspection
from inspection_core.src.validation import validate_record

from factories import BUS, TRAM, full_record, make_record, make_result


def test_complete_record_passes(catalog):
    record = full_record(catalog, failing={"b2"})
    assert validate_record(record, catalog) is record


def test_missing_item_rejected(catalog):
    record = full_record(catalog)
    partial = record.model_copy(update={"results": record.results[:-1]})
    with pytest.raises(MalformedRecord) as exc:
        validate_record(partial, catalog)
    assert exc.value.missing_ids == ["b10"]
    assert exc.value.unknown_ids == []


def test_unknown_item_rejected(catalog):
    record = full_record(catalog, vehicle=TRAM)
    extra = record.model_copy(update={"results": record.results + [make_result("b1")]})
    with pytest.raises(MalformedRecord) as exc:
        validate_record(extra, catalog)
    assert exc.value.unknown_ids == ["b1"]


def test_duplicate_item_rejected(catalog):
    record = full_record(catalog, vehicle=TRAM)
    doubled = record.model_copy(update={"results": record.results + [record.results[0]]})
    with pytest.raises(MalformedRecord) as exc:
        validate_record(doubled, catalog)
    assert exc.value.duplicate_ids == ["t1"]


def test_empty_results_rejected(catalog):
    with pytest.raises(MalformedRecord) as exc:
        validate_record(make_record(results=[]), catalog)
    assert "no results" in str(exc.value)
    assert len(exc.value.missing_ids) == 10


def test_roster_indexes_by_fleet_number():
    roster = build_roster([BUS, TRAM])
    assert list(roster) == ["2401", "505"]


def test_roster_rejects_duplicates():
    with pytest.raises(DuplicateFleetNumber):
        build_roster([BUS, TRAM, BUS.model_copy(update={"station": "Pontinha"})])


def test_last_inspection_only_moves_forward():
    never = BUS.model_copy(update={"last_inspection_date": ""})
    assert with_last_inspection(never, "2023-10-25").last_inspection_date == "2023-10-25"

    recent = BUS.model_copy(update={"last_inspection_date": "2023-10-26"})
    assert with_last_inspection(recent, "2023-10-20") is recent
    assert with_last_inspection(recent, "2023-11-02").last_inspection_date == "2023-11-02"
