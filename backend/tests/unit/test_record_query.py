"""Unit tests for the record query engine."""

from datetime import datetime, timedelta, timezone

from app.application.services.record_query import matches, view
from app.domain.entities import ClientRecord

_T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _record(name: str, phone: str = "11999990000", email: str = "", minutes: int = 0) -> ClientRecord:
    return ClientRecord(
        name=name,
        phone=phone,
        email=email,
        created_at=_T0 + timedelta(minutes=minutes),
    )


def test_empty_query_returns_everything_newest_first():
    a = _record("Ana", minutes=0)
    b = _record("Bruno", minutes=10)
    c = _record("Carla", minutes=5)

    assert view([a, b, c], "") == [b, c, a]


def test_name_match_is_case_insensitive():
    records = [_record("Ana Souza"), _record("Bruno Lima")]

    result = view(records, "SOUZA")

    assert [r.name for r in result] == ["Ana Souza"]


def test_phone_substring_matches():
    records = [_record("Ana", phone="(11) 98765-4321"), _record("Bruno", phone="21 3333-0000")]

    result = view(records, "98765")

    assert [r.name for r in result] == ["Ana"]


def test_email_matches_case_insensitively():
    record = _record("Ana", email="Ana@JMCouros.com.br")

    assert matches(record, "jmcouros")


def test_blank_email_never_matches_on_its_own():
    record = _record("Ana", phone="123", email="")

    assert not matches(record, "@")


def test_query_without_hits_returns_empty_list():
    assert view([_record("Ana"), _record("Bruno")], "zzz") == []


def test_view_does_not_mutate_input():
    a = _record("Ana", minutes=0)
    b = _record("Bruno", minutes=1)
    records = [a, b]

    view(records, "")

    assert records == [a, b]


def test_every_visible_record_matches_and_order_is_non_increasing():
    records = [_record(f"Cliente {i}", minutes=(i * 7) % 11) for i in range(12)]

    result = view(records, "cliente 1")

    assert all(matches(r, "cliente 1") for r in result)
    assert all(
        result[i].created_at >= result[i + 1].created_at for i in range(len(result) - 1)
    )
    assert {r.id for r in result} == {r.id for r in records if matches(r, "cliente 1")}
