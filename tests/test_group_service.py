"""Tests for GroupService (group settlement)."""

from datetime import date

import pytest

from pocketledger.domain.entities import SplitMode
from pocketledger.domain.errors import NotFoundError, PermissionDeniedError, ValidationError
from pocketledger.domain.group import is_settlement
from pocketledger.domain.money import Money


def _splits(expense):
    return {s.member_id: s.amount for s in expense.splits}


def test_create_group_adds_owner_as_member(group_service, sample_user):
    group_id = group_service.create_group(sample_user.id, "Flat")

    members = group_service.list_members(group_id)
    assert [(m.name, m.user_id) for m in members] == [("Ana", sample_user.id)]
    assert group_service.get_group(group_id).icon == "💸"


def test_add_member_by_email_links_account(group_service, user_service, sample_group):
    bob_id = user_service.register("bob@example.com", "Bob")

    member_id = group_service.add_member(sample_group.id, "BOB@example.com")

    member = next(m for m in group_service.list_members(sample_group.id) if m.id == member_id)
    assert member.name == "Bob"
    assert member.user_id == bob_id


def test_add_member_unknown_email(group_service, sample_group):
    with pytest.raises(NotFoundError):
        group_service.add_member(sample_group.id, "ghost@example.com")


def test_add_member_by_name_is_unlinked(group_service, sample_group, member_ids):
    members = group_service.list_members(sample_group.id)

    assert [m.name for m in members] == ["Ana", "Bruno", "Carla"]
    assert members[1].user_id is None


def test_equal_split_scenario(group_service, sample_group, member_ids):
    """300.00 paid by A among A, B, C gives 100.00 each."""
    expense_id = group_service.create_expense(
        sample_group.id, "Asado", "300.00", payer_id=member_ids[0], split_mode=SplitMode.EQUAL
    )

    expense = group_service.get_expense(expense_id)
    assert _splits(expense) == {member_id: Money.of(100) for member_id in member_ids}
    assert Money.total(_splits(expense).values()) == expense.amount
    assert not expense.is_settlement


def test_manual_split_rejection_persists_nothing(group_service, sample_group, member_ids):
    with pytest.raises(ValidationError):
        group_service.create_expense(
            sample_group.id,
            "Cena",
            "100.00",
            payer_id=member_ids[0],
            split_mode="manual",
            member_amounts=[(member_ids[0], "50.00"), (member_ids[1], "40.00")],
        )

    assert group_service.list_expenses(sample_group.id) == []


def test_manual_split_within_one_unit_is_accepted(group_service, sample_group, member_ids):
    expense_id = group_service.create_expense(
        sample_group.id,
        "Taxi",
        "100.00",
        payer_id=member_ids[1],
        split_mode=SplitMode.MANUAL,
        member_amounts=[(m, "33.33") for m in member_ids],
    )

    assert Money.total(_splits(group_service.get_expense(expense_id)).values()) == Money.of("99.99")


def test_settlement_reduces_outstanding_and_clamps(group_service, sample_group, member_ids):
    group_service.create_expense(sample_group.id, "Hotel", "350.00", member_ids[0])
    group_service.create_expense(sample_group.id, "Nafta", "150.00", member_ids[1])
    assert group_service.compute_outstanding_balance(sample_group.id) == Money.of(500)

    group_service.create_expense(
        sample_group.id, "", "500.00", member_ids[2], split_mode=SplitMode.FULL_REIMBURSE
    )
    assert group_service.compute_outstanding_balance(sample_group.id) == Money.zero()

    group_service.create_expense(
        sample_group.id, "Pago extra", "80.00", member_ids[2], split_mode=SplitMode.FULL_REIMBURSE
    )
    assert group_service.compute_outstanding_balance(sample_group.id) == Money.zero()


def test_full_reimburse_defaults_description_and_zero_payer_split(group_service, sample_group, member_ids):
    expense_id = group_service.create_expense(
        sample_group.id,
        "  ",
        "90.00",
        member_ids[0],
        split_mode=SplitMode.FULL_REIMBURSE,
        date=date(2024, 4, 9),
    )

    expense = group_service.get_expense(expense_id)
    assert expense.description == "Liquidación 2024-04"
    assert expense.is_settlement
    splits = _splits(expense)
    assert splits[member_ids[0]] == Money.zero()
    assert splits[member_ids[1]] + splits[member_ids[2]] == Money.of(90)


def test_legacy_marker_counts_as_settlement(group_service, sample_group, member_ids):
    """An unflagged entry whose description carries the marker is a settlement."""
    group_service.create_expense(sample_group.id, "Hotel", "200.00", member_ids[0])
    group_service.create_expense(sample_group.id, "LIQUIDACIÓN marzo", "150.00", member_ids[1])

    assert group_service.compute_outstanding_balance(sample_group.id) == Money.of(50)


def test_is_settlement_with_custom_marker(group_service, sample_group, member_ids):
    expense = group_service.get_expense(
        group_service.create_expense(sample_group.id, "settle up", "10.00", member_ids[0])
    )

    assert not is_settlement(expense, marker="liquidación")
    assert is_settlement(expense, marker="settle")


def test_outstanding_respects_period(group_service, sample_group, member_ids):
    group_service.create_expense(sample_group.id, "Enero", "100.00", member_ids[0], date=date(2024, 1, 10))
    group_service.create_expense(sample_group.id, "Febrero", "40.00", member_ids[0], date=date(2024, 2, 10))

    outstanding = group_service.compute_outstanding_balance(
        sample_group.id, date(2024, 2, 1), date(2024, 2, 29)
    )

    assert outstanding == Money.of(40)


def test_update_expense_replaces_all_splits(group_service, sample_group, member_ids):
    expense_id = group_service.create_expense(
        sample_group.id, "Super", "90.00", member_ids[0], date=date(2024, 3, 3)
    )

    group_service.update_expense(
        expense_id,
        "Super (solo Bruno y Carla)",
        "60.00",
        member_ids[1],
        split_mode=SplitMode.EQUAL,
        participant_ids=[member_ids[1], member_ids[2]],
    )

    expense = group_service.get_expense(expense_id)
    assert _splits(expense) == {member_ids[1]: Money.of(30), member_ids[2]: Money.of(30)}
    assert expense.amount == Money.of(60)
    assert expense.payer_id == member_ids[1]
    assert expense.date == date(2024, 3, 3)


def test_update_expense_invalid_keeps_previous(group_service, sample_group, member_ids):
    expense_id = group_service.create_expense(sample_group.id, "Super", "90.00", member_ids[0])

    with pytest.raises(ValidationError):
        group_service.update_expense(
            expense_id, "Super", "90.00", member_ids[0], "manual", member_amounts=[(member_ids[0], 10)]
        )

    assert _splits(group_service.get_expense(expense_id)) == {m: Money.of(30) for m in member_ids}


def test_expense_validation(group_service, sample_group, member_ids):
    with pytest.raises(ValidationError):
        group_service.create_expense(sample_group.id, "Gratis", "0", member_ids[0])
    with pytest.raises(ValidationError):
        group_service.create_expense(sample_group.id, "", "10.00", member_ids[0])
    with pytest.raises(ValidationError):
        group_service.create_expense(sample_group.id, "Algo", "10.00", member_ids[0], split_mode="weird")
    with pytest.raises(NotFoundError):
        group_service.create_expense(sample_group.id, "Algo", "10.00", payer_id=999)
    with pytest.raises(NotFoundError):
        group_service.create_expense(999, "Algo", "10.00", member_ids[0])


def test_delete_group_cascades(group_service, temp_db, sample_user, sample_group, member_ids):
    expense_id = group_service.create_expense(sample_group.id, "Hotel", "300.00", member_ids[0])

    group_service.delete_group(sample_group.id, sample_user.id)

    assert group_service.get_group(sample_group.id) is None
    assert temp_db.list_group_members(sample_group.id) == []
    assert temp_db.list_group_expenses(sample_group.id) == []
    assert temp_db.get_group_expense(expense_id) is None


def test_delete_group_requires_owner(group_service, user_service, sample_group):
    intruder_id = user_service.register("eve@example.com", "Eve")

    with pytest.raises(PermissionDeniedError):
        group_service.delete_group(sample_group.id, intruder_id)

    assert group_service.get_group(sample_group.id) is not None


def test_group_detail_and_counts(group_service, sample_user, sample_group, member_ids):
    group_service.create_expense(sample_group.id, "Marzo", "30.00", member_ids[0], date=date(2024, 3, 5))
    group_service.create_expense(sample_group.id, "Abril", "60.00", member_ids[0], date=date(2024, 4, 5))

    detail = group_service.get_group_detail(sample_group.id, year=2024, month=4)
    assert [e.description for e in detail.expenses] == ["Abril"]
    assert len(detail.members) == 3

    everything = group_service.get_group_detail(sample_group.id)
    assert [e.description for e in everything.expenses] == ["Abril", "Marzo"]

    listed = group_service.list_groups(sample_user.id)
    assert (listed[0].member_count, listed[0].expense_count) == (3, 2)


def test_member_positions(group_service, sample_group, member_ids):
    group_service.create_expense(sample_group.id, "Hotel", "300.00", member_ids[0])

    positions = {p.member_id: p for p in group_service.member_positions(sample_group.id)}

    assert positions[member_ids[0]].paid == Money.of(300)
    assert positions[member_ids[0]].net == Money.of(200)
    assert positions[member_ids[1]].net == Money.of(-100)


def _broken(*args, **kwargs):
    raise RuntimeError("connection lost")


def test_failed_split_write_persists_no_expense(
    group_service, temp_db, sample_group, member_ids, monkeypatch
):
    """If the splits cannot be written, the expense row is rolled back too."""
    monkeypatch.setattr(temp_db, "add_expense_splits", _broken)

    with pytest.raises(RuntimeError):
        group_service.create_expense(sample_group.id, "Hotel", "300.00", member_ids[0])

    monkeypatch.undo()
    assert group_service.list_expenses(sample_group.id) == []


def test_failed_expense_update_keeps_previous_splits(
    group_service, temp_db, sample_group, member_ids, monkeypatch
):
    """A failure after the splits were replaced restores the old expense and splits."""
    expense_id = group_service.create_expense(sample_group.id, "Dinner", "300.00", member_ids[0])
    monkeypatch.setattr(temp_db, "update_group_expense", _broken)

    with pytest.raises(RuntimeError):
        group_service.update_expense(expense_id, "Dinner", "90.00", member_ids[1])

    monkeypatch.undo()
    expense = group_service.get_expense(expense_id)
    assert expense.amount == Money.of(300)
    assert expense.payer_id == member_ids[0]
    assert _splits(expense) == {m: Money.of(100) for m in member_ids}


def test_failed_group_delete_keeps_everything(
    group_service, temp_db, sample_user, sample_group, member_ids, monkeypatch
):
    """A failure midway through the cascade leaves group, members, expenses and splits."""
    expense_id = group_service.create_expense(sample_group.id, "Hotel", "300.00", member_ids[0])
    monkeypatch.setattr(temp_db, "delete_group_members", _broken)

    with pytest.raises(RuntimeError):
        group_service.delete_group(sample_group.id, sample_user.id)

    monkeypatch.undo()
    assert group_service.get_group(sample_group.id) is not None
    assert [m.id for m in group_service.list_members(sample_group.id)] == member_ids
    assert _splits(group_service.get_expense(expense_id)) == {m: Money.of(100) for m in member_ids}
