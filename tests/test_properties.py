import pytest

from pocket_sdk.errors import SubmissionFailure
from pocket_sdk.tx.params import (DepositParams, GetPocketParams,
                                  SetAllowedOperatorParams,
                                  SetInteractiveTargetParams)
from pocket_sdk.types.events import EventName, EventReason
from pocket_sdk.types.pocket import (AutoCloseCondition,
                                     AutoCloseConditionClosedWith,
                                     OpenPositionOperator, PocketStatus,
                                     StopConditionStoppedWith)
from pocket_sdk.types.response import transform_pocket
from pocket_sdk.utils import bcs


def _get(ctx, pocket_id):
    return transform_pocket(ctx.owner_builder.build_get_pocket(GetPocketParams(id=pocket_id)).execute()[0])


def test_created_pocket_starts_active_and_empty(ctx):
    ctx.owner_builder.build_create_pocket_transaction(
        ctx.create_params("p1", batch_volume=1_000, frequency=3_600)
    ).execute()

    pocket = _get(ctx, "p1")
    assert pocket.status is PocketStatus.ACTIVE
    assert pocket.base_coin_balance == 0
    assert pocket.next_scheduled_execution_at == pocket.start_at
    assert pocket.open_position_condition.operator is OpenPositionOperator.UNSET
    assert pocket.stop_loss_condition.stopped_with is StopConditionStoppedWith.UNSET
    assert pocket.take_profit_condition.stopped_with is StopConditionStoppedWith.UNSET
    assert pocket.auto_close_conditions == ()


def test_deposits_accumulate_and_emit_one_event_each(ctx):
    owner = ctx.owner_builder
    owner.build_create_pocket_transaction(ctx.create_params("p1")).execute()
    for _ in range(2):
        owner.build_deposit_transaction(DepositParams(id="p1", coin_type=ctx.base_coin, amount=10_000)).execute()

    pocket = _get(ctx, "p1")
    assert pocket.total_deposited_base_amount == 20_000
    assert pocket.base_coin_balance == 20_000

    deposits = ctx.indexer.get_update_deposit_stats_events()
    assert [e.data.amount for e in deposits] == [10_000, 10_000]
    assert all(e.data.reason is EventReason.USER_DEPOSITED_ASSET for e in deposits)
    assert all(e.data.id == "p1" for e in deposits)


def test_pause_restart_close_status_trail(ctx):
    owner = ctx.owner_builder
    pid = GetPocketParams(id="p1")
    owner.build_create_pocket_transaction(ctx.create_params("p1")).execute()

    owner.build_pause_pocket_transaction(pid).execute()
    owner.build_restart_pocket_transaction(pid).execute()
    owner.build_close_pocket_transaction(pid).execute()

    assert _get(ctx, "p1").status is PocketStatus.CLOSED
    statuses = [e.data.status for e in ctx.indexer.get_update_pocket_status_events()]
    assert statuses == [PocketStatus.PAUSED, PocketStatus.ACTIVE, PocketStatus.CLOSED]


def test_closed_pocket_cannot_be_paused_on_chain(ctx):
    owner = ctx.owner_builder
    pid = GetPocketParams(id="p1")
    owner.build_create_pocket_transaction(ctx.create_params("p1")).execute()
    owner.build_close_pocket_transaction(pid).execute()
    ctx.ledger.force_simulation_success = True

    with pytest.raises(SubmissionFailure) as ei:
        owner.build_pause_pocket_transaction(pid).execute()

    assert ei.value.abort_name == "E_INVALID_STATUS"
    assert _get(ctx, "p1").status is PocketStatus.CLOSED


@pytest.mark.parametrize(
    "make",
    [
        lambda ctx: ctx.builder(ctx.stranger).build_set_operator_transaction(
            SetAllowedOperatorParams(target=ctx.stranger.address().hex(), value=True)
        ),
        lambda ctx: ctx.builder(ctx.operator).build_set_interactive_target_transaction(
            SetInteractiveTargetParams(target="0x1::x::Y", value=True)
        ),
    ],
)
def test_unprivileged_admin_calls_fail_on_chain(ctx, make):
    ctx.ledger.force_simulation_success = True
    with pytest.raises(SubmissionFailure) as ei:
        make(ctx).execute()
    assert ei.value.abort_name == "E_NOT_ADMIN"
    assert ei.value.abort_code == 0x50001


def test_adjacent_pages_concatenate_without_overlap(ctx):
    owner = ctx.owner_builder
    for i in range(7):
        owner.build_create_pocket_transaction(ctx.create_params(f"p{i}")).execute()

    everything = ctx.indexer.get_create_pocket_events(start=0, limit=100)
    first = ctx.indexer.get_create_pocket_events(start=0, limit=3)
    second = ctx.indexer.get_create_pocket_events(start=3, limit=3)
    third = ctx.indexer.get_create_pocket_events(start=6, limit=3)

    assert [e.sequence_number for e in first + second + third] == [e.sequence_number for e in everything]
    assert [e.data.pocket.id for e in everything] == [f"p{i}" for i in range(7)]
    assert ctx.indexer.get_create_pocket_events(start=7, limit=3) == []
    assert list(ctx.indexer.iter_events(EventName.CREATE_POCKET, page_size=2)) == everything


def test_auto_close_conditions_flatten_into_one_vector(ctx):
    params = ctx.create_params(
        "p1",
        auto_close_conditions=(AutoCloseCondition(AutoCloseConditionClosedWith.END_TIME, 13),),
    )
    payload = ctx.owner_builder.build_create_pocket_transaction(params).payload

    # id, amm, start_at, frequency, batch_volume, open, take profit, stop loss, auto close
    assert len(payload.args) == 9
    assert payload.args[8] == bcs.encode_u64_vector([int(AutoCloseConditionClosedWith.END_TIME), 13])
    assert payload.args[5] == bcs.encode_u64_vector([0, 0, 0])
